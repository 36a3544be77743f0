# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       utils
"""
import socket
import logging
import ipaddress

from typing import Any, List, Tuple, Union, Iterable, Optional

from .types import IpAddress
from .constants import COMMA, IS_WINDOWS

if not IS_WINDOWS:
    import resource

logger = logging.getLogger(__name__)


def text_(s: Any, encoding: str = 'utf-8', errors: str = 'strict') -> Any:
    """Utility to ensure text-like usability.

    If s is of type bytes or int, return s.decode(encoding, errors),
    otherwise return s as it is."""
    if isinstance(s, int):
        return str(s)
    if isinstance(s, bytes):
        return s.decode(encoding, errors)
    return s


def normalize_ip(ip: Union[str, bytes, IpAddress]) -> IpAddress:
    """Parse ``ip`` into an address object.

    IPv4-mapped IPv6 addresses (``::ffff:a.b.c.d``) collapse to their
    IPv4 form, so that a client reaching a dual-stack listener compares
    equal to its plain IPv4 address.

    Raises ``ValueError`` for anything that is not an IP literal."""
    address = ipaddress.ip_address(text_(ip))
    if isinstance(address, ipaddress.IPv6Address) \
            and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def split_csv(values: Optional[Iterable[Any]]) -> List[str]:
    """Flattens repeated and comma separated flag values.

    ``['a,b', ['c']]`` becomes ``['a', 'b', 'c']``.  Empty items are dropped."""
    flat: List[str] = []
    for value in values or []:
        if isinstance(value, (list, tuple)):
            flat.extend(split_csv(value))
            continue
        flat.extend(
            item.strip()
            for item in text_(value).split(COMMA)
            if item.strip() != ''
        )
    return flat


def new_socket_connection(
        addr: Tuple[str, int],
        timeout: Optional[float] = None,
) -> socket.socket:
    """Connects to ``addr`` trying an exact address family first
    and falling back to dual stack resolution for host names."""
    conn = None
    try:
        ip = ipaddress.ip_address(addr[0])
        if ip.version == 4:
            conn = socket.socket(
                socket.AF_INET, socket.SOCK_STREAM, 0,
            )
            conn.settimeout(timeout)
            conn.connect(addr)
        else:
            conn = socket.socket(
                socket.AF_INET6, socket.SOCK_STREAM, 0,
            )
            conn.settimeout(timeout)
            conn.connect((addr[0], addr[1], 0, 0))
    except ValueError:
        pass    # does not appear to be an IPv4 or IPv6 address
    except OSError:
        if conn is not None:
            conn.close()
        raise

    if conn is not None:
        return conn

    # try to establish dual stack IPv4/IPv6 connection.
    return socket.create_connection(addr, timeout=timeout)


def set_open_file_limit(soft_limit: int) -> None:
    """Configure open file description soft limit on supported OS."""
    if IS_WINDOWS:  # resource module not available on Windows OS
        return

    curr_soft_limit, curr_hard_limit = resource.getrlimit(
        resource.RLIMIT_NOFILE,
    )
    if curr_soft_limit < soft_limit < curr_hard_limit:
        resource.setrlimit(
            resource.RLIMIT_NOFILE, (soft_limit, curr_hard_limit),
        )
        logger.debug(
            'Open file soft limit set to %d', soft_limit,
        )
