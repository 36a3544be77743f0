# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
from typing import Any, Tuple, Iterable, NamedTuple

from typing_extensions import Protocol

from .operations import socks5Operations
from ..common.flag import flags
from ..common.types import Endpoint, IpAddress
from ..common.utils import normalize_ip
from ..common.constants import DEFAULT_ALLOWED_SOURCE_IPS, DEFAULT_ALLOWED_DESTINATION_IPS
from ..exception import ConfigError


flags.add_argument(
    '--source-ips',
    '-s',
    action='append',
    default=DEFAULT_ALLOWED_SOURCE_IPS,
    help='Default: all allowed.  Valid source IP addresses, comma separated. '
    'May be passed multiple times.',
)

flags.add_argument(
    '--dest-ips',
    '-d',
    action='append',
    default=DEFAULT_ALLOWED_DESTINATION_IPS,
    help='Default: all allowed.  Valid destination IP addresses, comma separated. '
    'May be passed multiple times.',
)

logger = logging.getLogger(__name__)


class ConnectionRequest(NamedTuple):
    source: Endpoint
    destination: Endpoint
    operation: int


class Rules(Protocol):
    """Connection gating capability consumed by the SOCKS server."""

    def allow_connect(self, source: Endpoint, destination: Endpoint) -> bool:
        ...     # pragma: no cover

    def allow_bind(self, source: Endpoint, destination: Endpoint) -> bool:
        ...     # pragma: no cover

    def allow_associate(self, source: Endpoint, destination: Endpoint) -> bool:
        ...     # pragma: no cover

    def allow(self, request: ConnectionRequest) -> bool:
        ...     # pragma: no cover


class AllowList:
    """Immutable ordered sequence of IP addresses.

    An empty list is unrestricted and matches every address.
    Otherwise an address matches when it equals one of the entries,
    there is no subnet containment."""

    def __init__(self, addresses: Iterable[IpAddress] = ()) -> None:
        self._addresses: Tuple[IpAddress, ...] = tuple(
            normalize_ip(address) for address in addresses
        )

    @staticmethod
    def parse(values: Iterable[str]) -> 'AllowList':
        """Builds an allow-list from IP literals.

        Raises ``ConfigError`` for host names, networks or garbage."""
        addresses = []
        for value in values:
            try:
                addresses.append(normalize_ip(value))
            except ValueError as e:
                raise ConfigError(
                    'invalid IP address in allow-list: %s' % value,
                ) from e
        return AllowList(addresses)

    @property
    def addresses(self) -> Tuple[IpAddress, ...]:
        return self._addresses

    def is_unrestricted(self) -> bool:
        return len(self._addresses) == 0

    def matches(self, ip: IpAddress) -> bool:
        if self.is_unrestricted():
            return True
        return normalize_ip(ip) in self._addresses

    def __len__(self) -> int:
        return len(self._addresses)

    def __iter__(self) -> Any:
        return iter(self._addresses)

    def __repr__(self) -> str:
        return 'AllowList(%s)' % ', '.join(str(a) for a in self._addresses)


class AuthorizationPolicy:
    """Decides whether a SOCKS request may proceed.

    Only outbound CONNECT is supported, BIND and ASSOCIATE are always
    refused.  Decisions depend on nothing but the request and the two
    allow-lists given at construction."""

    def __init__(
            self,
            source: AllowList = AllowList(),
            destination: AllowList = AllowList(),
    ) -> None:
        self.source = source
        self.destination = destination

    def allow_connect(self, source: Endpoint, destination: Endpoint) -> bool:
        self._log('AllowConnect', source, destination)
        return self.source.matches(source.ip) and \
            self.destination.matches(destination.ip)

    def allow_bind(self, source: Endpoint, destination: Endpoint) -> bool:
        self._log('AllowBind', source, destination)
        return False

    def allow_associate(self, source: Endpoint, destination: Endpoint) -> bool:
        self._log('AllowAssociate', source, destination)
        return False

    def allow(self, request: ConnectionRequest) -> bool:
        if request.operation == socks5Operations.CONNECT:
            return self.allow_connect(request.source, request.destination)
        if request.operation == socks5Operations.BIND:
            return self.allow_bind(request.source, request.destination)
        if request.operation == socks5Operations.ASSOCIATE:
            return self.allow_associate(request.source, request.destination)
        self._log('Allow(%d)' % request.operation, request.source, request.destination)
        return False

    @staticmethod
    def _log(operation: str, source: Endpoint, destination: Endpoint) -> None:
        logger.debug(
            '%s: %s:%d --> %s:%d',
            operation, source.ip, source.port,
            destination.ip, destination.port,
        )
