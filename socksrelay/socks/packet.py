# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import struct
import ipaddress
from typing import Any, List, Optional

from .operations import socks5AddressTypes, socks5Replies
from ..common.types import HostPort
from ..common.constants import SOCKS_VERSION
from ..exception import SocksProtocolError


def recv_exact(conn: Any, size: int) -> bytes:
    """Reads exactly size bytes from a socket or channel.

    Raises ``EOFError`` if peer closes before that."""
    data = b''
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            raise EOFError('Connection closed after %d of %d bytes' % (len(data), size))
        data += chunk
    return data


class Socks5Greeting:
    """Client method negotiation: ``VER NMETHODS METHODS``."""

    def __init__(self) -> None:
        self.vn: Optional[int] = None
        self.methods: List[int] = []

    def read(self, conn: Any) -> None:
        self.vn, nmethods = struct.unpack('!BB', recv_exact(conn, 2))
        if self.vn != SOCKS_VERSION:
            raise SocksProtocolError('Unsupported SOCKS version %d' % self.vn)
        self.methods = list(recv_exact(conn, nmethods))

    def pack(self) -> bytes:
        return struct.pack('!BB', self.vn or SOCKS_VERSION, len(self.methods)) + \
            bytes(self.methods)

    @staticmethod
    def pack_selection(method: int) -> bytes:
        """Server method selection message."""
        return struct.pack('!BB', SOCKS_VERSION, method)


class Socks5Request:
    """Client request: ``VER CMD RSV ATYP DST.ADDR DST.PORT``.

    ``dstaddr`` holds IP text for IP address types and the
    host name for domain address type."""

    def __init__(self) -> None:
        self.vn: Optional[int] = None
        self.cmd: Optional[int] = None
        self.atyp: Optional[int] = None
        self.dstaddr: Optional[str] = None
        self.dstport: Optional[int] = None

    def read(self, conn: Any) -> None:
        self.vn, self.cmd, _rsv, self.atyp = struct.unpack(
            '!BBBB', recv_exact(conn, 4),
        )
        if self.vn != SOCKS_VERSION:
            raise SocksProtocolError('Unsupported SOCKS version %d' % self.vn)
        if self.atyp == socks5AddressTypes.IPV4:
            self.dstaddr = socket.inet_ntop(socket.AF_INET, recv_exact(conn, 4))
        elif self.atyp == socks5AddressTypes.IPV6:
            self.dstaddr = socket.inet_ntop(socket.AF_INET6, recv_exact(conn, 16))
        elif self.atyp == socks5AddressTypes.DOMAIN:
            size = recv_exact(conn, 1)[0]
            try:
                self.dstaddr = recv_exact(conn, size).decode('utf-8')
            except UnicodeDecodeError as e:
                raise SocksProtocolError(
                    'Invalid domain name', reply=socks5Replies.HOST_UNREACHABLE,
                ) from e
        else:
            raise SocksProtocolError(
                'Unsupported address type %d' % self.atyp,
                reply=socks5Replies.ADDRESS_TYPE_NOT_SUPPORTED,
            )
        self.dstport = struct.unpack('!H', recv_exact(conn, 2))[0]

    def pack(self) -> bytes:
        assert self.cmd is not None and self.atyp is not None
        assert self.dstaddr is not None and self.dstport is not None
        return struct.pack(
            '!BBBB', self.vn or SOCKS_VERSION, self.cmd, 0, self.atyp,
        ) + pack_address(self.atyp, self.dstaddr) + struct.pack('!H', self.dstport)


class Socks5Reply:
    """Server reply: ``VER REP RSV ATYP BND.ADDR BND.PORT``."""

    def __init__(self, rep: int, bound: Optional[HostPort] = None) -> None:
        self.rep = rep
        self.bound: HostPort = bound or ('0.0.0.0', 0)

    def pack(self) -> bytes:
        # Drop IPv6 scope id, e.g. fe80::1%eth0
        ip = ipaddress.ip_address(self.bound[0].split('%')[0])
        atyp = socks5AddressTypes.IPV4 if ip.version == 4 else socks5AddressTypes.IPV6
        return struct.pack('!BBBB', SOCKS_VERSION, self.rep, 0, atyp) + \
            ip.packed + struct.pack('!H', self.bound[1])


def pack_address(atyp: int, addr: str) -> bytes:
    if atyp == socks5AddressTypes.IPV4:
        return socket.inet_pton(socket.AF_INET, addr)
    if atyp == socks5AddressTypes.IPV6:
        return socket.inet_pton(socket.AF_INET6, addr)
    raw = addr.encode('utf-8')
    return struct.pack('!B', len(raw)) + raw
