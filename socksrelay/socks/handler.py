# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import errno
import socket
import logging
import threading
from typing import Any, Optional

from .rules import Rules, ConnectionRequest
from .packet import Socks5Greeting, Socks5Request, Socks5Reply
from .operations import socks5Methods, socks5Replies, socks5Operations, socks5AddressTypes
from ..common.types import Endpoint, HostPort, Connection
from ..common.utils import normalize_ip, new_socket_connection
from ..common.constants import TRACE, DEFAULT_BUFFER_SIZE
from ..exception import PolicyViolation, SocksProtocolError


logger = logging.getLogger(__name__)


class SocksProtocolHandler:
    """Serves a single SOCKS5 client connection.

    Reference https://www.rfc-editor.org/rfc/rfc1928

    Authorization is always decided before any byte is relayed.
    Every failure is handled here and never reaches the serve loop."""

    def __init__(
            self,
            client: Connection,
            addr: HostPort,
            rules: Rules,
            buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.client = client
        self.addr = addr
        self.rules = rules
        self.buffer_size = buffer_size
        self.upstream: Optional[socket.socket] = None

    def run(self) -> None:
        try:
            self.handle()
        except PolicyViolation as e:
            logger.info('%s', e)
        except SocksProtocolError as e:
            logger.debug('Protocol error from %s:%d: %s', self.addr[0], self.addr[1], e)
        except (OSError, EOFError) as e:
            logger.debug('Connection error from %s:%d: %s', self.addr[0], self.addr[1], e)
        finally:
            self.shutdown()

    def handle(self) -> None:
        greeting = Socks5Greeting()
        greeting.read(self.client)
        if socks5Methods.NO_AUTH not in greeting.methods:
            self.client.sendall(
                Socks5Greeting.pack_selection(socks5Methods.NO_ACCEPTABLE),
            )
            raise SocksProtocolError('No acceptable authentication method')
        self.client.sendall(Socks5Greeting.pack_selection(socks5Methods.NO_AUTH))

        pkt = Socks5Request()
        try:
            pkt.read(self.client)
        except SocksProtocolError as e:
            if e.reply is not None:
                self.reply(e.reply)
            raise
        assert pkt.cmd is not None
        if pkt.cmd not in socks5Operations:
            self.reply(socks5Replies.COMMAND_NOT_SUPPORTED)
            raise SocksProtocolError('Unsupported command %d' % pkt.cmd)

        request = ConnectionRequest(
            source=self.source(),
            destination=self.resolve(pkt),
            operation=pkt.cmd,
        )
        if not self.rules.allow(request):
            self.reply(socks5Replies.NOT_ALLOWED)
            raise PolicyViolation(request)
        if request.operation != socks5Operations.CONNECT:
            self.reply(socks5Replies.COMMAND_NOT_SUPPORTED)
            raise SocksProtocolError('Unsupported command %d' % request.operation)

        self.upstream = self.connect(request.destination)
        self.reply(socks5Replies.SUCCEEDED, self.upstream.getsockname())
        logger.debug(
            'Relaying %s:%d <--> %s:%d',
            request.source.ip, request.source.port,
            request.destination.ip, request.destination.port,
        )
        self.relay()

    def source(self) -> Endpoint:
        try:
            return Endpoint(normalize_ip(self.addr[0]), self.addr[1])
        except ValueError as e:
            # Fail closed, rules cannot decide without a source address
            self.reply(socks5Replies.NOT_ALLOWED)
            raise SocksProtocolError(
                'Unparseable source address %r' % (self.addr[0],),
            ) from e

    def resolve(self, pkt: Socks5Request) -> Endpoint:
        """Destination endpoint, resolving domain names first
        so that rules only ever see IP addresses."""
        assert pkt.dstaddr is not None and pkt.dstport is not None
        if pkt.atyp != socks5AddressTypes.DOMAIN:
            return Endpoint(normalize_ip(pkt.dstaddr), pkt.dstport)
        try:
            infos = socket.getaddrinfo(
                pkt.dstaddr, pkt.dstport, 0, socket.SOCK_STREAM,
            )
        except socket.gaierror as e:
            self.reply(socks5Replies.HOST_UNREACHABLE)
            raise SocksProtocolError(
                'Unable to resolve %s: %s' % (pkt.dstaddr, e),
            ) from e
        sockaddr = infos[0][4]
        return Endpoint(normalize_ip(sockaddr[0]), pkt.dstport)

    def connect(self, destination: Endpoint) -> socket.socket:
        try:
            return new_socket_connection((str(destination.ip), destination.port))
        except OSError as e:
            if isinstance(e, ConnectionRefusedError):
                code = socks5Replies.CONNECTION_REFUSED
            elif e.errno == errno.ENETUNREACH:
                code = socks5Replies.NETWORK_UNREACHABLE
            else:
                code = socks5Replies.HOST_UNREACHABLE
            self.reply(code)
            raise

    def reply(self, rep: int, bound: Optional[Any] = None) -> None:
        self.client.sendall(
            Socks5Reply(rep, (bound[0], bound[1]) if bound else None).pack(),
        )

    def relay(self) -> None:
        assert self.upstream is not None
        upload = threading.Thread(
            target=self.pump,
            args=(self.client, self.upstream, 'client --> upstream'),
            daemon=True,
        )
        upload.start()
        self.pump(self.upstream, self.client, 'upstream --> client')
        upload.join()

    def pump(self, src: Any, dst: Any, direction: str) -> None:
        total = 0
        try:
            while True:
                data = src.recv(self.buffer_size)
                if not data:
                    break
                dst.sendall(data)
                total += len(data)
                logger.log(TRACE, '%s:%d %s %d bytes', self.addr[0], self.addr[1], direction, len(data))
        except OSError as e:
            logger.debug('%s:%d %s failed: %s', self.addr[0], self.addr[1], direction, e)
        finally:
            half_close(dst)
        logger.log(TRACE, '%s:%d %s done, %d bytes total', self.addr[0], self.addr[1], direction, total)

    def shutdown(self) -> None:
        if self.upstream is not None:
            self.upstream.close()
            self.upstream = None
        self.client.close()


def half_close(conn: Any) -> None:
    """Signals end of stream to peer while still reading from it."""
    try:
        if isinstance(conn, socket.socket):
            conn.shutdown(socket.SHUT_WR)
        else:
            conn.shutdown_write()
    except OSError:
        pass    # peer already gone
