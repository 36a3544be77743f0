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
from typing import Tuple, Optional

from .base import BaseListener
from ...common.flag import flags
from ...common.types import HostPort
from ...common.constants import (
    IS_WINDOWS, DEFAULT_PORT, DEFAULT_BACKLOG, DEFAULT_HOSTNAME,
    DEFAULT_ACCEPT_POLL_TIMEOUT,
)
from ...exception import BindError


flags.add_argument(
    '--host',
    dest='hostname',
    type=str,
    default=DEFAULT_HOSTNAME,
    help='Default: all interfaces. Host to listen on.  With --remote-listener '
    'this is the address bound on the remote host.',
)

flags.add_argument(
    '--port',
    '-p',
    type=int,
    default=DEFAULT_PORT,
    help='Default: 8000.  Port to listen on.',
)

flags.add_argument(
    '--backlog',
    type=int,
    default=DEFAULT_BACKLOG,
    help='Default: 100. Maximum number of pending connections to proxy server.',
)

logger = logging.getLogger(__name__)


class TcpSocketListener(BaseListener):
    """Tcp listener.

    An empty hostname listens on all interfaces, dual stack when
    the platform supports it."""

    def __init__(
            self,
            hostname: str,
            port: int,
            backlog: int = DEFAULT_BACKLOG,
    ) -> None:
        super().__init__(hostname, port)
        self.backlog = backlog
        self._socket: Optional[socket.socket] = None

    def fileno(self) -> Optional[int]:
        if not self._socket:
            return None
        return self._socket.fileno()

    def _resolve(self) -> Tuple[int, Tuple[str, ...]]:
        if not self.hostname:
            if socket.has_dualstack_ipv6():
                return socket.AF_INET6, ('::', self.port)
            return socket.AF_INET, ('0.0.0.0', self.port)
        try:
            infos = socket.getaddrinfo(
                self.hostname, self.port,
                socket.AF_UNSPEC, socket.SOCK_STREAM, 0, socket.AI_PASSIVE,
            )
        except socket.gaierror as e:
            raise BindError(
                (self.hostname, self.port),
                'unable to resolve host: %s' % e,
            ) from e
        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr

    def listen(self) -> None:
        family, sockaddr = self._resolve()
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            if not IS_WINDOWS:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if family == socket.AF_INET6 and not self.hostname:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.bind(sockaddr)
            sock.listen(self.backlog)
        except OSError as e:
            sock.close()
            raise BindError(
                (self.hostname, self.port),
                e.strerror or str(e),
            ) from e
        # Accept wakes up periodically so that a shutdown
        # from another thread is noticed.
        sock.settimeout(DEFAULT_ACCEPT_POLL_TIMEOUT)
        self._socket = sock
        self._port = sock.getsockname()[1]
        logger.info(
            'Listening on %s:%s' %
            (self.hostname or '*', self._port),
        )

    def accept(self) -> Tuple[socket.socket, HostPort]:
        while True:
            if self._socket is None or self._closed:
                raise OSError(errno.EBADF, 'Listener closed')
            try:
                conn, addr = self._socket.accept()
            except socket.timeout:
                continue
            conn.settimeout(None)
            return conn, (addr[0], addr[1])

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            logger.debug('Closed listener on %s:%s', *self.address)
