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
import threading
from typing import Tuple

from .rules import Rules
from .handler import SocksProtocolHandler
from ..core.listener import BaseListener
from ..common.types import HostPort, Connection
from ..common.constants import DEFAULT_BUFFER_SIZE
from ..exception import ListenerFailed


logger = logging.getLogger(__name__)


class SocksServer:
    """SOCKS5 accept loop.

    Every accepted connection is served by a
    :class:`SocksProtocolHandler` in its own thread.  Handlers share
    nothing but the read-only rules."""

    def __init__(self, rules: Rules, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self.rules = rules
        self.buffer_size = buffer_size

    def serve(self, listener: BaseListener) -> None:
        """Blocks accepting connections.

        Returns only by raising :exc:`ListenerFailed` once listener
        stops accepting, e.g. it was closed or the SSH session is gone."""
        while True:
            try:
                conn, addr = listener.accept()
            except OSError as e:
                raise ListenerFailed(listener.address, e.strerror or str(e)) from e
            self.dispatch(conn, addr)

    def dispatch(self, conn: Connection, addr: HostPort) -> Tuple[SocksProtocolHandler, threading.Thread]:
        """Utility method to start a handler in a new thread."""
        handler = SocksProtocolHandler(
            conn, addr, self.rules, buffer_size=self.buffer_size,
        )
        thread = threading.Thread(target=handler.run)
        thread.daemon = True
        thread.start()
        logger.debug(
            'Accepted %s:%d in thread#%s', addr[0], addr[1], thread.ident,
        )
        return (handler, thread)
