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
from abc import ABC, abstractmethod
from typing import Any, Tuple, Optional

from ...common.types import HostPort, Connection


logger = logging.getLogger(__name__)


class BaseListener(ABC):
    """Base listener class.

    A listener produces client connections through :meth:`accept`
    until it is shut down.  For usage provide ``listen`` and
    ``accept`` implementations."""

    def __init__(self, hostname: str, port: int) -> None:
        self.hostname = hostname
        self.port = port
        # Set after listen, may differ from requested port
        # when port 0 was asked for.
        self._port: Optional[int] = None
        self._closed = False

    @abstractmethod
    def listen(self) -> None:
        raise NotImplementedError()

    @abstractmethod
    def accept(self) -> Tuple[Connection, HostPort]:
        """Blocks until a client connects.

        Raises ``OSError`` once the listener is closed or broken."""
        raise NotImplementedError()

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError()

    def __enter__(self) -> 'BaseListener':
        self.setup()
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    @property
    def address(self) -> HostPort:
        return (
            self.hostname,
            self._port if self._port is not None else self.port,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def setup(self) -> None:
        self.listen()

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.close()
