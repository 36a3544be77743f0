# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       tcpip
"""
from typing import Any

from .base import RelayException
from ..common.types import HostPort


class TransportException(RelayException):
    """Base class for errors raised while acquiring a listener."""

    def __init__(self, addr: HostPort, reason: str, **kwargs: Any) -> None:
        self.addr: HostPort = addr
        self.reason: str = reason
        super().__init__(
            '%s %s:%d %s' % (self.__class__.__name__, addr[0], addr[1], reason),
            **kwargs,
        )


class BindError(TransportException):
    """Unable to bind a local listening socket."""
    pass


class AuthError(TransportException):
    """None of the SSH authentication methods succeeded."""
    pass


class DialError(TransportException):
    """Network or handshake failure while reaching the SSH host."""
    pass


class ForwardError(TransportException):
    """Remote host refused the ``tcpip-forward`` request."""
    pass


class ListenerFailed(TransportException):
    """Accepting on a previously acquired listener failed.

    Raised by the serve loop, e.g. after the SSH session went away."""
    pass
