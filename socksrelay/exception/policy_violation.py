# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import TYPE_CHECKING, Any

from .base import RelayException


if TYPE_CHECKING:   # pragma: no cover
    from ..socks.rules import ConnectionRequest


class PolicyViolation(RelayException):
    """A connection request was refused by the rules.

    Expected outcome rather than a fault, handled within the
    connection handler and never propagated to the serve loop."""

    def __init__(self, request: 'ConnectionRequest', **kwargs: Any) -> None:
        self.request = request
        super().__init__(
            '%s %s:%d --> %s:%d' % (
                self.__class__.__name__,
                request.source.ip, request.source.port,
                request.destination.ip, request.destination.port,
            ),
            **kwargs,
        )
