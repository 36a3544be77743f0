# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import Any, Optional

from .base import RelayException


class SocksProtocolError(RelayException):
    """Malformed or unsupported SOCKS5 client input.

    ``reply``, when set, is the reply code to send the client
    before closing the connection."""

    def __init__(self, message: str, reply: Optional[int] = None, **kwargs: Any) -> None:
        self.reply = reply
        super().__init__(message, **kwargs)
