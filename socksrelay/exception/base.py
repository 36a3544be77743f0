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


class RelayException(Exception):
    """Top level :exc:`RelayException` exception class.

    Startup failures (configuration and transport acquisition) are
    fatal and surface to :func:`socksrelay.relay.main` which prints
    the message and exits non-zero.
    """

    def __init__(self, message: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message or 'Reason unknown')
