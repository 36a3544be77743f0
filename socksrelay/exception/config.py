# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .base import RelayException


class ConfigError(RelayException):
    """Raised for invalid command line input, e.g. a remote listener
    URL without username or a malformed allow-list entry."""
    pass
