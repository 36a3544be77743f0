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
from .config import ConfigError
from .transport import (
    TransportException, BindError, AuthError, DialError,
    ForwardError, ListenerFailed,
)
from .policy_violation import PolicyViolation
from .socks import SocksProtocolError


__all__ = [
    'RelayException',
    'ConfigError',
    'TransportException',
    'BindError',
    'AuthError',
    'DialError',
    'ForwardError',
    'ListenerFailed',
    'PolicyViolation',
    'SocksProtocolError',
]
