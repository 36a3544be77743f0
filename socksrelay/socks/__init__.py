# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .packet import Socks5Greeting, Socks5Request, Socks5Reply
from .operations import (
    Socks5Operations, socks5Operations, socks5AddressTypes,
    socks5Methods, socks5Replies,
)
from .rules import AllowList, AuthorizationPolicy, ConnectionRequest, Rules
from .handler import SocksProtocolHandler
from .server import SocksServer


__all__ = [
    'Socks5Greeting',
    'Socks5Request',
    'Socks5Reply',
    'Socks5Operations',
    'socks5Operations',
    'socks5AddressTypes',
    'socks5Methods',
    'socks5Replies',
    'AllowList',
    'AuthorizationPolicy',
    'ConnectionRequest',
    'Rules',
    'SocksProtocolHandler',
    'SocksServer',
]
