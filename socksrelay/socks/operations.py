# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import NamedTuple


Socks5Operations = NamedTuple(
    'Socks5Operations', [
        ('CONNECT', int),
        ('BIND', int),
        ('ASSOCIATE', int),
    ],
)

socks5Operations = Socks5Operations(1, 2, 3)

Socks5AddressTypes = NamedTuple(
    'Socks5AddressTypes', [
        ('IPV4', int),
        ('DOMAIN', int),
        ('IPV6', int),
    ],
)

socks5AddressTypes = Socks5AddressTypes(1, 3, 4)

Socks5Methods = NamedTuple(
    'Socks5Methods', [
        ('NO_AUTH', int),
        ('NO_ACCEPTABLE', int),
    ],
)

socks5Methods = Socks5Methods(0x00, 0xFF)

Socks5Replies = NamedTuple(
    'Socks5Replies', [
        ('SUCCEEDED', int),
        ('GENERAL_FAILURE', int),
        ('NOT_ALLOWED', int),
        ('NETWORK_UNREACHABLE', int),
        ('HOST_UNREACHABLE', int),
        ('CONNECTION_REFUSED', int),
        ('TTL_EXPIRED', int),
        ('COMMAND_NOT_SUPPORTED', int),
        ('ADDRESS_TYPE_NOT_SUPPORTED', int),
    ],
)

socks5Replies = Socks5Replies(0, 1, 2, 3, 4, 5, 6, 7, 8)
