# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import ipaddress
from typing import Tuple, Union, NamedTuple

import paramiko


IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
HostPort = Tuple[str, int]
# A client connection as handed out by listeners.  Local listeners
# yield sockets, SSH tunnel listeners yield paramiko channels.
Connection = Union[socket.socket, paramiko.Channel]

Endpoint = NamedTuple(
    'Endpoint', [
        ('ip', IpAddress),
        ('port', int),
    ],
)
