# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .relay import entry_point


if __name__ == '__main__':
    entry_point()
