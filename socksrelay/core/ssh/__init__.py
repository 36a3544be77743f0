# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .url import SshTarget, parse_ssh_url, redact_url
from .auth import (
    BaseSshAuthMethod, AgentAuth, KeyFileAuth, KeyboardInteractiveAuth,
    PasswordAuth, build_auth_chain, authenticate,
)
from .session import TunnelSession
from .listener import SshTunnelListener


__all__ = [
    'SshTarget',
    'parse_ssh_url',
    'redact_url',
    'BaseSshAuthMethod',
    'AgentAuth',
    'KeyFileAuth',
    'KeyboardInteractiveAuth',
    'PasswordAuth',
    'build_auth_chain',
    'authenticate',
    'TunnelSession',
    'SshTunnelListener',
]
