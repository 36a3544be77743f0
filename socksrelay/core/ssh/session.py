# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import os
import sys
import socket
import logging
import binascii
from typing import Any, List, Optional

import paramiko

from .url import SshTarget
from .auth import BaseSshAuthMethod, authenticate
from .listener import SshTunnelListener
from ...common.types import HostPort
from ...common.utils import new_socket_connection
from ...common.constants import (
    KNOWN_HOSTS_PATH, DEFAULT_SSH_PORT, DEFAULT_SSH_KEEPALIVE_INTERVAL,
)
from ...exception import AuthError, DialError


logger = logging.getLogger(__name__)


class TunnelSession:
    """An authenticated SSH session to the remote listener host.

    Owns the underlying paramiko ``Transport``.  Must be closed
    explicitly, which also shuts down every listener it produced."""

    def __init__(
            self,
            target: SshTarget,
            auth_chain: List[BaseSshAuthMethod],
            keepalive_interval: int = DEFAULT_SSH_KEEPALIVE_INTERVAL,
    ) -> None:
        self.target = target
        self.auth_chain = auth_chain
        self.keepalive_interval = keepalive_interval
        self.transport: Optional[paramiko.Transport] = None
        self.listeners: List[SshTunnelListener] = []

    def __enter__(self) -> 'TunnelSession':
        self.setup()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @property
    def addr(self) -> HostPort:
        return (self.target.hostname, self.target.port)

    def setup(self) -> None:
        self.dial()
        self.authenticate()

    def dial(self) -> None:
        try:
            sock = new_socket_connection(self.addr)
        except OSError as e:
            raise DialError(self.addr, e.strerror or str(e)) from e
        # Enable TCP keep-alive
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        if hasattr(socket, 'TCP_KEEPINTVL'):
            # Keep-alive interval (in seconds)
            if sys.platform != 'darwin':
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 30)
            # Keep-alive probe interval (in seconds)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, 5)
            # Number of keep-alive probes before timeout
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPCNT, 5)
        transport = paramiko.Transport(sock)
        try:
            transport.start_client()
        except (paramiko.SSHException, EOFError, OSError) as e:
            transport.close()
            raise DialError(self.addr, 'SSH handshake failed: %s' % e) from e
        self.transport = transport
        self._verify_host_key()
        transport.set_keepalive(self.keepalive_interval)
        logger.debug('SSH connection established to %s:%d...', *self.addr)

    def _verify_host_key(self) -> None:
        """Known hosts check.

        A mismatching key aborts the session, an unknown host is only
        reported, same as ``paramiko.WarningPolicy``."""
        assert self.transport is not None
        host_keys = paramiko.HostKeys()
        known_hosts = os.path.expanduser(KNOWN_HOSTS_PATH)
        if os.path.exists(known_hosts):
            try:
                host_keys.load(known_hosts)
            except (OSError, paramiko.SSHException) as e:
                logger.warning('Unable to load %s: %s', known_hosts, e)
        server_key = self.transport.get_remote_server_key()
        entry = self.target.hostname \
            if self.target.port == DEFAULT_SSH_PORT \
            else '[%s]:%d' % self.addr
        known = host_keys.lookup(entry)
        if known is None or known.get(server_key.get_name()) is None:
            logger.warning(
                'Unknown %s host key for %s: %s',
                server_key.get_name(), entry,
                binascii.hexlify(server_key.get_fingerprint()).decode(),
            )
            return
        if not host_keys.check(entry, server_key):
            self.close()
            raise DialError(self.addr, 'host key mismatch for %s' % entry)

    def authenticate(self) -> str:
        assert self.transport is not None
        try:
            return authenticate(self.transport, self.target, self.auth_chain)
        except AuthError:
            self.close()
            raise
        except paramiko.SSHException as e:
            self.close()
            raise DialError(self.addr, 'SSH session failed: %s' % e) from e

    def listen(self, hostname: str, port: int) -> SshTunnelListener:
        """Asks remote host to forward hostname:port back to us."""
        listener = SshTunnelListener(self, hostname, port)
        listener.setup()
        self.listeners.append(listener)
        return listener

    def is_active(self) -> bool:
        return self.transport.is_active() if self.transport else False

    def close(self) -> None:
        for listener in self.listeners:
            listener.shutdown()
        self.listeners.clear()
        if self.transport is not None:
            self.transport.close()
            self.transport = None
            logger.info('SSH session to %s:%d closed', *self.addr)
        for method in self.auth_chain:
            method.close()
