# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       tcpip
"""
import errno
import queue
import logging
from typing import TYPE_CHECKING, Tuple

import paramiko

from ..listener import BaseListener
from ...common.types import HostPort
from ...common.constants import DEFAULT_ACCEPT_POLL_TIMEOUT
from ...exception import ForwardError


if TYPE_CHECKING:   # pragma: no cover
    from .session import TunnelSession


logger = logging.getLogger(__name__)


class SshTunnelListener(BaseListener):
    """Listens on the remote host through an SSH session.

    The remote host binds hostname:port on its side and forwards
    inbound connections back over the session.  Each forwarded
    connection is accepted as a paramiko ``Channel``.  Listener is
    invalidated when its :class:`TunnelSession` is closed."""

    def __init__(self, session: 'TunnelSession', hostname: str, port: int) -> None:
        super().__init__(hostname, port)
        self.session = session
        self._queue: 'queue.Queue[Tuple[paramiko.Channel, HostPort]]' = queue.Queue()

    def listen(self) -> None:
        transport = self.session.transport
        assert transport is not None
        try:
            self._port = transport.request_port_forward(
                self.hostname,
                self.port,
                handler=self._on_connection,
            )
        except paramiko.SSHException as e:
            raise ForwardError((self.hostname, self.port), str(e)) from e
        logger.info(
            'Remote host %s:%d listening on %s:%d',
            self.session.target.hostname, self.session.target.port,
            self.hostname or '*', self._port,
        )

    def _on_connection(
            self,
            chan: paramiko.Channel,
            origin: HostPort,
            server: HostPort,
    ) -> None:
        # Invoked from paramiko transport thread
        logger.debug(
            'Forwarded connection from %s:%d via %s:%d',
            origin[0], origin[1], server[0], server[1],
        )
        if self._closed:
            chan.close()
            return
        self._queue.put((chan, origin))

    def accept(self) -> Tuple[paramiko.Channel, HostPort]:
        while True:
            if self._closed:
                raise OSError(errno.EBADF, 'Listener closed')
            if not self.session.is_active():
                raise OSError(errno.ENOTCONN, 'SSH session is no longer active')
            try:
                return self._queue.get(timeout=DEFAULT_ACCEPT_POLL_TIMEOUT)
            except queue.Empty:
                continue

    def close(self) -> None:
        transport = self.session.transport
        if transport is not None and transport.is_active():
            try:
                transport.cancel_port_forward(self.hostname, self.address[1])
            except paramiko.SSHException as e:
                logger.debug('Unable to cancel port forward: %s', e)
        # Forwarded connections which were never accepted
        while True:
            try:
                chan, _ = self._queue.get_nowait()
            except queue.Empty:
                break
            chan.close()
