# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import sys
import signal
import logging
import threading
from typing import Any, List, Callable, Optional

from .socks import AllowList, SocksServer, AuthorizationPolicy
from .common.flag import FlagParser, flags
from .common.constants import (
    IS_WINDOWS, DEFAULT_VERSION, DEFAULT_LOG_FILE, DEFAULT_LOG_FORMAT,
    DEFAULT_OPEN_FILE_LIMIT,
)
from .core.listener import BaseListener
from .core.transport import (
    RemoteTransport, TransportConfig, acquire, transport_from_flags,
)
from .core.ssh import redact_url
from .exception import ListenerFailed, RelayException


logger = logging.getLogger(__name__)


flags.add_argument(
    '--version',
    action='store_true',
    default=DEFAULT_VERSION,
    help='Prints socksrelay version.',
)

verbosity = flags.add_mutually_exclusive_group()
verbosity.add_argument(
    '--trace',
    '-t',
    action='store_true',
    default=False,
    help='Log everything, including bytes copied.',
)
verbosity.add_argument(
    '--verbose',
    '-v',
    action='store_true',
    default=False,
    help='Be more verbose, log at debug level.',
)
verbosity.add_argument(
    '--quiet',
    '-q',
    action='store_true',
    default=False,
    help='Be quiet, log warnings only.',
)

flags.add_argument(
    '--log-file',
    type=str,
    default=DEFAULT_LOG_FILE,
    help='Default: sys.stderr. Log file destination.',
)

flags.add_argument(
    '--log-format',
    type=str,
    default=DEFAULT_LOG_FORMAT,
    help='Log format for Python logger.',
)

flags.add_argument(
    '--open-file-limit',
    type=int,
    default=DEFAULT_OPEN_FILE_LIMIT,
    help='Default: 1024. Maximum number of files (TCP connections) '
    'that socksrelay can open concurrently.',
)


class Relay:
    """Relay is a context manager to control socksrelay core.

    Setup resolves rules from flags, acquires a listener through
    the configured transport and prepares the SOCKS server.
    :meth:`run` then blocks serving clients.  Shutdown releases the
    listener, and for remote transport the SSH session along with it.
    """

    def __init__(self, input_args: Optional[List[str]] = None, **opts: Any) -> None:
        self.opts = opts
        self.flags = FlagParser.initialize(input_args, **opts)
        self.rules: Optional[AuthorizationPolicy] = None
        self.transport: Optional[TransportConfig] = None
        self.listener: Optional[BaseListener] = None
        self.server: Optional[SocksServer] = None
        self._release: Optional[Callable[[], None]] = None

    def __enter__(self) -> 'Relay':
        self.setup()
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def setup(self) -> None:
        self.rules = AuthorizationPolicy(
            source=AllowList.parse(self.flags.source_ips),
            destination=AllowList.parse(self.flags.dest_ips),
        )
        self._log_allow_list('source', self.rules.source)
        self._log_allow_list('destination', self.rules.destination)
        self.transport = transport_from_flags(self.flags)
        self.listener, self._release = acquire(self.transport)
        self.server = SocksServer(self.rules)
        if threading.current_thread() == threading.main_thread():
            self._register_signals()

    def run(self) -> None:
        assert self.server is not None and self.listener is not None
        if isinstance(self.transport, RemoteTransport):
            where = redact_url(self.transport.ssh_url)
        else:
            where = 'localhost'
        logger.info(
            'Starting socks proxy on: %s (proxy addr: %s:%d)',
            where, self.listener.address[0], self.listener.address[1],
        )
        try:
            self.server.serve(self.listener)
        except ListenerFailed:
            if self.listener.closed:
                logger.debug('done')
                return
            raise

    def shutdown(self) -> None:
        if self._release is not None:
            self._release()
            self._release = None

    @staticmethod
    def _log_allow_list(kind: str, allow_list: AllowList) -> None:
        if allow_list.is_unrestricted():
            return
        logger.info('Allowed %s IPs:', kind)
        for address in allow_list:
            logger.info('  - %s', address)

    def _register_signals(self) -> None:
        signal.signal(signal.SIGINT, self._handle_exit_signal)
        signal.signal(signal.SIGTERM, self._handle_exit_signal)
        if not IS_WINDOWS:
            signal.signal(signal.SIGHUP, self._handle_exit_signal)

    @staticmethod
    def _handle_exit_signal(signum: int, _frame: Any) -> None:
        logger.debug('Received signal %d' % signum)
        sys.exit(0)


def main(**opts: Any) -> None:
    try:
        with Relay(sys.argv[1:], **opts) as relay:
            relay.run()
    except RelayException as e:
        print('error: %s' % e, file=sys.stderr)
        sys.exit(1)


def entry_point() -> None:
    main()
