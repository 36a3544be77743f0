# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import io
import signal
import threading
from typing import List

import unittest
from unittest import mock

from socksrelay.relay import Relay, main, entry_point
from socksrelay.core.listener import TcpSocketListener
from socksrelay.core.transport import LocalTransport, RemoteTransport
from socksrelay.exception import BindError


class TestMain(unittest.TestCase):

    def assert_fatal(self, argv: List[str], message: str) -> None:
        with mock.patch('sys.argv', ['socksrelay'] + argv), \
                mock.patch('sys.stderr', new_callable=io.StringIO) as mock_stderr:
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)
        output = mock_stderr.getvalue()
        self.assertTrue(output.startswith('error: '))
        self.assertEqual(output.count('\n'), 1)
        self.assertIn(message, output)

    @mock.patch('socksrelay.relay.acquire')
    def test_invalid_allow_list(self, mock_acquire: mock.Mock) -> None:
        self.assert_fatal(['-s', '10.0.0.5,garbage'], 'garbage')
        mock_acquire.assert_not_called()

    @mock.patch('socksrelay.core.transport.TunnelSession')
    def test_remote_listener_wrong_scheme(self, mock_session: mock.Mock) -> None:
        self.assert_fatal(
            ['--remote-listener', 'http://user@example.com:22'],
            'not an SSH url',
        )
        mock_session.assert_not_called()

    @mock.patch('socksrelay.core.transport.TunnelSession')
    def test_remote_listener_without_username(self, mock_session: mock.Mock) -> None:
        self.assert_fatal(
            ['--remote-listener', 'ssh://example.com:22'],
            'no username provided',
        )
        mock_session.assert_not_called()

    @mock.patch('socksrelay.core.listener.tcp.socket.socket')
    def test_port_out_of_range(self, mock_socket: mock.Mock) -> None:
        self.assert_fatal(['--port', '70000'], '70000')
        mock_socket.assert_not_called()

    @mock.patch('socksrelay.relay.acquire')
    def test_bind_error(self, mock_acquire: mock.Mock) -> None:
        mock_acquire.side_effect = BindError(('', 8000), 'Address already in use')
        self.assert_fatal([], 'Address already in use')

    @mock.patch('socksrelay.relay.main')
    def test_entry_point(self, mock_main: mock.Mock) -> None:
        entry_point()
        mock_main.assert_called_once_with()


class TestRelay(unittest.TestCase):

    @mock.patch('socksrelay.relay.Relay._register_signals')
    def test_serve_until_shutdown(self, _mock_register_signals: mock.Mock) -> None:
        with Relay(['--host', '127.0.0.1', '--port', '0']) as relay:
            self.assertEqual(relay.transport, LocalTransport('127.0.0.1', 0, relay.flags.backlog))
            self.assertTrue(isinstance(relay.listener, TcpSocketListener))
            timer = threading.Timer(0.1, relay.shutdown)
            timer.start()
            relay.run()
            timer.join()
        assert relay.listener is not None
        self.assertTrue(relay.listener.closed)

    @mock.patch('socksrelay.relay.acquire')
    @mock.patch('socksrelay.relay.Relay._register_signals')
    def test_setup_builds_rules_and_transport(
            self,
            _mock_register_signals: mock.Mock,
            mock_acquire: mock.Mock,
    ) -> None:
        release = mock.Mock()
        mock_acquire.return_value = (mock.Mock(), release)
        with Relay(
            ['--remote-listener', 'ssh://deploy@bastion', '-s', '10.0.0.5'],
            dest_ips=['1.2.3.4, 1.2.3.5'],
        ) as relay:
            assert relay.rules is not None
            self.assertEqual([str(a) for a in relay.rules.source], ['10.0.0.5'])
            self.assertEqual(
                [str(a) for a in relay.rules.destination],
                ['1.2.3.4', '1.2.3.5'],
            )
            self.assertEqual(
                relay.transport,
                RemoteTransport('ssh://deploy@bastion', '', 8000),
            )
            mock_acquire.assert_called_once_with(relay.transport)
        release.assert_called_once()

    @mock.patch('signal.signal')
    @mock.patch('socksrelay.relay.acquire')
    def test_signals_registered_on_main_thread(
            self,
            mock_acquire: mock.Mock,
            mock_signal: mock.Mock,
    ) -> None:
        mock_acquire.return_value = (mock.Mock(), mock.Mock())
        with Relay([]):
            registered = [c[0][0] for c in mock_signal.call_args_list]
            self.assertIn(signal.SIGINT, registered)
            self.assertIn(signal.SIGTERM, registered)

    def test_exit_signal(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            Relay._handle_exit_signal(signal.SIGTERM, None)
        self.assertEqual(ctx.exception.code, 0)
