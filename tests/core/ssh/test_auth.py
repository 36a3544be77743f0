# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import Any, List, Tuple, Callable

import pytest
import paramiko
import unittest
from unittest import mock

from pytest_mock import MockerFixture

from socksrelay.core.ssh import (
    SshTarget, AgentAuth, KeyFileAuth, KeyboardInteractiveAuth, PasswordAuth,
    BaseSshAuthMethod, build_auth_chain, authenticate,
)
from socksrelay.common.constants import LIMITED_CHALLENGE_ANSWERS
from socksrelay.exception import AuthError
from ...test_assertions import Assertions


TARGET = SshTarget('deploy', None, 'bastion', 22)


class FakeMethod(BaseSshAuthMethod):

    def __init__(self, name: str, outcome: Any) -> None:
        self.name = name
        self.outcome = outcome
        self.called = False

    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        self.called = True
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class TestKeyboardInteractiveAuth(unittest.TestCase):

    def test_limited_challenge_table(self) -> None:
        self.assertEqual(LIMITED_CHALLENGE_ANSWERS, {'Verification code: ': ''})

    def test_known_prompt(self) -> None:
        method = KeyboardInteractiveAuth()
        self.assertEqual(
            method.challenge('', '', [('Verification code: ', False)]),
            [''],
        )

    def test_unknown_prompts_get_empty_answer(self) -> None:
        method = KeyboardInteractiveAuth({'Verification code: ': '123456'})
        self.assertEqual(
            method.challenge(
                'title', 'instructions', [
                    ('Password: ', False),
                    ('Verification code: ', True),
                ],
            ),
            ['', '123456'],
        )
        self.assertEqual(method.challenge('', '', []), [])

    def test_authenticate_answers_server_challenge(self) -> None:
        transport = mock.Mock(spec=paramiko.Transport)
        answers: List[List[str]] = []

        def auth_interactive(
                username: str,
                handler: Callable[[str, str, List[Tuple[str, bool]]], List[str]],
        ) -> List[str]:
            answers.append(handler('', '', [('Verification code: ', False)]))
            return []

        transport.auth_interactive.side_effect = auth_interactive
        self.assertEqual(KeyboardInteractiveAuth().authenticate(transport, 'deploy'), [])
        self.assertEqual(answers, [['']])
        self.assertEqual(transport.auth_interactive.call_args[0][0], 'deploy')


class TestPasswordAuth(unittest.TestCase):

    def test_authenticate(self) -> None:
        transport = mock.Mock(spec=paramiko.Transport)
        transport.auth_password.return_value = []
        PasswordAuth('secret').authenticate(transport, 'deploy')
        transport.auth_password.assert_called_once_with(
            'deploy', 'secret', fallback=False,
        )


class TestKeyFileAuth(unittest.TestCase):

    @mock.patch('paramiko.PKey.from_path')
    def test_authenticate(self, mock_from_path: mock.Mock) -> None:
        transport = mock.Mock(spec=paramiko.Transport)
        transport.auth_publickey.return_value = []
        KeyFileAuth('/tmp/id_ed25519', 'pass').authenticate(transport, 'deploy')
        mock_from_path.assert_called_once_with('/tmp/id_ed25519', 'pass')
        transport.auth_publickey.assert_called_once_with(
            'deploy', mock_from_path.return_value,
        )

    @mock.patch('paramiko.PKey.from_path', side_effect=FileNotFoundError('/tmp/missing'))
    def test_unreadable_key(self, _mock_from_path: mock.Mock) -> None:
        transport = mock.Mock(spec=paramiko.Transport)
        with self.assertRaises(paramiko.AuthenticationException):
            KeyFileAuth('/tmp/missing').authenticate(transport, 'deploy')
        transport.auth_publickey.assert_not_called()


class TestAgentAuth(Assertions):

    @pytest.fixture(autouse=True)   # type: ignore[misc]
    def _setUp(self, mocker: MockerFixture) -> None:
        self.key1 = mocker.Mock(spec=paramiko.PKey)
        self.key2 = mocker.Mock(spec=paramiko.PKey)
        self.mock_agent = mocker.patch('paramiko.Agent')
        self.mock_agent.return_value.get_keys.return_value = (self.key1, self.key2)
        self.transport = mocker.Mock(spec=paramiko.Transport)

    def test_unavailable_without_agent_socket(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', clear=True)
        method = AgentAuth()
        self.assertFalse(method.available())
        self.mock_agent.assert_not_called()

    def test_unavailable_without_keys(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', {'SSH_AUTH_SOCK': '/tmp/agent.sock'})
        self.mock_agent.return_value.get_keys.return_value = ()
        self.assertFalse(AgentAuth().available())

    def test_tries_each_key(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', {'SSH_AUTH_SOCK': '/tmp/agent.sock'})
        self.transport.auth_publickey.side_effect = [
            paramiko.AuthenticationException('rejected'),
            [],
        ]
        method = AgentAuth()
        self.assertTrue(method.available())
        self.assertEqual(method.authenticate(self.transport, 'deploy'), [])
        self.assertEqual(
            self.transport.auth_publickey.call_args_list,
            [mocker.call('deploy', self.key1), mocker.call('deploy', self.key2)],
        )
        method.close()
        self.mock_agent.return_value.close.assert_called_once()

    def test_all_keys_rejected(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', {'SSH_AUTH_SOCK': '/tmp/agent.sock'})
        self.transport.auth_publickey.side_effect = paramiko.AuthenticationException('rejected')
        with pytest.raises(paramiko.AuthenticationException):
            AgentAuth().authenticate(self.transport, 'deploy')


class TestBuildAuthChain(Assertions):

    @pytest.fixture(autouse=True)   # type: ignore[misc]
    def _setUp(self, mocker: MockerFixture) -> None:
        self.mock_agent = mocker.patch('paramiko.Agent')
        self.mock_agent.return_value.get_keys.return_value = ()

    def test_without_agent(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', clear=True)
        chain = build_auth_chain(TARGET)
        self.assertEqual([m.name for m in chain], ['keyboard-interactive'])

    def test_order(self, mocker: MockerFixture) -> None:
        mocker.patch.dict('os.environ', {'SSH_AUTH_SOCK': '/tmp/agent.sock'})
        self.mock_agent.return_value.get_keys.return_value = (mocker.Mock(),)
        chain = build_auth_chain(
            TARGET._replace(password='secret'),
            key_filename='/tmp/id_rsa',
        )
        self.assertEqual(
            [m.name for m in chain],
            ['agent', 'publickey', 'keyboard-interactive', 'password'],
        )


class TestAuthenticate(unittest.TestCase):

    def setUp(self) -> None:
        self.transport = mock.Mock(spec=paramiko.Transport)
        self.transport.is_authenticated.return_value = False

    def test_falls_back_to_keyboard_interactive(self) -> None:
        agent = FakeMethod(
            'agent', paramiko.BadAuthenticationType(
                'Bad authentication type', ['keyboard-interactive'],
            ),
        )
        interactive = FakeMethod('keyboard-interactive', [])
        password = FakeMethod('password', [])
        self.transport.is_authenticated.side_effect = [True]
        self.assertEqual(
            authenticate(self.transport, TARGET, [agent, interactive, password]),
            'keyboard-interactive',
        )
        self.assertTrue(agent.called)
        self.assertFalse(password.called)

    def test_partial_success_continues(self) -> None:
        key = FakeMethod('publickey', ['keyboard-interactive'])
        interactive = FakeMethod('keyboard-interactive', [])
        self.transport.is_authenticated.side_effect = [False, True]
        self.assertEqual(
            authenticate(self.transport, TARGET, [key, interactive]),
            'keyboard-interactive',
        )

    def test_all_methods_fail(self) -> None:
        chain = [
            FakeMethod('agent', paramiko.AuthenticationException('denied')),
            FakeMethod('keyboard-interactive', paramiko.AuthenticationException('denied')),
        ]
        with self.assertRaises(AuthError) as ctx:
            authenticate(self.transport, TARGET, chain)
        self.assertEqual(ctx.exception.addr, ('bastion', 22))
        self.assertIn('agent, keyboard-interactive', str(ctx.exception))

    def test_empty_chain(self) -> None:
        with self.assertRaises(AuthError):
            authenticate(self.transport, TARGET, [])

    def test_transport_errors_propagate(self) -> None:
        chain = [FakeMethod('agent', paramiko.SSHException('No existing session'))]
        with self.assertRaises(paramiko.SSHException):
            authenticate(self.transport, TARGET, chain)
