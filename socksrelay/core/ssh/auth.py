# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       ssh
"""
import os
import logging
from abc import ABC, abstractmethod
from typing import List, Tuple, Mapping, Optional

import paramiko

from .url import SshTarget
from ...common.constants import SSH_AUTH_SOCK_ENV, LIMITED_CHALLENGE_ANSWERS
from ...exception import AuthError


logger = logging.getLogger(__name__)


class BaseSshAuthMethod(ABC):
    """One step of the authentication chain.

    ``authenticate`` returns the list of methods the server still
    wants (partial authentication) or raises
    ``paramiko.AuthenticationException``."""

    name = 'none'

    def available(self) -> bool:
        return True

    @abstractmethod
    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        raise NotImplementedError()

    def close(self) -> None:
        pass


class AgentAuth(BaseSshAuthMethod):
    """Signs with keys held by the local authentication agent.

    Unavailable, and silently skipped, when ``SSH_AUTH_SOCK`` is unset,
    the agent is unreachable or holds no keys."""

    name = 'agent'

    def __init__(self) -> None:
        self.agent: Optional[paramiko.Agent] = None

    def keys(self) -> Tuple[paramiko.PKey, ...]:
        if not os.environ.get(SSH_AUTH_SOCK_ENV):
            return ()
        if self.agent is None:
            try:
                self.agent = paramiko.Agent()
            except paramiko.SSHException as e:
                logger.debug('Unable to talk to ssh-agent: %s', e)
                return ()
        return tuple(self.agent.get_keys())

    def available(self) -> bool:
        return len(self.keys()) > 0

    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        last: Optional[paramiko.AuthenticationException] = None
        for key in self.keys():
            try:
                return transport.auth_publickey(username, key)
            except paramiko.BadAuthenticationType:
                raise
            except paramiko.AuthenticationException as e:
                logger.debug('Agent key %s rejected', key.get_name())
                last = e
        raise last or paramiko.AuthenticationException('No agent keys')

    def close(self) -> None:
        if self.agent is not None:
            self.agent.close()
            self.agent = None


class KeyFileAuth(BaseSshAuthMethod):
    """Private key loaded from a file."""

    name = 'publickey'

    def __init__(self, key_filename: str, passphrase: Optional[str] = None) -> None:
        self.key_filename = key_filename
        self.passphrase = passphrase

    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        try:
            key = paramiko.PKey.from_path(self.key_filename, self.passphrase)
        except (OSError, ValueError, paramiko.SSHException) as e:
            logger.warning(
                'Unable to load private key %s: %s', self.key_filename, e,
            )
            raise paramiko.AuthenticationException(str(e)) from e
        return transport.auth_publickey(username, key)


class KeyboardInteractiveAuth(BaseSshAuthMethod):
    """Answers keyboard-interactive challenges from a fixed table.

    This is a limited challenge table, not an interactive login.  Any
    prompt missing from the table receives an empty answer."""

    name = 'keyboard-interactive'

    def __init__(self, answers: Mapping[str, str] = LIMITED_CHALLENGE_ANSWERS) -> None:
        self.answers = dict(answers)

    def challenge(
            self,
            title: str,
            instructions: str,
            prompt_list: List[Tuple[str, bool]],
    ) -> List[str]:
        answers = []
        for prompt, _echo in prompt_list:
            if prompt not in self.answers:
                logger.debug('No canned answer for prompt %r', prompt)
            answers.append(self.answers.get(prompt, ''))
        return answers

    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        return transport.auth_interactive(username, self.challenge)


class PasswordAuth(BaseSshAuthMethod):
    """Password taken from the remote listener URL."""

    name = 'password'

    def __init__(self, password: str) -> None:
        self.password = password

    def authenticate(self, transport: paramiko.Transport, username: str) -> List[str]:
        return transport.auth_password(username, self.password, fallback=False)


def build_auth_chain(
        target: SshTarget,
        key_filename: Optional[str] = None,
        key_passphrase: Optional[str] = None,
        answers: Mapping[str, str] = LIMITED_CHALLENGE_ANSWERS,
) -> List[BaseSshAuthMethod]:
    """Ordered authentication methods for target.

    Agent first, then key file, keyboard-interactive and finally
    the URL password.  Methods that do not apply are left out."""
    chain: List[BaseSshAuthMethod] = []
    agent = AgentAuth()
    if agent.available():
        chain.append(agent)
    else:
        logger.debug('No usable ssh-agent, skipping agent authentication')
    if key_filename:
        chain.append(KeyFileAuth(key_filename, key_passphrase))
    chain.append(KeyboardInteractiveAuth(answers))
    if target.password:
        chain.append(PasswordAuth(target.password))
    return chain


def authenticate(
        transport: paramiko.Transport,
        target: SshTarget,
        chain: List[BaseSshAuthMethod],
) -> str:
    """Walks the chain until the transport is authenticated.

    Returns name of the method which completed authentication.
    Methods yielding partial success leave the chain running so that
    the following method can complete, e.g. key followed by a
    verification code.  ``paramiko.SSHException`` other than
    authentication failures propagate to the caller."""
    addr = (target.hostname, target.port)
    for method in chain:
        try:
            remaining = method.authenticate(transport, target.username)
        except paramiko.BadAuthenticationType as e:
            logger.debug(
                '%s not allowed by server, allowed types: %s',
                method.name, ', '.join(e.allowed_types),
            )
            continue
        except paramiko.AuthenticationException as e:
            logger.debug('%s authentication failed: %s', method.name, e)
            continue
        if transport.is_authenticated():
            logger.info(
                'Authenticated to %s:%d as %s using %s',
                addr[0], addr[1], target.username, method.name,
            )
            return method.name
        logger.debug(
            '%s partially succeeded, server wants: %s',
            method.name, ', '.join(remaining),
        )
    raise AuthError(
        addr,
        'unable to authenticate as %s, tried: %s' % (
            target.username,
            ', '.join(m.name for m in chain) or 'nothing',
        ),
    )
