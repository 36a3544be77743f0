# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import platform


SYS_PLATFORM = platform.system()
IS_WINDOWS = SYS_PLATFORM == 'Windows'

COMMA = ','

SSH_SCHEME = 'ssh'
SSH_AUTH_SOCK_ENV = 'SSH_AUTH_SOCK'
KNOWN_HOSTS_PATH = '~/.ssh/known_hosts'

SOCKS_VERSION = 5

# Custom log level below DEBUG.  Used to log bytes copied between
# clients and upstream servers.
TRACE = 5

# Defaults
DEFAULT_BACKLOG = 100
DEFAULT_BUFFER_SIZE = 32 * 1024
DEFAULT_HOSTNAME = ''
DEFAULT_PORT = 8000
DEFAULT_SSH_PORT = 22
DEFAULT_ALLOWED_SOURCE_IPS = None
DEFAULT_ALLOWED_DESTINATION_IPS = None
DEFAULT_REMOTE_LISTENER = None
DEFAULT_REMOTE_LISTENER_KEY = None
DEFAULT_REMOTE_LISTENER_KEY_PASSPHRASE = None
DEFAULT_LOG_FILE = None
DEFAULT_LOG_FORMAT = '%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DEFAULT_LOG_LEVEL = 'INFO'
DEFAULT_OPEN_FILE_LIMIT = 1024
DEFAULT_VERSION = False
# Interval at which blocking accept loops wake up to notice shutdown.
DEFAULT_ACCEPT_POLL_TIMEOUT = 1.0
DEFAULT_SSH_KEEPALIVE_INTERVAL = 30

# Stop-gap: canned answers for the keyboard-interactive challenges we know
# about.  Prompts not listed here are answered with an empty string.
# Not a general purpose interactive login.
LIMITED_CHALLENGE_ANSWERS = {
    'Verification code: ': '',
}

