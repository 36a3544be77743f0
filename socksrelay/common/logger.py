# -*- coding: utf-8 -*-
"""
    socksrelay
    ~~~~~~~~~~
    SOCKS5 relay proxy with source and destination IP rules, served from a
    local port or from a remote host over an SSH reverse tunnel.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import logging
from typing import Optional

from .constants import (
    TRACE, DEFAULT_LOG_FILE, DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT,
)


logging.addLevelName(TRACE, 'TRACE')


SINGLE_CHAR_TO_LEVEL = {
    'T': 'TRACE',
    'D': 'DEBUG',
    'I': 'INFO',
    'W': 'WARNING',
    'E': 'ERROR',
    'C': 'CRITICAL',
}


def single_char_to_level(char: str) -> int:
    return logging.getLevelName(SINGLE_CHAR_TO_LEVEL[char.upper()[0]])


def verbosity_to_level(trace: bool, verbose: bool, quiet: bool) -> str:
    """Resolves mutually exclusive verbosity flags into a level name.

    Levels are ordered trace < debug < info < warning, default is info."""
    if trace:
        return 'TRACE'
    if verbose:
        return 'DEBUG'
    if quiet:
        return 'WARNING'
    return DEFAULT_LOG_LEVEL


class Logger:
    """Common logging utilities and setup."""

    @staticmethod
    def setup(
            log_file: Optional[str] = DEFAULT_LOG_FILE,
            log_level: str = DEFAULT_LOG_LEVEL,
            log_format: str = DEFAULT_LOG_FORMAT,
    ) -> None:
        level = single_char_to_level(log_level)
        if log_file:    # pragma: no cover
            logging.basicConfig(
                filename=log_file,
                filemode='a',
                level=level,
                format=log_format,
            )
        else:
            logging.basicConfig(
                level=level,
                format=log_format,
            )
        # paramiko transport internals only when tracing
        logging.getLogger('paramiko').setLevel(
            level if level <= TRACE else logging.WARNING,
        )
