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
import argparse

from typing import Any, List, Optional, cast

from .utils import split_csv, set_open_file_limit
from .logger import Logger, verbosity_to_level
from .version import __version__


class FlagParser:
    """Wrapper around argparse module.

    Modules register the flags they consume on the shared `flag.flags`
    instance at import time, next to the code that reads them.
    Registering from within `__init__` or methods would register the
    same flag twice and argparse raises on conflicting options.
    """

    def __init__(self) -> None:
        self.args: Optional[argparse.Namespace] = None
        self.parser = argparse.ArgumentParser(
            description='socksrelay v%s' % __version__,
            epilog='Listen address, allow-lists and remote listener are '
            'resolved once at startup.',
        )

    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action:
        """Register a flag."""
        return self.parser.add_argument(*args, **kwargs)

    def add_mutually_exclusive_group(self) -> Any:
        """Register a group of flags out of which only one may be passed."""
        return self.parser.add_mutually_exclusive_group()

    def parse_args(
            self, input_args: Optional[List[str]],
    ) -> argparse.Namespace:
        """Parse flags from input arguments."""
        self.args = self.parser.parse_args(input_args)
        return self.args

    @staticmethod
    def initialize(
        input_args: Optional[List[str]] = None,
        **opts: Any,
    ) -> argparse.Namespace:
        """Parse flags and resolve final values.

        Keyword ``opts`` take precedence over parsed flags, which is how
        embedding code and tests configure the relay without a command line."""
        if input_args is None:
            input_args = []

        args = flags.parse_args(input_args)

        # Print version and exit
        if args.version:
            print(__version__)
            sys.exit(0)

        # Setup logging module
        args.log_level = cast(
            str,
            opts.get(
                'log_level',
                verbosity_to_level(args.trace, args.verbose, args.quiet),
            ),
        )
        Logger.setup(args.log_file, args.log_level, args.log_format)

        # Setup limits
        set_open_file_limit(args.open_file_limit)

        args.hostname = cast(str, opts.get('hostname', args.hostname))
        args.port = cast(int, opts.get('port', args.port))
        args.backlog = cast(int, opts.get('backlog', args.backlog))
        # Allow-lists stay raw strings here, they are validated
        # and normalized when rules are constructed.
        args.source_ips = tuple(
            split_csv(opts.get('source_ips', args.source_ips)),
        )
        args.dest_ips = tuple(
            split_csv(opts.get('dest_ips', args.dest_ips)),
        )
        args.remote_listener = cast(
            Optional[str],
            opts.get('remote_listener', args.remote_listener),
        )
        args.remote_listener_key = cast(
            Optional[str],
            opts.get('remote_listener_key', args.remote_listener_key),
        )
        args.remote_listener_key_passphrase = cast(
            Optional[str],
            opts.get(
                'remote_listener_key_passphrase',
                args.remote_listener_key_passphrase,
            ),
        )
        return args


flags = FlagParser()
