#!/usr/bin/env python3
"""Entry point for the unitsync maintainer hook."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .core.config_manager import ConfigManager
from .core.executor import LifecycleHookExecutor
from .core.service_manager import HelperTool, ServiceManager
from .models.lifecycle import UnitReference
from .utils.constants import APP_NAME, EXIT_ERROR, LOG_FORMAT


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None):
    """Set up application logging.

    Args:
        level: Log level name for the root logger
        log_file: Optional file to log to in addition to stderr
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            print(f"{APP_NAME}: cannot open log file {log_file}: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


def resolve_log_level(verbose: int, configured: Optional[str]) -> str:
    """Pick the effective log level.

    Args:
        verbose: Number of -v flags given
        configured: log_level from the config file

    Returns:
        Log level name
    """
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return configured or "WARNING"


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} - Keep systemd unit state in sync with package lifecycle events"
    )
    parser.add_argument('action',
                        help='Lifecycle action passed by the package manager (e.g. remove, purge)')
    parser.add_argument('args', nargs='*',
                        help='Further arguments from the package manager (ignored)')
    parser.add_argument('-c', '--config', default=None,
                        help='Path to the YAML configuration file')
    parser.add_argument('-u', '--unit', action='append', default=[], metavar='NAME.KIND',
                        help='Unit to act on (repeatable, overrides configured units)')
    parser.add_argument('--user', action='store_true',
                        help='Treat --unit units as user units')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on unrecognized lifecycle actions')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase log verbosity (-v for info, -vv for debug)')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    scope = "user" if args.user else "system"
    try:
        cli_units = [UnitReference.from_string(value, scope=scope) for value in args.unit]
    except ValueError as e:
        parser.error(str(e))

    # Stderr logging first so config problems are reported formatted
    setup_logging(resolve_log_level(args.verbose, None))
    logger = logging.getLogger(__name__)

    try:
        config_manager = ConfigManager(args.config)
        config_manager.load_config()

        setup_logging(
            resolve_log_level(args.verbose, config_manager.get_setting("log_level")),
            config_manager.get_setting("log_file")
        )

        timeout = config_manager.get_setting("command_timeout")
        executor = LifecycleHookExecutor(
            units=cli_units or config_manager.units,
            service_manager=ServiceManager(
                control_dir=config_manager.get_setting("control_dir"),
                reload_command=config_manager.get_setting("reload_command"),
                timeout=timeout
            ),
            helper=HelperTool(
                path=config_manager.get_setting("helper_path"),
                timeout=timeout
            ),
            strict_actions=args.strict or bool(config_manager.get_setting("strict_actions"))
        )

        exit_code = executor.run(args.action, args.args, os.environ)
        logger.debug(f"Exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
