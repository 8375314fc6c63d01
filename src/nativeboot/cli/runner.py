"""CLI runner: parses arguments, loads configuration and dispatches commands."""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Dict, Iterable, List, Optional

from nativeboot.cli.arguments import build_parser
from nativeboot.cli.commands import (
    Command,
    EnvCommand,
    ExtractCommand,
    InitCommand,
    ListLibsCommand,
    StatusCommand,
)
from nativeboot.cli.config_bridge import ConfigBridge
from nativeboot.cli.exit_codes import (
    EXIT_ENVIRONMENT_ERROR,
    EXIT_EXTRACTION_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
)
from nativeboot.config.loader import ConfigError, load_config
from nativeboot.core.errors import (
    EnvironmentUpdateError,
    LibraryLoadError,
    LibraryPathError,
    NativeBootError,
    UnsupportedScopeError,
)
from nativeboot.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("nativeboot")
    except PackageNotFoundError:
        # Fallback for source checkouts without installed metadata.
        from nativeboot import __version__

        return __version__


class CLIRunner:
    """Runs one nativeboot CLI invocation."""

    def __init__(self) -> None:
        self._version = get_version()
        self._commands: Dict[str, Command] = {
            "extract": ExtractCommand(),
            "list": ListLibsCommand(),
            "status": StatusCommand(),
            "env": EnvCommand(),
            "init": InitCommand(),
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        parser = build_parser()
        argv_list = list(argv) if argv is not None else None
        try:
            args = parser.parse_args(argv_list)
        except SystemExit as e:
            # --help exits with 0, usage errors with 2
            return EXIT_SUCCESS if e.code in (0, None) else EXIT_INVALID_USAGE

        # Configure logging as early as possible.
        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        if not args.command:
            parser.print_help()
            return EXIT_SUCCESS

        if args.sys_path:
            _prepend_sys_path(args.sys_path)

        overrides = {} if args.command == "init" else ConfigBridge.args_to_overrides(args)
        try:
            config = load_config(cli_config_path=args.config, cli_overrides=overrides)
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        command = self._commands[args.command]
        try:
            return command.execute(args, config)
        except ConfigError as e:
            LOGGER.error(_describe(e))
            return EXIT_INVALID_USAGE
        except UnsupportedScopeError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE
        except (LibraryPathError, EnvironmentUpdateError, LibraryLoadError) as e:
            LOGGER.error(_describe(e))
            return EXIT_ENVIRONMENT_ERROR
        except NativeBootError as e:
            LOGGER.error(_describe(e))
            if args.debug:
                import traceback
                traceback.print_exc()
            return EXIT_EXTRACTION_ERROR


def _prepend_sys_path(entries: List[str]) -> None:
    # Keep the given order: the first entry ends up first on sys.path
    for entry in reversed(entries):
        if entry not in sys.path:
            sys.path.insert(0, entry)
            LOGGER.debug(f"Added {entry} to sys.path")


def _describe(error: BaseException) -> str:
    cause = error.__cause__
    if cause is not None:
        return f"{error} ({cause})"
    return str(error)
