"""Argument parser for the nativeboot CLI."""

from __future__ import annotations

import argparse
from pathlib import Path

from nativeboot.bootstrap.versions import OVERWRITE_POLICIES


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show nativeboot version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: ~/.nativeboot/config.yml).",
    )
    parser.add_argument(
        "--sys-path",
        action="append",
        dest="sys_path",
        metavar="PATH",
        help="Directory or zip archive to put in front of sys.path (can be repeated).",
    )


def _add_scope_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by commands operating on a packaged module."""
    parser.add_argument(
        "module",
        help="Importable module or package whose bundled native libraries are used.",
    )
    parser.add_argument(
        "--subdir",
        metavar="NAME",
        default=None,
        help="Sub directory under the home directory (e.g. .myapp).",
    )
    parser.add_argument(
        "--home",
        metavar="DIR",
        default=None,
        help="Base directory instead of the user's home directory.",
    )
    parser.add_argument(
        "--prefix",
        dest="resource_prefix",
        metavar="OS-ARCH",
        default=None,
        help="Platform folder to use instead of the detected one (e.g. linux-x86-64).",
    )
    parser.add_argument(
        "--version-override",
        dest="version_override",
        metavar="VERSION",
        default=None,
        help="Version to use instead of the installed distribution version.",
    )
    parser.add_argument(
        "--include",
        action="append",
        metavar="PATTERN",
        help="Only use libraries matching this gitignore-style pattern (can be repeated).",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Skip libraries matching this gitignore-style pattern (can be repeated).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="nativeboot",
        description="nativeboot - Unpack bundled native libraries and expose them to the dynamic linker.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    extract = subparsers.add_parser(
        "extract",
        help="Extract native libraries into the versioned home directory.",
    )
    _add_scope_options(extract)
    overwrite_group = extract.add_mutually_exclusive_group()
    overwrite_group.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing files regardless of version.",
    )
    overwrite_group.add_argument(
        "--no-overwrite",
        dest="no_overwrite",
        action="store_true",
        help="Never overwrite existing files, even for snapshot versions.",
    )
    extract.add_argument(
        "--no-env",
        dest="no_env",
        action="store_true",
        help="Do not update the library search path of this process.",
    )
    extract.add_argument(
        "--preload",
        action="append",
        metavar="LIB",
        help="Load this library after extraction (can be repeated, order kept).",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List the native libraries bundled for this platform.",
    )
    _add_scope_options(list_parser)

    status = subparsers.add_parser(
        "status",
        help="Show platform, target directory and extraction state.",
    )
    _add_scope_options(status)

    env = subparsers.add_parser(
        "env",
        help="Print a shell statement adding the target directory to the library path.",
    )
    _add_scope_options(env)
    env.add_argument(
        "--shell",
        choices=["sh", "cmd", "powershell"],
        default=None,
        help="Shell syntax (default: sh, or cmd on Windows).",
    )

    init = subparsers.add_parser(
        "init",
        help="Create the global configuration file.",
    )
    init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )
    init.add_argument(
        "--non-interactive",
        dest="non_interactive",
        action="store_true",
        help="Write defaults (or given options) without prompting.",
    )
    init.add_argument(
        "--subdir",
        metavar="NAME",
        default=None,
        help="Default sub directory under the home directory.",
    )
    init.add_argument(
        "--overwrite",
        choices=list(OVERWRITE_POLICIES),
        default=None,
        help="Overwrite policy for existing files.",
    )

    return parser
