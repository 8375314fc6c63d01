"""Env command implementation.

A CLI process cannot change its parent's environment, so this command
prints a statement for the calling shell to evaluate, e.g.::

    eval "$(nativeboot env myapp --subdir .myapp)"
"""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from nativeboot.bootstrap.platform import PlatformInfo, get_platform_info
from nativeboot.cli.commands import Command
from nativeboot.cli.exit_codes import EXIT_SUCCESS
from nativeboot.config.models import NativeBootConfig
from nativeboot.extract import resolve_target
from nativeboot.library_path import library_path_env_name


def format_env_statement(shell: str, env_name: str, directory: str) -> str:
    """Shell statement prepending ``directory`` to ``env_name``.

    Args:
        shell: One of ``sh``, ``cmd``, ``powershell``.
        env_name: Variable name, e.g. ``LD_LIBRARY_PATH``.
        directory: Directory to prepend.

    Returns:
        The statement as a single line.
    """
    if shell == "cmd":
        return f'set "{env_name}={directory};%{env_name}%"'
    if shell == "powershell":
        escaped = directory.replace("'", "''")
        return f"$env:{env_name} = '{escaped};' + $env:{env_name}"
    quoted = directory.replace("'", "'\\''")
    return f"export {env_name}='{quoted}'\"${{{env_name}:+:${env_name}}}\""


def default_shell(platform_info: Optional[PlatformInfo] = None) -> str:
    info = platform_info or get_platform_info()
    return "cmd" if info.is_windows else "sh"


class EnvCommand(Command):
    """Prints the library search path statement for a module's target dir."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "env"

    def execute(self, args: Namespace, config: "NativeBootConfig | None" = None) -> int:
        """Execute the env command.

        Args:
            args: Parsed command-line arguments.
            config: Merged configuration.

        Returns:
            Exit code (always 0 once the target is resolved).
        """
        platform_info = get_platform_info()
        _, _, target_dir = resolve_target(
            args.module,
            version=args.version_override,
            config=config or NativeBootConfig(),
            platform_info=platform_info,
        )
        shell = args.shell or default_shell(platform_info)
        print(format_env_statement(shell, library_path_env_name(platform_info), str(target_dir)))
        return EXIT_SUCCESS
