"""Init command implementation.

Writes the global configuration file (~/.nativeboot/config.yml), asking
for the settings interactively unless --non-interactive is given.
"""

from __future__ import annotations

from argparse import Namespace
from typing import Optional, Tuple

import questionary
from questionary import Style

from nativeboot.bootstrap.paths import NativebootPaths
from nativeboot.bootstrap.versions import OVERWRITE_AUTO, OVERWRITE_POLICIES
from nativeboot.cli.commands import Command
from nativeboot.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from nativeboot.config.loader import ConfigError, read_raw_config, write_raw_config
from nativeboot.config.models import NativeBootConfig
from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)

# Custom questionary style
STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
    ("separator", "fg:gray"),
    ("instruction", "fg:gray"),
])

_OVERWRITE_CHOICES = {
    "auto": "auto - only for snapshot and unknown versions",
    "always": "always - replace files on every start",
    "never": "never - keep files once extracted",
}


class InitCommand(Command):
    """Creates the global nativeboot configuration."""

    def __init__(self, paths: Optional[NativebootPaths] = None) -> None:
        self._paths = paths

    @property
    def name(self) -> str:
        """Command identifier."""
        return "init"

    def execute(self, args: Namespace, config: "NativeBootConfig | None" = None) -> int:
        """Execute the init command.

        Args:
            args: Parsed command-line arguments.
            config: Merged configuration. Unused: only the global file itself
                is edited, so ${VAR} placeholders and --config values are
                not baked into it.

        Returns:
            Exit code.
        """
        paths = self._paths or NativebootPaths.default()
        config_path = paths.config_file

        if config_path.exists() and not args.force:
            if args.non_interactive:
                print(f"Error: {config_path} already exists. Use --force to overwrite.")
                return EXIT_INVALID_USAGE

            overwrite = questionary.confirm(
                f"{config_path} already exists. Overwrite?",
                default=False,
                style=STYLE,
            ).ask()

            if not overwrite:
                print("Aborted.")
                return EXIT_SUCCESS

        try:
            data = read_raw_config(config_path)
        except ConfigError as e:
            LOGGER.warning(f"Replacing unreadable config {config_path}: {e}")
            data = {}

        # Defaults come from the global file only; --config values stay out of it
        subdir = args.subdir if args.subdir is not None else data.get("subdir") or ""
        policy = args.overwrite or data.get("overwrite") or OVERWRITE_AUTO

        if not args.non_interactive:
            answers = self._ask(str(subdir), str(policy))
            if answers is None:
                print("\nAborted.")
                return EXIT_SUCCESS
            subdir, policy = answers

        data["subdir"] = subdir
        data["overwrite"] = policy
        try:
            paths.ensure_directories()
            write_raw_config(data, config_path)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {config_path}: {e}") from e
        LOGGER.debug(f"Wrote configuration to {config_path}")

        print(f"Created {config_path}")
        return EXIT_SUCCESS

    def _ask(self, subdir: str, policy: str) -> Optional[Tuple[str, str]]:
        """Prompt for the settings; None if the user aborted."""
        answer_subdir = questionary.text(
            "Sub directory under your home directory for extracted libraries:",
            default=subdir,
            style=STYLE,
        ).ask()
        if answer_subdir is None:
            return None

        answer_policy = questionary.select(
            "When should existing library files be overwritten?",
            choices=[
                questionary.Choice(_OVERWRITE_CHOICES[p], value=p) for p in OVERWRITE_POLICIES
            ],
            default=policy if policy in OVERWRITE_POLICIES else OVERWRITE_AUTO,
            style=STYLE,
        ).ask()
        if answer_policy is None:
            return None

        return answer_subdir.strip(), answer_policy
