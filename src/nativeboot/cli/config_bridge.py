"""Bridge between CLI arguments and configuration models."""

from __future__ import annotations

import argparse
from typing import Any, Dict

from nativeboot.bootstrap.versions import OVERWRITE_ALWAYS, OVERWRITE_NEVER
from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)


class ConfigBridge:
    """Translates CLI arguments to configuration objects."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to config override dict.

        CLI arguments take precedence over config file values. Only options
        explicitly given on the command line produce overrides.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Dictionary of config overrides.
        """
        overrides: Dict[str, Any] = {}

        # Use getattr with defaults for subcommand compatibility
        home = getattr(args, "home", None)
        subdir = getattr(args, "subdir", None)
        prefix = getattr(args, "resource_prefix", None)
        force = getattr(args, "force", False)
        no_overwrite = getattr(args, "no_overwrite", False)
        no_env = getattr(args, "no_env", False)
        include = getattr(args, "include", None)
        exclude = getattr(args, "exclude", None)
        preload = getattr(args, "preload", None)

        if home:
            overrides["home"] = home
        if subdir is not None:
            overrides["subdir"] = subdir
        if prefix:
            overrides["resource_prefix"] = prefix

        if force and no_overwrite:
            LOGGER.warning("Both --force and --no-overwrite given, --force wins")
        if force:
            overrides["overwrite"] = OVERWRITE_ALWAYS
        elif no_overwrite:
            overrides["overwrite"] = OVERWRITE_NEVER

        if no_env:
            overrides["update_environment"] = False
        if include:
            overrides["include"] = list(include)
        if exclude:
            overrides["exclude"] = list(exclude)
        if preload:
            overrides["preload"] = list(preload)

        return overrides
