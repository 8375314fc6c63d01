"""List command implementation."""

from __future__ import annotations

from argparse import Namespace

from nativeboot.bootstrap.platform import get_platform_info
from nativeboot.cli.commands import Command
from nativeboot.cli.exit_codes import EXIT_SUCCESS
from nativeboot.config.models import NativeBootConfig
from nativeboot.resources import list_library_resources
from nativeboot.scope import locate_scope


class ListLibsCommand(Command):
    """Lists the native libraries bundled with a module."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "list"

    def execute(self, args: Namespace, config: "NativeBootConfig | None" = None) -> int:
        """Execute the list command.

        Displays the bundled libraries for the configured or detected
        platform prefix.

        Args:
            args: Parsed command-line arguments.
            config: Merged configuration.

        Returns:
            Exit code (always 0 when the module is found).
        """
        prefix = (config.resource_prefix if config else None) or get_platform_info().resource_prefix
        include = config.include if config else None
        exclude = config.exclude if config else None

        scope = locate_scope(args.module)
        resources = list_library_resources(scope, prefix, include, exclude)

        print(f"Native libraries for {prefix} in {scope.describe()}:")
        print()

        if resources:
            for resource in resources:
                print(f"  {resource.name}")
        else:
            print("  No native libraries bundled for this platform.")

        return EXIT_SUCCESS
