"""Extract command implementation."""

from __future__ import annotations

from argparse import Namespace

from nativeboot.cli.commands import Command
from nativeboot.cli.exit_codes import EXIT_SUCCESS
from nativeboot.config.models import NativeBootConfig
from nativeboot.extract import extract_native_libs_to_user_home


class ExtractCommand(Command):
    """Extracts a module's bundled native libraries into the home directory."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "extract"

    def execute(self, args: Namespace, config: "NativeBootConfig | None" = None) -> int:
        """Execute the extract command.

        Args:
            args: Parsed command-line arguments.
            config: Merged configuration (CLI overrides already applied).

        Returns:
            Exit code. Failures propagate as NativeBootError and are mapped
            by the runner.
        """
        result = extract_native_libs_to_user_home(
            args.module,
            version=args.version_override,
            config=config or NativeBootConfig(),
        )

        print(f"Module:    {result.module_name} {result.version}")
        print(f"Platform:  {result.resource_prefix}")
        print(f"Target:    {result.target_dir}")
        print(f"Copied:    {len(result.copied)}")
        print(f"Unchanged: {len(result.skipped)}")
        for path in result.libraries:
            print(f"  {path.name}")
        if not result.libraries:
            print(f"  No native libraries bundled for {result.resource_prefix}.")
        if result.preloaded:
            print(f"Preloaded: {', '.join(result.preloaded)}")

        return EXIT_SUCCESS
