"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace

from nativeboot.bootstrap.platform import get_platform_info
from nativeboot.bootstrap.versions import should_overwrite
from nativeboot.cli.commands import Command
from nativeboot.cli.exit_codes import EXIT_LIBRARIES_MISSING, EXIT_SUCCESS
from nativeboot.config.models import NativeBootConfig
from nativeboot.extract import resolve_target
from nativeboot.library_path import library_path_env_name
from nativeboot.resources import list_library_resources
from nativeboot.scope import locate_scope


class StatusCommand(Command):
    """Shows where a module's native libraries go and whether they are there."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "NativeBootConfig | None" = None) -> int:
        """Execute the status command.

        Args:
            args: Parsed command-line arguments.
            config: Merged configuration.

        Returns:
            EXIT_SUCCESS if every bundled library is extracted,
            EXIT_LIBRARIES_MISSING otherwise.
        """
        config = config or NativeBootConfig()
        platform_info = get_platform_info()
        version, prefix, target_dir = resolve_target(
            args.module, version=args.version_override, config=config, platform_info=platform_info
        )
        scope = locate_scope(args.module)
        resources = list_library_resources(scope, prefix, config.include, config.exclude)

        print(f"Module: {args.module}")
        print(f"Version: {version}")
        print(f"Scope: {scope.describe()} ({scope.kind.value})")
        print(f"Platform: {platform_info.os}-{platform_info.arch}")
        print(f"Resource prefix: {prefix}")
        print(f"Target directory: {target_dir}")
        print(f"Overwrite existing: {'yes' if should_overwrite(version, config.overwrite) else 'no'}")
        print(f"Search variable: {library_path_env_name(platform_info)}")
        if config.config_sources:
            print(f"Config sources: {', '.join(config.config_sources)}")
        print()

        print("Libraries:")
        missing = 0
        for resource in resources:
            if (target_dir / resource.name).is_file():
                state = "extracted"
            else:
                state = "missing"
                missing += 1
            print(f"  {resource.name}: {state}")
        if not resources:
            print("  No native libraries bundled for this platform.")

        return EXIT_LIBRARIES_MISSING if missing else EXIT_SUCCESS
