"""Path management for nativeboot.

Handles two locations:

- the nativeboot home (``~/.nativeboot``) holding the global configuration;
- the extraction target ``<home>[/<subdir>]/<version>/<os>-<arch>/`` that
  receives the native libraries of a packaged scope.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".nativeboot"

# Environment variable to override home directory
NATIVEBOOT_HOME_ENV = "NATIVEBOOT_HOME"


def get_nativeboot_home() -> Path:
    """Get the nativeboot home directory path.

    Resolution order:
    1. NATIVEBOOT_HOME environment variable (if set)
    2. ~/.nativeboot (default)

    Returns:
        Path to the nativeboot home directory.
    """
    env_home = os.environ.get(NATIVEBOOT_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def get_user_home(override: Optional[str] = None) -> Path:
    """Base directory that extraction targets are created under.

    Args:
        override: Optional directory (the ``home`` config key).

    Returns:
        ``override`` with ``~`` expanded, or the user's home directory.
    """
    if override:
        return Path(override).expanduser()
    return Path.home()


def build_target_dir(
    base_home: Path,
    home_subdir: Optional[str],
    version: str,
    resource_prefix: str,
) -> Path:
    """Build the versioned, platform specific extraction directory.

    Args:
        base_home: Base directory, usually the user's home.
        home_subdir: Optional sub directory; empty or None adds no component.
        version: Version of the packaged scope.
        resource_prefix: Platform prefix such as ``linux-x86-64``.

    Returns:
        ``<base_home>[/<home_subdir>]/<version>/<resource_prefix>``.
    """
    target = base_home
    if home_subdir:
        target = target / home_subdir
    return target / version / resource_prefix


@dataclass
class NativebootPaths:
    """Manages paths within the nativeboot home directory.

    Directory structure:
        ~/.nativeboot/
            config.yml      - Global configuration
    """

    home: Path

    _CONFIG_FILE: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls) -> "NativebootPaths":
        """Create paths from the default nativeboot home."""
        return cls(get_nativeboot_home())

    @property
    def config_dir(self) -> Path:
        """Directory holding configuration files."""
        return self.home

    @property
    def config_file(self) -> Path:
        """Global configuration file."""
        return self.config_dir / self._CONFIG_FILE

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
