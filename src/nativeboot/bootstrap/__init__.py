"""
Bootstrap module for nativeboot.

This module handles:
- Platform detection (OS + architecture -> resource prefix)
- Home directory and extraction target paths
- Version resolution and overwrite policy
"""

from nativeboot.bootstrap.platform import get_platform_info, PlatformInfo
from nativeboot.bootstrap.paths import (
    build_target_dir,
    get_nativeboot_home,
    get_user_home,
    NativebootPaths,
)
from nativeboot.bootstrap.versions import (
    is_snapshot_version,
    resolve_version,
    should_overwrite,
    UNKNOWN_VERSION,
)

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "build_target_dir",
    "get_nativeboot_home",
    "get_user_home",
    "NativebootPaths",
    "is_snapshot_version",
    "resolve_version",
    "should_overwrite",
    "UNKNOWN_VERSION",
]
