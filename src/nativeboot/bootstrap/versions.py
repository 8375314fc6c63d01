"""Version resolution for packaged scopes.

The version of the distribution that ships an anchor module names the
extraction directory and decides whether existing files are overwritten.
"""

from __future__ import annotations

import re
import sys
from importlib import metadata
from types import ModuleType
from typing import Optional

from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)

UNKNOWN_VERSION = "unknownVersion"
SNAPSHOT_SUFFIX = "-SNAPSHOT"

OVERWRITE_AUTO = "auto"
OVERWRITE_ALWAYS = "always"
OVERWRITE_NEVER = "never"
OVERWRITE_POLICIES = (OVERWRITE_AUTO, OVERWRITE_ALWAYS, OVERWRITE_NEVER)

# PEP 440 development release segment: 1.0.dev0, 1.0-dev, 2.1.0.dev12
# Matched against the public version only (before any "+local" label)
_DEV_RELEASE = re.compile(r"[._-]?dev(?:[._-]?\d+)?$", re.IGNORECASE)


def get_package_version(module_name: str, module: Optional[ModuleType] = None) -> Optional[str]:
    """Look up the version of the distribution providing ``module_name``.

    Resolution order:
    1. Installed distribution owning the top-level package
    2. ``__version__`` of the module or its top-level package, if imported

    Args:
        module_name: Dotted module name of the anchor.
        module: The module object, if the caller already has it.

    Returns:
        Version string, or None if it cannot be determined.
    """
    top_level = module_name.split(".")[0]

    dist_names = metadata.packages_distributions().get(top_level, [])
    for dist_name in dist_names:
        try:
            return metadata.version(dist_name)
        except metadata.PackageNotFoundError:
            continue

    candidates = [module, sys.modules.get(module_name), sys.modules.get(top_level)]
    for candidate in candidates:
        version = getattr(candidate, "__version__", None)
        if isinstance(version, str) and version:
            return version

    return None


def resolve_version(
    module_name: str,
    module: Optional[ModuleType] = None,
    explicit: Optional[str] = None,
) -> str:
    """Version used to name the extraction directory.

    Falls back to ``unknownVersion`` when nothing is found.
    """
    if explicit:
        return explicit
    version = get_package_version(module_name, module)
    if version is None:
        LOGGER.debug(f"No version found for {module_name}, using {UNKNOWN_VERSION}")
        return UNKNOWN_VERSION
    return version


def is_snapshot_version(version: str) -> bool:
    """Check whether a version denotes a snapshot / development build."""
    if version.endswith(SNAPSHOT_SUFFIX):
        return True
    public = version.split("+", 1)[0]
    return bool(_DEV_RELEASE.search(public))


def should_overwrite(version: str, policy: str = OVERWRITE_AUTO) -> bool:
    """Decide whether existing extracted files get replaced.

    With the ``auto`` policy, files are replaced for unknown and snapshot
    versions only. Released versions keep what is already on disk.

    Raises:
        ValueError: If ``policy`` is not a known overwrite policy.
    """
    if policy == OVERWRITE_ALWAYS:
        return True
    if policy == OVERWRITE_NEVER:
        return False
    if policy != OVERWRITE_AUTO:
        raise ValueError(f"Unknown overwrite policy: {policy}. Available: {list(OVERWRITE_POLICIES)}")
    return version == UNKNOWN_VERSION or is_snapshot_version(version)
