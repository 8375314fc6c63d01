"""Extract bundled native libraries and register their directory.

The entry point is :func:`extract_native_libs_to_user_home`, meant to be
called once during application startup, before any native library of the
packaged scope is loaded.
"""

from __future__ import annotations

import os
import tempfile
import zipfile
from pathlib import Path
from types import ModuleType
from typing import IO, List, Optional, Tuple

from nativeboot.bootstrap.paths import build_target_dir, get_user_home
from nativeboot.bootstrap.platform import PlatformInfo, get_platform_info
from nativeboot.bootstrap.versions import resolve_version, should_overwrite
from nativeboot.config.models import NativeBootConfig
from nativeboot.core.errors import DirectoryCreationError, ResourceCopyError, ResourceReadError
from nativeboot.core.logging import get_logger
from nativeboot.core.models import ExtractionResult, LibraryResource
from nativeboot.library_path import extend_library_path_and_ld_path, load_library
from nativeboot.resources import list_library_resources
from nativeboot.scope import Anchor, anchor_name, locate_scope

LOGGER = get_logger(__name__)

# Extracted libraries must be loadable by the dynamic linker
LIBRARY_FILE_MODE = 0o755


def resolve_target(
    anchor: Anchor,
    home_subdir: Optional[str] = None,
    version: Optional[str] = None,
    config: Optional[NativeBootConfig] = None,
    platform_info: Optional[PlatformInfo] = None,
) -> Tuple[str, str, Path]:
    """Compute (version, resource prefix, target directory) for an anchor.

    ``home_subdir`` takes precedence over ``config.subdir``.
    """
    config = config or NativeBootConfig()
    module = anchor if isinstance(anchor, ModuleType) else None
    resolved_version = resolve_version(anchor_name(anchor), module, version)
    prefix = config.resource_prefix or (platform_info or get_platform_info()).resource_prefix
    subdir = home_subdir if home_subdir is not None else config.subdir
    target_dir = build_target_dir(get_user_home(config.home), subdir, resolved_version, prefix)
    return resolved_version, prefix, target_dir


def extract_native_libs_to_user_home(
    anchor: Anchor,
    home_subdir: Optional[str] = None,
    *,
    version: Optional[str] = None,
    config: Optional[NativeBootConfig] = None,
    platform_info: Optional[PlatformInfo] = None,
) -> ExtractionResult:
    """Extract an anchor's native libraries below the user's home directory.

    Libraries bundled in ``<scope root>/<os>-<arch>/`` are copied to
    ``<home>[/<home_subdir>]/<version>/<os>-<arch>/``; that directory is then
    prepended to the in-process library path and to ``LD_LIBRARY_PATH``
    (``PATH`` on Windows). Existing files are only replaced for snapshot or
    unknown versions, unless the config's overwrite policy says otherwise.

    Args:
        anchor: Module name or module object inside the packaged scope.
        home_subdir: Sub directory under the home directory, e.g. ``.myapp``.
        version: Explicit version, bypassing distribution metadata.
        config: Optional configuration, defaults to built-in defaults.
        platform_info: Platform override (mainly for tests).

    Returns:
        ExtractionResult describing what was copied and where.

    Raises:
        NativeBootError: On any failure; nothing is retried.
    """
    config = config or NativeBootConfig()
    info = platform_info or get_platform_info()
    resolved_version, prefix, target_dir = resolve_target(
        anchor, home_subdir, version, config, info
    )
    overwrite = should_overwrite(resolved_version, config.overwrite)

    result = ExtractionResult(
        module_name=anchor_name(anchor),
        version=resolved_version,
        resource_prefix=prefix,
        target_dir=target_dir,
        overwrite=overwrite,
    )

    copied, skipped = copy_resource_libs_to_target_dir(
        anchor,
        overwrite,
        target_dir,
        resource_prefix=prefix,
        include=config.include,
        exclude=config.exclude,
    )
    result.copied = copied
    result.skipped = skipped

    if config.update_environment:
        extend_library_path_and_ld_path(target_dir, info)
        result.environment_updated = True

    for name in config.preload:
        load_library(name, info)
        result.preloaded.append(name)

    LOGGER.info(
        f"{result.module_name} {resolved_version}: {len(copied)} copied,"
        f" {len(skipped)} already present in {target_dir}"
    )
    return result


def copy_resource_libs_to_target_dir(
    anchor: Anchor,
    overwrite: bool,
    target_dir: Path,
    resource_prefix: Optional[str] = None,
    include: Optional[List[str]] = None,
    exclude: Optional[List[str]] = None,
) -> Tuple[List[Path], List[Path]]:
    """Copy the anchor's bundled libraries into ``target_dir``.

    Args:
        anchor: Module name or module object inside the packaged scope.
        overwrite: Replace files already present in the target directory.
        target_dir: Destination, created if missing.
        resource_prefix: Platform folder, defaults to the current platform.
        include: Optional gitignore-style include patterns.
        exclude: Optional gitignore-style exclude patterns.

    Returns:
        Tuple of (copied files, skipped existing files).

    Raises:
        DirectoryCreationError: If ``target_dir`` cannot be created.
        ResourceReadError: If a bundled resource cannot be read.
        ResourceCopyError: If a resource cannot be written.
    """
    target_dir = Path(target_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(f"ERROR: Directory {target_dir} could not be created!") from e

    prefix = resource_prefix or get_platform_info().resource_prefix
    scope = locate_scope(anchor)
    resources = list_library_resources(scope, prefix, include, exclude)

    copied: List[Path] = []
    skipped: List[Path] = []
    for resource in resources:
        target_file = target_dir / resource.name
        if copy_resource_lib(resource, target_file, overwrite):
            copied.append(target_file)
        else:
            skipped.append(target_file)
    return copied, skipped


def copy_resource_lib(resource: LibraryResource, target_file: Path, overwrite: bool) -> bool:
    """Copy a single resource to ``target_file``.

    The content is written to a temporary file next to the target and then
    moved into place.

    Returns:
        True if the file was written, False if an existing file was kept.
    """
    if not overwrite and target_file.exists():
        LOGGER.debug(f"Keeping existing file={target_file}")
        return False

    try:
        with resource.open() as src:
            _write_atomically(src, resource, target_file)
    except (OSError, KeyError, ValueError, zipfile.BadZipFile) as e:
        raise ResourceReadError(f"ERROR: Failed to read resource={resource.location}") from e

    if overwrite:
        LOGGER.info(f" -> copied resource={resource.location} to file={target_file}")
    else:
        LOGGER.debug(f" -> copied resource={resource.location} to file={target_file}")
    return True


def _write_atomically(src: IO[bytes], resource: LibraryResource, target_file: Path) -> None:
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{resource.name}.", dir=target_file.parent)
        with os.fdopen(fd, "wb") as dest:
            while True:
                try:
                    chunk = src.read(1024 * 1024)
                except (OSError, zipfile.BadZipFile) as e:
                    raise ResourceReadError(f"ERROR: Failed to read resource={resource.location}") from e
                if not chunk:
                    break
                dest.write(chunk)
        os.chmod(tmp_name, LIBRARY_FILE_MODE)
        os.replace(tmp_name, target_file)
        tmp_name = None
    except OSError as e:
        raise ResourceCopyError(
            f"ERROR: Failed to copy resource={resource.location} to file={target_file}"
        ) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                LOGGER.debug(f"Could not remove temporary file {tmp_name}")
