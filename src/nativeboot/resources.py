"""Enumerate the native libraries bundled in a packaged scope.

Libraries live in a folder named after the platform prefix directly below
the scope root, e.g. ``<root>/linux-x86-64/libfoo.so``. Only files at that
level are considered; nested folders are reported and ignored.
"""

from __future__ import annotations

import zipfile
from typing import List, Optional, Sequence

import pathspec

from nativeboot.core.errors import ResourceReadError
from nativeboot.core.logging import get_logger
from nativeboot.core.models import LibraryResource, PackagedScope, ScopeKind

LOGGER = get_logger(__name__)


def list_library_resources(
    scope: PackagedScope,
    resource_prefix: str,
    include: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> List[LibraryResource]:
    """List the native libraries bundled for ``resource_prefix``.

    Args:
        scope: Packaged scope of the anchor module.
        resource_prefix: Platform folder name, e.g. ``linux-x86-64``.
        include: Gitignore-style patterns; when given, only matching file
            names are returned.
        exclude: Gitignore-style patterns of file names to skip.

    Returns:
        Library resources sorted by name.

    Raises:
        ResourceReadError: If the archive cannot be read.
    """
    if scope.kind == ScopeKind.ARCHIVE:
        resources = _list_archive(scope, resource_prefix)
    else:
        resources = _list_directory(scope, resource_prefix)

    resources = filter_resources(resources, include, exclude)
    LOGGER.debug(f"Found {len(resources)} native lib(s) for {resource_prefix} in {scope.describe()}")
    return sorted(resources, key=lambda r: r.name)


def filter_resources(
    resources: List[LibraryResource],
    include: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> List[LibraryResource]:
    """Apply include/exclude patterns to resource file names."""
    include_spec = pathspec.PathSpec.from_lines("gitignore", include) if include else None
    exclude_spec = pathspec.PathSpec.from_lines("gitignore", exclude) if exclude else None

    result: List[LibraryResource] = []
    for resource in resources:
        if include_spec is not None and not include_spec.match_file(resource.name):
            LOGGER.debug(f"Not included: {resource.name}")
            continue
        if exclude_spec is not None and exclude_spec.match_file(resource.name):
            LOGGER.debug(f"Excluded: {resource.name}")
            continue
        result.append(resource)
    return result


def _list_directory(scope: PackagedScope, resource_prefix: str) -> List[LibraryResource]:
    lib_dir = scope.root / resource_prefix
    if not lib_dir.is_dir():
        return []

    resources: List[LibraryResource] = []
    try:
        entries = list(lib_dir.iterdir())
    except OSError as e:
        raise ResourceReadError(f"ERROR: Failed to list resources in {lib_dir}") from e

    for entry in entries:
        if entry.is_file():
            resources.append(LibraryResource(name=entry.name, path=entry))
        else:
            LOGGER.warning(f"Resources in sub directory={entry} are ignored for loading native libs!")
    return resources


def _list_archive(scope: PackagedScope, resource_prefix: str) -> List[LibraryResource]:
    path_prefix = f"{resource_prefix}/"
    if scope.inner_prefix:
        path_prefix = f"{scope.inner_prefix.strip('/')}/{path_prefix}"

    resources: List[LibraryResource] = []
    try:
        with zipfile.ZipFile(scope.root) as zf:
            names = zf.namelist()
    except (OSError, zipfile.BadZipFile) as e:
        raise ResourceReadError(f"ERROR: Failed to read from archive file={scope.root}") from e

    for name in names:
        if not name.startswith(path_prefix):
            continue
        rest = name[len(path_prefix):]
        if "/" in rest:
            LOGGER.warning(f"Resources in sub directory path={name} are ignored for loading native libs!")
            continue
        if rest:
            resources.append(LibraryResource(name=rest, archive=scope.root, member=name))
    return resources
