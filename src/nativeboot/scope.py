"""Locate the packaged scope (directory or zip archive) providing a module.

A module is identified by its dotted name; its ``__spec__.origin`` minus the
dotted path gives back the ``sys.path`` entry it was found in. Native
libraries are bundled relative to that root.
"""

from __future__ import annotations

import importlib.util
import sys
import zipfile
from pathlib import Path, PurePosixPath
from types import ModuleType
from typing import List, Optional, Tuple, Union

from nativeboot.core.errors import UnsupportedScopeError
from nativeboot.core.logging import get_logger
from nativeboot.core.models import PackagedScope, ScopeKind

LOGGER = get_logger(__name__)

Anchor = Union[str, ModuleType]


def anchor_name(anchor: Anchor) -> str:
    """Dotted module name of an anchor given as name or module object."""
    if isinstance(anchor, ModuleType):
        return anchor.__name__
    return anchor


def locate_scope(anchor: Anchor) -> PackagedScope:
    """Resolve the packaged scope of an anchor module.

    Args:
        anchor: Module name or module object.

    Returns:
        PackagedScope describing the directory or archive root.

    Raises:
        UnsupportedScopeError: If the module cannot be found or is not
            loaded from a directory or a zip archive.
    """
    module_name = anchor_name(anchor)
    origin, is_package = _find_origin(anchor)

    if origin is None:
        raise UnsupportedScopeError(
            f"ERROR: Module {module_name} has no file location"
            " (namespace, frozen or built-in module) - not yet supported to unpack"
            " native libraries from."
        )

    relative = _module_relative_path(module_name, is_package, origin)
    root = _strip_relative(Path(origin), len(relative.parts))
    scope = _classify_root(module_name, root)

    scope.shadowed_roots = _find_shadowed_roots(scope, relative)
    for shadowed in scope.shadowed_roots:
        LOGGER.warning(
            f"Module {module_name} found in multiple locations: {shadowed}"
            " will be ignored for loading related native libs!"
        )

    LOGGER.debug(f"Module {module_name} resolved to {scope.kind.value} scope {scope.describe()}")
    return scope


def _find_origin(anchor: Anchor) -> Tuple[Optional[str], bool]:
    """Return (origin, is_package) of the anchor without importing it if possible."""
    if isinstance(anchor, ModuleType):
        spec = getattr(anchor, "__spec__", None)
        origin = getattr(spec, "origin", None) or getattr(anchor, "__file__", None)
        is_package = hasattr(anchor, "__path__")
    else:
        try:
            spec = importlib.util.find_spec(anchor)
        except (ImportError, ValueError) as e:
            raise UnsupportedScopeError(f"ERROR: Module {anchor} could not be located: {e}") from e
        if spec is None:
            raise UnsupportedScopeError(f"ERROR: Module {anchor} not found on sys.path")
        origin = spec.origin
        is_package = spec.submodule_search_locations is not None

    if origin in ("built-in", "frozen"):
        origin = None
    return origin, is_package


def _module_relative_path(module_name: str, is_package: bool, origin: str) -> PurePosixPath:
    """Path of the module file relative to its import root."""
    parts = module_name.split(".")
    file_name = Path(origin).name
    if is_package:
        return PurePosixPath(*parts, file_name)
    return PurePosixPath(*parts[:-1], file_name)


def _strip_relative(origin: Path, depth: int) -> Path:
    root = origin
    for _ in range(depth):
        root = root.parent
    return root


def _classify_root(module_name: str, root: Path) -> PackagedScope:
    """Decide whether ``root`` is a directory or lives inside a zip archive."""
    if root.is_dir():
        return PackagedScope(module_name=module_name, kind=ScopeKind.DIRECTORY, root=root)

    archive = _split_archive_path(root)
    if archive is not None:
        return PackagedScope(
            module_name=module_name,
            kind=ScopeKind.ARCHIVE,
            root=archive[0],
            inner_prefix=archive[1],
        )

    raise UnsupportedScopeError(
        f"ERROR: Location {root} of module {module_name} is neither a directory nor a"
        " zip archive - not yet supported to unpack native libraries from."
    )


def _split_archive_path(path: Path) -> Optional[Tuple[Path, str]]:
    """Split a zipimport path into (archive, inner prefix), None if not in an archive.

    zipimport roots look like /path/app.zip or /path/app.zip/inner/dir.
    """
    inner: List[str] = []
    candidate = path
    while candidate != candidate.parent:
        if candidate.is_file():
            if zipfile.is_zipfile(candidate):
                return candidate, "/".join(reversed(inner))
            return None
        inner.append(candidate.name)
        candidate = candidate.parent
    return None


def _find_shadowed_roots(scope: PackagedScope, relative: PurePosixPath) -> List[Path]:
    """Other ``sys.path`` entries that also provide the same module file."""
    shadowed: List[Path] = []
    primary = _scope_entry(scope)
    for entry in sys.path:
        if not entry:
            continue
        entry_path = Path(entry)
        if _same_path(entry_path, primary):
            continue
        if _entry_provides(entry_path, relative):
            shadowed.append(entry_path)
    return shadowed


def _scope_entry(scope: PackagedScope) -> Path:
    if scope.kind == ScopeKind.ARCHIVE and scope.inner_prefix:
        return scope.root / scope.inner_prefix
    return scope.root


def _same_path(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b


def _entry_provides(entry: Path, relative: PurePosixPath) -> bool:
    if entry.is_dir():
        return (entry / relative).is_file()
    archive = _split_archive_path(entry)
    if archive is None:
        return False
    archive_path, inner = archive
    member = f"{inner}/{relative}" if inner else str(relative)
    try:
        with zipfile.ZipFile(archive_path) as zf:
            return member in zf.namelist()
    except (OSError, zipfile.BadZipFile):
        return False
