"""Native library search paths.

Two search paths are maintained:

- the in-process library path, consulted by :func:`find_library` and
  :func:`load_library` (and mirrored into ``os.add_dll_directory`` on
  Windows);
- the OS library search variable, ``PATH`` on Windows and
  ``LD_LIBRARY_PATH`` elsewhere, inherited by child processes.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import os
from pathlib import Path
from typing import Any, List, Optional, Union

from nativeboot.bootstrap.platform import PlatformInfo, get_platform_info
from nativeboot.core.errors import EnvironmentUpdateError, LibraryLoadError, LibraryPathError
from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)

WINDOWS_PATH_ENV = "PATH"
UNIX_PATH_ENV = "LD_LIBRARY_PATH"

PathLike = Union[str, Path]

_library_path: Optional[str] = None
# Handles returned by os.add_dll_directory; removing them drops the directory
_dll_directories: List[Any] = []


def prepend_path(entry: str, current: Optional[str], sep: str = os.pathsep) -> str:
    """Prepend ``entry`` to a separator delimited search path.

    Args:
        entry: Directory to put first.
        current: Existing value; None or empty means unset.
        sep: Path list separator.

    Returns:
        The new search path. Unchanged if ``entry`` is already first.
    """
    if not current:
        return entry
    if current.split(sep)[0] == entry:
        return current
    return f"{entry}{sep}{current}"


def library_path_env_name(platform_info: Optional[PlatformInfo] = None) -> str:
    """Name of the OS variable used by the dynamic linker."""
    info = platform_info or get_platform_info()
    return WINDOWS_PATH_ENV if info.is_windows else UNIX_PATH_ENV


def get_library_path() -> Optional[str]:
    """Current in-process native library path, or None if never set."""
    return _library_path


def set_library_path(value: Optional[str]) -> None:
    global _library_path
    _library_path = value


def library_path_entries() -> List[str]:
    if not _library_path:
        return []
    return [entry for entry in _library_path.split(os.pathsep) if entry]


def extend_library_path_and_ld_path(
    path_name: PathLike,
    platform_info: Optional[PlatformInfo] = None,
) -> None:
    """Prepend ``path_name`` to the in-process and the OS library paths.

    Args:
        path_name: Directory holding native libraries.
        platform_info: Platform override (mainly for tests).

    Raises:
        LibraryPathError: If the in-process path cannot be updated.
        EnvironmentUpdateError: If the OS variable cannot be updated.
    """
    info = platform_info or get_platform_info()
    entry = str(path_name)

    current = get_library_path()
    updated = prepend_path(entry, current)
    set_library_path(updated)
    # Each add_dll_directory call returns a new handle, even for a known directory
    if info.is_windows and updated != current:
        try:
            _add_dll_directory(entry)
        except (OSError, AttributeError) as e:
            raise LibraryPathError("ERROR: Failed to update native library path!") from e

    env_name = library_path_env_name(info)
    new_value = prepend_path(entry, os.environ.get(env_name))
    try:
        os.environ[env_name] = new_value
    except (OSError, ValueError) as e:
        raise EnvironmentUpdateError(f'setenv("{env_name}") failed!') from e

    LOGGER.info(f"Prepended {entry} to native library path and {env_name}")


def _add_dll_directory(entry: str) -> None:
    handle = os.add_dll_directory(entry)  # type: ignore[attr-defined]
    _dll_directories.append(handle)


def library_file_names(name: str, platform_info: Optional[PlatformInfo] = None) -> List[str]:
    """Candidate file names for a library base name on a platform.

    ``foo`` maps to ``libfoo.so`` / ``foo.so`` on Unix, ``libfoo.dylib`` on
    macOS and ``foo.dll`` / ``libfoo.dll`` on Windows. Names that already
    carry an extension are returned as is.
    """
    info = platform_info or get_platform_info()
    if info.is_windows:
        if name.lower().endswith(".dll"):
            return [name]
        return [f"{name}.dll", f"lib{name}.dll"]
    if info.is_darwin:
        if name.endswith((".dylib", ".so", ".jnilib")):
            return [name]
        return [f"lib{name}.dylib", f"{name}.dylib", f"lib{name}.so", f"lib{name}.jnilib"]
    if ".so" in name:
        return [name]
    return [f"lib{name}.so", f"{name}.so"]


def find_library(name: str, platform_info: Optional[PlatformInfo] = None) -> Optional[str]:
    """Resolve a library against the in-process path, then the system.

    Versioned Unix sonames (``libfoo.so.1``) in a library path directory
    are accepted when no unversioned file exists.

    Returns:
        Absolute path or system library name, None if not found.
    """
    candidates = library_file_names(name, platform_info)
    for directory in library_path_entries():
        base = Path(directory)
        for candidate in candidates:
            path = base / candidate
            if path.is_file():
                return str(path)
        for candidate in candidates:
            if candidate.endswith(".so"):
                versioned = sorted(base.glob(f"{candidate}.*"))
                if versioned:
                    return str(versioned[0])
    return ctypes.util.find_library(name)


def load_library(name: str, platform_info: Optional[PlatformInfo] = None) -> ctypes.CDLL:
    """Load a native library by base name.

    Raises:
        LibraryLoadError: If the library is not found or fails to load.
    """
    resolved = find_library(name, platform_info)
    if resolved is None:
        raise LibraryLoadError(f"ERROR: Native library {name} not found in {library_path_entries()} or system paths")
    try:
        library = ctypes.CDLL(resolved)
    except OSError as e:
        raise LibraryLoadError(f"ERROR: Failed to load native library {name} from {resolved}") from e
    LOGGER.debug(f"Loaded native library {name} from {resolved}")
    return library
