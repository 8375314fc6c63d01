"""nativeboot - unpack bundled native libraries and expose them to the linker.

Typical use, early during application startup::

    import nativeboot

    nativeboot.extract_native_libs_to_user_home("myapp", ".myapp")

The platform specific libraries shipped next to ``myapp`` under
``<root>/<os>-<arch>/`` are copied to ``~/.myapp/<version>/<os>-<arch>/``
and that directory is prepended to the in-process library path and to
``LD_LIBRARY_PATH`` (``PATH`` on Windows).
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

logging.getLogger("nativeboot").addHandler(logging.NullHandler())

# ruff: noqa: E402
from nativeboot.core.errors import (
    DirectoryCreationError,
    EnvironmentUpdateError,
    LibraryLoadError,
    LibraryPathError,
    NativeBootError,
    ResourceCopyError,
    ResourceReadError,
    UnsupportedScopeError,
)
from nativeboot.extract import (
    copy_resource_libs_to_target_dir,
    extract_native_libs_to_user_home,
)
from nativeboot.library_path import (
    extend_library_path_and_ld_path,
    find_library,
    get_library_path,
    load_library,
)

__all__ = [
    "__version__",
    "extract_native_libs_to_user_home",
    "copy_resource_libs_to_target_dir",
    "extend_library_path_and_ld_path",
    "find_library",
    "get_library_path",
    "load_library",
    "NativeBootError",
    "DirectoryCreationError",
    "ResourceReadError",
    "ResourceCopyError",
    "UnsupportedScopeError",
    "LibraryPathError",
    "EnvironmentUpdateError",
    "LibraryLoadError",
]
