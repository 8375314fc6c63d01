"""Exception hierarchy for nativeboot.

Everything raised while bootstrapping native libraries derives from
:class:`NativeBootError`, itself a ``RuntimeError``: failures are meant to
abort application startup rather than be recovered from.
"""

from __future__ import annotations


class NativeBootError(RuntimeError):
    """Base class for all native library bootstrap failures."""


class DirectoryCreationError(NativeBootError):
    """The target directory could not be created."""


class ResourceReadError(NativeBootError):
    """A bundled resource or its archive could not be read."""


class ResourceCopyError(NativeBootError):
    """A bundled resource could not be written to the target directory."""


class UnsupportedScopeError(NativeBootError):
    """The anchor module is not loaded from a directory or a zip archive."""


class LibraryPathError(NativeBootError):
    """The in-process native library path could not be updated."""


class EnvironmentUpdateError(NativeBootError):
    """The OS library search environment variable could not be updated."""


class LibraryLoadError(NativeBootError):
    """A native library could not be found or loaded."""
