from __future__ import annotations

import zipfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Iterator, List, Optional


class ScopeKind(str, Enum):
    """How the anchor module's root is stored on disk."""

    DIRECTORY = "directory"
    ARCHIVE = "archive"


@dataclass
class PackagedScope:
    """The ``sys.path`` root that provides an anchor module.

    For a directory scope ``root`` is the directory itself. For an archive
    scope ``root`` is the zip file and ``inner_prefix`` the sub directory
    inside the archive acting as the import root ("" for the archive root).
    """

    module_name: str
    kind: ScopeKind
    root: Path
    inner_prefix: str = ""
    shadowed_roots: List[Path] = field(default_factory=list)

    def describe(self) -> str:
        """Human readable location, e.g. ``/opt/app.zip!/lib``."""
        if self.kind == ScopeKind.ARCHIVE:
            suffix = f"!/{self.inner_prefix}" if self.inner_prefix else "!/"
            return f"{self.root}{suffix}"
        return str(self.root)


@dataclass
class LibraryResource:
    """A single native library bundled within a packaged scope.

    Exactly one of ``path`` (directory scope) or ``archive`` + ``member``
    (archive scope) is set.
    """

    name: str
    path: Optional[Path] = None
    archive: Optional[Path] = None
    member: Optional[str] = None

    @property
    def location(self) -> str:
        """Location string used in log and error messages."""
        if self.archive is not None:
            return f"{self.archive}!/{self.member}"
        return str(self.path)

    @contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        """Open the resource for binary reading."""
        if self.archive is not None:
            with zipfile.ZipFile(self.archive) as zf:
                with zf.open(self.member or "") as stream:
                    yield stream
        else:
            with open(self.path or "", "rb") as stream:
                yield stream


@dataclass
class ExtractionResult:
    """Outcome of extracting the native libraries for one anchor."""

    module_name: str
    version: str
    resource_prefix: str
    target_dir: Path
    overwrite: bool
    copied: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    environment_updated: bool = False
    preloaded: List[str] = field(default_factory=list)

    @property
    def libraries(self) -> List[Path]:
        """All library files now present in the target directory."""
        return sorted(self.copied + self.skipped)
