"""Shared fixtures: isolated home directories and packaged scopes on sys.path."""

from __future__ import annotations

import itertools
import logging
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import pytest

from nativeboot import library_path
from nativeboot.core.logging import ROOT_LOGGER_NAME

TEST_PREFIX = "testos-testarch"

_scope_ids = itertools.count()


@dataclass
class FakeScope:
    """A packaged module created for a test."""

    module: str
    root: Path
    libs: Dict[str, bytes] = field(default_factory=dict)


@pytest.fixture(autouse=True)
def _isolate_library_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset the in-process library path and restore env vars after each test."""
    monkeypatch.setattr(library_path, "_library_path", None)
    monkeypatch.setattr(library_path, "_dll_directories", [])
    for name in (library_path.UNIX_PATH_ENV, library_path.WINDOWS_PATH_ENV):
        if name in os.environ:
            monkeypatch.setenv(name, os.environ[name])
        else:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo handler and level changes made by configure_logging."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def user_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user's home and the nativeboot home into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("NATIVEBOOT_HOME", str(home / ".nativeboot"))
    return home


def _unique_module() -> str:
    return f"nbfixture_{os.getpid()}_{next(_scope_ids)}"


def _dist_info_files(module: str, version: str) -> Dict[str, str]:
    dist_info = f"{module}-{version}.dist-info"
    return {
        f"{dist_info}/METADATA": f"Metadata-Version: 2.1\nName: {module}\nVersion: {version}\n",
        f"{dist_info}/top_level.txt": f"{module}\n",
    }


@pytest.fixture
def make_dir_scope(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeScope]:
    """Factory creating a package directory with bundled libs on sys.path."""

    def _make(
        libs: Optional[Dict[str, bytes]] = None,
        prefix: str = TEST_PREFIX,
        version: Optional[str] = None,
        subdirs: Iterable[str] = (),
    ) -> FakeScope:
        module = _unique_module()
        root = tmp_path / f"site_{module}"
        package = root / module
        package.mkdir(parents=True)
        (package / "__init__.py").write_text("")
        (package / "core.py").write_text("")

        libs = {"libalpha.so": b"alpha", "libbeta.so": b"beta"} if libs is None else libs
        lib_dir = root / prefix
        lib_dir.mkdir()
        for name, data in libs.items():
            (lib_dir / name).write_bytes(data)
        for sub in subdirs:
            (lib_dir / sub).mkdir()
            (lib_dir / sub / "libnested.so").write_bytes(b"nested")

        if version:
            for rel, text in _dist_info_files(module, version).items():
                path = root / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text)

        monkeypatch.syspath_prepend(str(root))
        return FakeScope(module=module, root=root, libs=dict(libs))

    return _make


@pytest.fixture
def make_zip_scope(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeScope]:
    """Factory creating a zip archive (zipimport) with bundled libs on sys.path."""

    def _make(
        libs: Optional[Dict[str, bytes]] = None,
        prefix: str = TEST_PREFIX,
        subdirs: Iterable[str] = (),
        inner: str = "",
    ) -> FakeScope:
        module = _unique_module()
        archive = tmp_path / f"{module}.zip"
        base = f"{inner}/" if inner else ""

        libs = {"libalpha.so": b"alpha", "libbeta.so": b"beta"} if libs is None else libs
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(f"{base}{module}/__init__.py", "")
            zf.writestr(f"{base}{module}/core.py", "")
            zf.writestr(f"{base}{prefix}/", "")
            for name, data in libs.items():
                zf.writestr(f"{base}{prefix}/{name}", data)
            for sub in subdirs:
                zf.writestr(f"{base}{prefix}/{sub}/libnested.so", b"nested")

        entry = str(archive / inner) if inner else str(archive)
        monkeypatch.syspath_prepend(entry)
        return FakeScope(module=module, root=archive, libs=dict(libs))

    return _make
