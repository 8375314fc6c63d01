"""Tests for nativeboot.resources."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import pytest

from nativeboot.core.errors import ResourceReadError
from nativeboot.core.models import PackagedScope, ScopeKind
from nativeboot.resources import filter_resources, list_library_resources

PREFIX = "linux-x86-64"


def _dir_scope(root: Path) -> PackagedScope:
    return PackagedScope(module_name="app", kind=ScopeKind.DIRECTORY, root=root)


def _zip_scope(archive: Path, inner: str = "") -> PackagedScope:
    return PackagedScope(module_name="app", kind=ScopeKind.ARCHIVE, root=archive, inner_prefix=inner)


@pytest.fixture
def lib_dir(tmp_path: Path) -> Path:
    lib_dir = tmp_path / PREFIX
    lib_dir.mkdir()
    (lib_dir / "libzeta.so").write_bytes(b"z")
    (lib_dir / "libalpha.so").write_bytes(b"a")
    (lib_dir / "libalpha.so.debug").write_bytes(b"d")
    return lib_dir


class TestDirectoryResources:
    """Tests for listing libraries of a directory scope."""

    def test_lists_files_sorted(self, tmp_path: Path, lib_dir: Path) -> None:
        resources = list_library_resources(_dir_scope(tmp_path), PREFIX)

        assert [r.name for r in resources] == ["libalpha.so", "libalpha.so.debug", "libzeta.so"]
        assert resources[0].path == lib_dir / "libalpha.so"
        assert resources[0].archive is None

    def test_missing_prefix_directory(self, tmp_path: Path) -> None:
        assert list_library_resources(_dir_scope(tmp_path), "win32-x86") == []

    def test_sub_directories_are_ignored(
        self, tmp_path: Path, lib_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (lib_dir / "plugins").mkdir()
        (lib_dir / "plugins" / "libplugin.so").write_bytes(b"p")

        with caplog.at_level(logging.WARNING, logger="nativeboot"):
            resources = list_library_resources(_dir_scope(tmp_path), PREFIX)

        assert "libplugin.so" not in [r.name for r in resources]
        assert "are ignored for loading native libs" in caplog.text

    def test_opens_resource_content(self, tmp_path: Path, lib_dir: Path) -> None:
        resource = list_library_resources(_dir_scope(tmp_path), PREFIX)[-1]
        with resource.open() as stream:
            assert stream.read() == b"z"


class TestArchiveResources:
    """Tests for listing libraries of an archive scope."""

    def _archive(self, tmp_path: Path, base: str = "") -> Path:
        archive = tmp_path / "app.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr(f"{base}app/__init__.py", "")
            zf.writestr(f"{base}{PREFIX}/", "")
            zf.writestr(f"{base}{PREFIX}/libb.so", b"b")
            zf.writestr(f"{base}{PREFIX}/liba.so", b"a")
            zf.writestr(f"{base}{PREFIX}/nested/libc.so", b"c")
            zf.writestr(f"{base}win32-x86/a.dll", b"w")
        return archive

    def test_lists_members_of_prefix(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path)
        resources = list_library_resources(_zip_scope(archive), PREFIX)

        assert [r.name for r in resources] == ["liba.so", "libb.so"]
        assert resources[0].archive == archive
        assert resources[0].member == f"{PREFIX}/liba.so"
        assert resources[0].location == f"{archive}!/{PREFIX}/liba.so"

    def test_inner_prefix(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path, base="lib/")
        resources = list_library_resources(_zip_scope(archive, inner="lib"), PREFIX)

        assert [r.member for r in resources] == [f"lib/{PREFIX}/liba.so", f"lib/{PREFIX}/libb.so"]

    def test_nested_members_are_ignored(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        archive = self._archive(tmp_path)

        with caplog.at_level(logging.WARNING, logger="nativeboot"):
            resources = list_library_resources(_zip_scope(archive), PREFIX)

        assert "libc.so" not in [r.name for r in resources]
        assert f"path={PREFIX}/nested/libc.so" in caplog.text

    def test_opens_member_content(self, tmp_path: Path) -> None:
        archive = self._archive(tmp_path)
        resource = list_library_resources(_zip_scope(archive), PREFIX)[1]
        with resource.open() as stream:
            assert stream.read() == b"b"

    def test_unreadable_archive(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.zip"
        broken.write_bytes(b"not a zip file")

        with pytest.raises(ResourceReadError, match="Failed to read from archive file="):
            list_library_resources(_zip_scope(broken), PREFIX)


class TestFilterResources:
    """Tests for include/exclude patterns."""

    def test_include_patterns(self, tmp_path: Path, lib_dir: Path) -> None:
        resources = list_library_resources(_dir_scope(tmp_path), PREFIX, include=["libalpha*"])
        assert [r.name for r in resources] == ["libalpha.so", "libalpha.so.debug"]

    def test_exclude_patterns(self, tmp_path: Path, lib_dir: Path) -> None:
        resources = list_library_resources(_dir_scope(tmp_path), PREFIX, exclude=["*.debug"])
        assert [r.name for r in resources] == ["libalpha.so", "libzeta.so"]

    def test_exclude_applies_after_include(self, tmp_path: Path, lib_dir: Path) -> None:
        resources = list_library_resources(
            _dir_scope(tmp_path), PREFIX, include=["libalpha*"], exclude=["*.debug"]
        )
        assert [r.name for r in resources] == ["libalpha.so"]

    def test_no_patterns_keeps_everything(self) -> None:
        assert filter_resources([], None, None) == []
