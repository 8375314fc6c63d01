"""Tests for nativeboot.core.models."""

from __future__ import annotations

from pathlib import Path

from nativeboot.core.errors import NativeBootError, ResourceCopyError, UnsupportedScopeError
from nativeboot.core.models import ExtractionResult, LibraryResource, PackagedScope, ScopeKind


class TestPackagedScope:
    """Tests for PackagedScope."""

    def test_describe_directory(self, tmp_path: Path) -> None:
        scope = PackagedScope("app", ScopeKind.DIRECTORY, tmp_path)
        assert scope.describe() == str(tmp_path)

    def test_describe_archive(self, tmp_path: Path) -> None:
        archive = tmp_path / "app.zip"
        assert PackagedScope("app", ScopeKind.ARCHIVE, archive).describe() == f"{archive}!/"
        assert PackagedScope("app", ScopeKind.ARCHIVE, archive, "lib").describe() == f"{archive}!/lib"


class TestLibraryResource:
    """Tests for LibraryResource."""

    def test_location(self, tmp_path: Path) -> None:
        assert LibraryResource("a.so", path=tmp_path / "a.so").location == str(tmp_path / "a.so")
        archive = tmp_path / "app.zip"
        member = LibraryResource("a.so", archive=archive, member="linux-x86-64/a.so")
        assert member.location == f"{archive}!/linux-x86-64/a.so"


class TestExtractionResult:
    """Tests for ExtractionResult."""

    def test_libraries_combines_copied_and_skipped(self, tmp_path: Path) -> None:
        result = ExtractionResult("app", "1.0", "linux-x86-64", tmp_path, False)
        result.copied = [tmp_path / "b.so"]
        result.skipped = [tmp_path / "a.so"]

        assert result.libraries == [tmp_path / "a.so", tmp_path / "b.so"]


class TestErrors:
    """Tests for the error hierarchy."""

    def test_all_errors_share_a_base(self) -> None:
        assert issubclass(ResourceCopyError, NativeBootError)
        assert issubclass(UnsupportedScopeError, NativeBootError)
        assert issubclass(NativeBootError, RuntimeError)
