"""
Unit tests for filesystem utilities.
"""

import io
import os
import tarfile

import pytest

from ortoolskit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)
from ortoolskit.core.filesystem import (
    atomic_write,
    create_staging_directory,
    directory_size,
    extract_tar_gz,
    find_executable,
    is_relative_to,
    safe_rmtree,
)


class TestExtractTarGz:
    """Tests for extract_tar_gz()."""

    def test_extracts_all_members(self, tmp_path, make_tar_gz):
        archive = tmp_path / "lib.tar.gz"
        archive.write_bytes(
            make_tar_gz({"pkg/include/a.h": b"a", "pkg/lib/liba.a": b"lib"})
        )
        destination = tmp_path / "dest"

        count = extract_tar_gz(archive, destination)

        assert count == 2
        assert (destination / "pkg" / "include" / "a.h").read_bytes() == b"a"
        assert (destination / "pkg" / "lib" / "liba.a").read_bytes() == b"lib"

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="Archive not found"):
            extract_tar_gz(tmp_path / "missing.tar.gz", tmp_path / "dest")

    def test_not_gzip(self, tmp_path):
        archive = tmp_path / "bad.tar.gz"
        archive.write_bytes(b"this is not gzip data")

        with pytest.raises(ArchiveExtractionError, match="Failed to extract"):
            extract_tar_gz(archive, tmp_path / "dest")

    def test_truncated_gzip(self, tmp_path, make_tar_gz):
        data = make_tar_gz({"pkg/file.txt": b"x" * 10000})
        archive = tmp_path / "truncated.tar.gz"
        archive.write_bytes(data[: len(data) // 2])

        with pytest.raises(ArchiveExtractionError):
            extract_tar_gz(archive, tmp_path / "dest")

    def test_directory_traversal_blocked(self, tmp_path):
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            info = tarfile.TarInfo("../escape.txt")
            info.size = 4
            tar.addfile(info, io.BytesIO(b"evil"))
        archive = tmp_path / "evil.tar.gz"
        archive.write_bytes(buffer.getvalue())
        destination = tmp_path / "dest"

        with pytest.raises(InsecureArchiveError):
            extract_tar_gz(archive, destination)

        assert not (tmp_path / "escape.txt").exists()


class TestStagingDirectory:
    """Tests for create_staging_directory()."""

    def test_creates_unique_empty_directories(self, tmp_path):
        first = create_staging_directory(tmp_path, ".staging-")
        second = create_staging_directory(tmp_path, ".staging-")

        assert first != second
        assert first.parent == tmp_path
        assert first.name.startswith(".staging-")
        assert list(first.iterdir()) == []


class TestAtomicWrite:
    """Tests for atomic_write()."""

    def test_writes_text(self, tmp_path):
        target = tmp_path / "sub" / "marker.json"
        atomic_write(target, '{"a": 1}')
        assert target.read_text() == '{"a": 1}'

    def test_leaves_no_temp_files(self, tmp_path):
        atomic_write(tmp_path / "marker.json", "data")
        assert [p.name for p in tmp_path.iterdir()] == ["marker.json"]

    def test_replaces_existing_file(self, tmp_path):
        target = tmp_path / "marker.json"
        target.write_text("old")

        atomic_write(target, "new")

        assert target.read_text() == "new"


class TestSafeRmtree:
    """Tests for safe_rmtree()."""

    def test_removes_tree(self, tmp_path):
        tree = tmp_path / "tree"
        (tree / "a" / "b").mkdir(parents=True)
        (tree / "a" / "b" / "f").write_text("x")

        safe_rmtree(tree, require_prefix=tmp_path)

        assert not tree.exists()

    def test_refuses_outside_prefix(self, tmp_path):
        tree = tmp_path / "tree"
        tree.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(tree, require_prefix=tmp_path / "other")

        assert tree.exists()

    def test_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_file_is_rejected(self, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")

        with pytest.raises(FilesystemError):
            safe_rmtree(target)


class TestPathHelpers:
    """Tests for small path helpers."""

    def test_is_relative_to(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path)
        assert not is_relative_to(tmp_path, tmp_path / "a")

    def test_directory_size(self, tmp_path):
        (tmp_path / "a").write_bytes(b"123")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "b").write_bytes(b"45")

        assert directory_size(tmp_path) == 5
        assert directory_size(tmp_path / "missing") == 0

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_find_executable_in_search_paths(self, tmp_path):
        tool = tmp_path / "protoc"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        assert find_executable("protoc", [tmp_path]) == tool
        assert find_executable("missing-tool", [tmp_path]) is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_find_executable_matches_exact_name(self, tmp_path):
        tool = tmp_path / "protoc.exe"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        assert find_executable("protoc", [tmp_path]) is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_find_executable_with_path(self, tmp_path):
        tool = tmp_path / "c++"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        assert find_executable(str(tool)) == tool
        assert find_executable(str(tmp_path / "nope")) is None
