"""Tests for filesystem helpers."""

import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from cert_issuer.lib.errors import IssuerFilesystemError
from cert_issuer.lib.filesystem import (
    DIRECTORY_MODE,
    KEY_FILE_MODE,
    PathState,
    ensure_directory,
    open_exclusive,
    path_exists,
    stat_path,
)


class TestStatPath:
    """Tests for stat_path tagging."""

    def test_missing_path_is_not_found(self, tmp_path: Path) -> None:
        assert stat_path(tmp_path / "missing").state is PathState.NOT_FOUND

    def test_directory_is_found(self, tmp_path: Path) -> None:
        result = stat_path(tmp_path)
        assert result.state is PathState.FOUND
        assert result.is_dir is True

    def test_file_is_found_not_dir(self, tmp_path: Path) -> None:
        target = tmp_path / "file"
        target.write_text("x")
        result = stat_path(target)
        assert result.state is PathState.FOUND
        assert result.is_dir is False

    def test_permission_error_is_tagged(self, tmp_path: Path) -> None:
        with patch.object(Path, "stat", side_effect=PermissionError(13, "Permission denied")):
            result = stat_path(tmp_path / "x")
        assert result.state is PathState.PERMISSION_DENIED
        assert "Permission denied" in (result.detail or "")

    def test_other_os_error_is_tagged(self, tmp_path: Path) -> None:
        with patch.object(Path, "stat", side_effect=OSError(5, "Input/output error")):
            result = stat_path(tmp_path / "x")
        assert result.state is PathState.OTHER
        assert "Input/output error" in (result.detail or "")


class TestEnsureDirectory:
    """Tests for ensure_directory."""

    def test_creates_missing_directory_owner_only(self, tmp_path: Path) -> None:
        target = tmp_path / "certs"
        ensure_directory(target)
        assert target.is_dir()
        # umask can only clear bits, never add group/other access
        assert stat.S_IMODE(target.stat().st_mode) & ~DIRECTORY_MODE == 0

    def test_existing_directory_is_accepted(self, tmp_path: Path) -> None:
        target = tmp_path / "certs"
        target.mkdir()
        (target / "keep.txt").write_text("keep")
        ensure_directory(target)
        assert (target / "keep.txt").read_text() == "keep"

    def test_existing_file_raises(self, tmp_path: Path) -> None:
        target = tmp_path / "certs"
        target.write_text("not a dir")
        with pytest.raises(IssuerFilesystemError, match="not a directory"):
            ensure_directory(target)

    def test_missing_parent_raises(self, tmp_path: Path) -> None:
        """Only the final directory is created, not its parents."""
        target = tmp_path / "missing" / "certs"
        with pytest.raises(IssuerFilesystemError, match="could not create certs directory"):
            ensure_directory(target)

    def test_permission_denied_raises(self, tmp_path: Path) -> None:
        with (
            patch.object(Path, "stat", side_effect=PermissionError(13, "Permission denied")),
            pytest.raises(IssuerFilesystemError, match="permission denied"),
        ):
            ensure_directory(tmp_path / "certs")

    def test_error_is_os_error(self, tmp_path: Path) -> None:
        target = tmp_path / "certs"
        target.write_text("not a dir")
        with pytest.raises(OSError) as exc_info:
            ensure_directory(target)
        assert exc_info.value.path == target  # type: ignore[attr-defined]


class TestPathExists:
    """Tests for path_exists."""

    def test_reports_presence(self, tmp_path: Path) -> None:
        target = tmp_path / "a.pem"
        assert path_exists(target) is False
        target.write_text("x")
        assert path_exists(target) is True

    def test_stat_failure_raises(self, tmp_path: Path) -> None:
        with (
            patch.object(Path, "stat", side_effect=OSError(5, "Input/output error")),
            pytest.raises(IssuerFilesystemError, match="could not stat file"),
        ):
            path_exists(tmp_path / "a.pem")


class TestOpenExclusive:
    """Tests for open_exclusive."""

    def test_creates_file_with_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "key.pem"
        with open_exclusive(target, KEY_FILE_MODE) as handle:
            handle.write(b"secret")
        assert target.read_bytes() == b"secret"
        assert stat.S_IMODE(target.stat().st_mode) == KEY_FILE_MODE

    def test_refuses_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "key.pem"
        target.write_bytes(b"original")
        with pytest.raises(FileExistsError):
            open_exclusive(target)
        assert target.read_bytes() == b"original"
