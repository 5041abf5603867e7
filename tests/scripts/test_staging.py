"""Tests for staging areas."""

import logging
import shutil

import pytest
from pathlib import Path

from runscript.scripts.errors import StagingError
from runscript.scripts.staging import StagingArea


class TestForUser:
    """Tests for the per-user staging directory."""

    def test_resolves_under_home(self, tmp_path):
        """Should create ~/.<tool_name> and mark it persistent."""
        area = StagingArea.for_user("mytool", home=tmp_path)

        assert area.path == tmp_path / ".mytool"
        assert area.path.is_dir()
        assert area.persistent is True

    def test_uses_home_env(self, tmp_path, monkeypatch):
        """Should default to the current user's home directory."""
        monkeypatch.setenv("HOME", str(tmp_path))

        area = StagingArea.for_user("runscript")

        assert area.path == tmp_path / ".runscript"

    def test_is_deterministic(self, tmp_path):
        """Repeated resolution should return the same path."""
        first = StagingArea.for_user("runscript", home=tmp_path)
        second = StagingArea.for_user("runscript", home=tmp_path)

        assert first == second

    def test_home_lookup_failure(self, monkeypatch):
        """A home directory lookup failure should become a StagingError."""
        def _no_home():
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", staticmethod(_no_home))

        with pytest.raises(StagingError, match="home directory"):
            StagingArea.for_user("runscript")

    def test_create_failure(self, tmp_path):
        """A path that cannot be created should raise StagingError."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(StagingError, match="error creating"):
            StagingArea.for_user("runscript", home=blocker)


class TestFresh:
    """Tests for per-call staging directories."""

    def test_unique_paths(self):
        """Each fresh area should get its own directory."""
        first = StagingArea.fresh()
        second = StagingArea.fresh()
        try:
            assert first.path != second.path
            assert first.persistent is False
            assert first.path.is_dir()
        finally:
            shutil.rmtree(first.path, ignore_errors=True)
            shutil.rmtree(second.path, ignore_errors=True)


class TestResetAndTeardown:
    """Tests for reset and teardown."""

    def test_reset_empties_directory(self, tmp_path):
        """Reset should remove leftovers and keep an empty directory."""
        area = StagingArea(path=tmp_path / "stage")
        area.path.mkdir()
        (area.path / "old.sh").write_text("echo old")
        (area.path / "sub").mkdir()

        area.reset()

        assert area.path.is_dir()
        assert list(area.path.iterdir()) == []

    def test_reset_creates_missing(self, tmp_path):
        """Reset should create the directory when it does not exist."""
        area = StagingArea(path=tmp_path / "stage")

        area.reset()

        assert area.path.is_dir()

    def test_reset_failure(self, tmp_path, monkeypatch):
        """A removal failure should raise StagingError."""
        area = StagingArea(path=tmp_path / "stage")
        area.path.mkdir()

        def _fail(path, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("runscript.scripts.staging.shutil.rmtree", _fail)

        with pytest.raises(StagingError, match="error cleaning"):
            area.reset()

    def test_reset_fresh_keeps_private_directory(self):
        """Resetting a fresh area should empty it in place and keep mode 0700."""
        area = StagingArea.fresh()
        try:
            (area.path / "old.sh").write_text("echo old")
            (area.path / "sub").mkdir()
            inode = area.path.stat().st_ino

            area.reset()

            assert list(area.path.iterdir()) == []
            assert area.path.stat().st_ino == inode
            assert area.path.stat().st_mode & 0o777 == 0o700
        finally:
            shutil.rmtree(area.path, ignore_errors=True)

    def test_reset_fresh_rejects_symlink(self, tmp_path):
        """A fresh area whose path was swapped for a symlink is refused."""
        target = tmp_path / "elsewhere"
        target.mkdir()
        (target / "keep.txt").write_text("not ours")
        link = tmp_path / "stage"
        link.symlink_to(target)
        area = StagingArea(path=link, persistent=False)

        with pytest.raises(StagingError, match="not a directory"):
            area.reset()

        assert (target / "keep.txt").exists()

    def test_reset_fresh_missing_directory(self, tmp_path):
        """A fresh area is never recreated once its directory is gone."""
        area = StagingArea(path=tmp_path / "gone", persistent=False)

        with pytest.raises(StagingError):
            area.reset()

        assert not area.path.exists()

    def test_reset_fresh_does_not_follow_symlinked_entries(self, tmp_path):
        """Symlinks inside a fresh area are unlinked, not descended into."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "data.txt").write_text("keep")
        area = StagingArea(path=tmp_path / "stage", persistent=False)
        area.path.mkdir()
        (area.path / "link").symlink_to(outside)

        area.reset()

        assert list(area.path.iterdir()) == []
        assert (outside / "data.txt").exists()

    def test_teardown_persistent_recreates(self, tmp_path):
        """Persistent areas should be left empty but present."""
        area = StagingArea(path=tmp_path / "stage", persistent=True)
        area.path.mkdir()
        (area.path / "a.sh").write_text("echo a")

        area.teardown()

        assert area.path.is_dir()
        assert list(area.path.iterdir()) == []

    def test_teardown_fresh_removes(self, tmp_path):
        """Non-persistent areas should be removed entirely."""
        area = StagingArea(path=tmp_path / "stage", persistent=False)
        area.path.mkdir()
        (area.path / "a.sh").write_text("echo a")

        area.teardown()

        assert not area.path.exists()

    def test_teardown_failure_is_logged(self, tmp_path, monkeypatch, caplog):
        """Teardown failures should be logged, never raised."""
        area = StagingArea(path=tmp_path / "stage")
        area.path.mkdir()

        def _fail(path, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr("runscript.scripts.staging.shutil.rmtree", _fail)

        with caplog.at_level(logging.WARNING):
            area.teardown()

        assert "Failed to clean up" in caplog.text

    def test_staged_names(self, tmp_path):
        """Should list staged files sorted by name."""
        area = StagingArea(path=tmp_path)
        (tmp_path / "b.sh").write_text("")
        (tmp_path / "a.sh").write_text("")

        assert area.staged_names() == ["a.sh", "b.sh"]
