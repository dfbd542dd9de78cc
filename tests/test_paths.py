"""Tests for virtual path resolution."""

import os

import pytest

from drivefs import DriveFS
from drivefs.paths import (
    dirname_of,
    filename_of,
    normalize_root,
    root_path,
    working_path,
)


ROOT = "/data/drive" + os.sep


class TestRootPath:
    """Test resolution relative to the storage root."""

    def test_concatenates(self):
        """Test a name is appended to the root."""
        assert root_path(ROOT, "game.tic") == ROOT + "game.tic"

    def test_nested(self):
        """Test slashes become host separators."""
        expected = ROOT + os.path.join("a", "b.tic")
        assert root_path(ROOT, "a/b.tic") == expected

    def test_empty_name_is_root(self):
        """Test an empty name resolves to the root."""
        assert root_path(ROOT, "") == ROOT

    def test_normalize_root_appends_separator(self):
        """Test the root gets a trailing separator."""
        assert normalize_root("/data/drive") == "/data/drive" + os.sep

    def test_normalize_root_keeps_single_separator(self):
        """Test an existing trailing separator is kept."""
        assert normalize_root(ROOT) == ROOT


class TestWorkingPath:
    """Test resolution relative to the working directory."""

    @pytest.mark.parametrize("name", ["x.tic", "sub/x.tic", ""])
    def test_empty_working_dir_matches_root_path(self, name):
        """Test the root working directory adds nothing."""
        assert working_path(ROOT, "", name) == root_path(ROOT, name)

    def test_prefixes_working_dir(self):
        """Test the working directory is prefixed."""
        assert working_path(ROOT, "games", "x.tic") == root_path(ROOT, "games/x.tic")

    def test_absolute_marker_ignores_working_dir(self):
        """Test a leading slash ignores the working directory."""
        assert working_path(ROOT, "games", "/x.tic") == root_path(ROOT, "x.tic")

    def test_absolute_marker_only_strips_one_slash(self):
        """Test only the leading slash is stripped."""
        assert working_path(ROOT, "", "/a/b") == root_path(ROOT, "a/b")

    def test_empty_name_in_working_dir(self):
        """Test an empty name resolves to the working directory."""
        assert working_path(ROOT, "games", "") == root_path(ROOT, "games/")


class TestDrivePaths:
    """Test the path helpers exposed on DriveFS."""

    def test_root_gets_trailing_separator(self, tmp_path, net):
        """Test the drive root ends with a separator."""
        drive = DriveFS(str(tmp_path), net)
        assert drive.root == str(tmp_path) + os.sep

    def test_file_path_follows_working_dir(self, drive):
        """Test file_path follows the working directory."""
        drive.change_dir("games")
        assert drive.file_path("pong.tic") == drive.root_path("games/pong.tic")

    def test_file_path_absolute(self, drive):
        """Test file_path honours the leading slash."""
        drive.change_dir("games")
        assert drive.file_path("/pong.tic") == drive.root_path("pong.tic")

    def test_working_folder_local(self, drive):
        """Test the working folder of a local directory."""
        drive.change_dir("games")
        assert drive.working_folder() == drive.root_path("games/")

    def test_working_folder_public_is_root(self, drive):
        """Test the working folder inside the public namespace is the root."""
        drive.change_dir(drive.config.public_dir)
        assert drive.working_folder() == drive.root


class TestHostNames:
    """Test dirname_of/filename_of on real host paths."""

    def test_file(self, tmp_path):
        """Test directory and file name of a regular file."""
        (tmp_path / "cart.tic").write_bytes(b"x")
        path = str(tmp_path / "cart.tic")
        assert dirname_of(path) == os.path.realpath(tmp_path) + os.sep
        assert filename_of(path) == "cart.tic"

    def test_directory(self, tmp_path):
        """Test a directory has an empty file name."""
        (tmp_path / "sub").mkdir()
        path = str(tmp_path / "sub")
        assert dirname_of(path) == os.path.realpath(path) + os.sep
        assert filename_of(path) == ""

    def test_missing(self, tmp_path):
        """Test missing paths give None."""
        missing = str(tmp_path / "nope.tic")
        assert dirname_of(missing) is None
        assert filename_of(missing) is None
