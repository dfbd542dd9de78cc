"""Tests for drive configuration."""

import pytest

from drivefs import DriveConfig, connect_drive
from drivefs.config import DEFAULT_CACHE_DIR, DEFAULT_PUBLIC_DIR


class TestConnectDrive:
    """Test the connect_drive factory."""

    def test_defaults(self):
        """Test defaults for the public namespace and cache layout."""
        config = connect_drive("/data/drive")
        assert isinstance(config, DriveConfig)
        assert config.root == "/data/drive"
        assert config.public_dir == DEFAULT_PUBLIC_DIR
        assert config.cache_dir == DEFAULT_CACHE_DIR
        assert config.artifact_ext == "tic"

    def test_overrides(self):
        """Test keyword arguments override defaults."""
        config = connect_drive("/d", public_dir="play", timeout=5.0)
        assert config.public_dir == "play"
        assert config.timeout == 5.0

    def test_cache_dir_gets_trailing_slash(self):
        """Test the cache directory always ends with a slash."""
        assert connect_drive("/d", cache_dir="cache").cache_dir == "cache/"

    def test_requires_root(self):
        """Test an empty root is rejected."""
        with pytest.raises(ValueError, match="root"):
            connect_drive("")

    def test_unexpected_argument(self):
        """Test unknown keyword arguments are rejected."""
        with pytest.raises(ValueError, match="Unexpected"):
            connect_drive("/d", colour="blue")

    @pytest.mark.parametrize("public_dir", ["", "a/b"])
    def test_public_dir_single_component(self, public_dir):
        """Test the public name must be one path component."""
        with pytest.raises(ValueError):
            connect_drive("/d", public_dir=public_dir)

    def test_listing_path_placeholder(self):
        """Test the listing path needs a path placeholder."""
        with pytest.raises(ValueError):
            connect_drive("/d", listing_path="/api?fn=dir")

    def test_artifact_path_placeholder(self):
        """Test the artifact path needs a hash placeholder."""
        with pytest.raises(ValueError):
            connect_drive("/d", artifact_path="/cart/cart.tic")
