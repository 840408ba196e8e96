"""Tests for ownership and mode normalisation."""

import os
import stat

import pytest

from hdfs_landing.models import OwnershipSettings
from hdfs_landing.utils.permissions import apply_ownership


class TestApplyOwnership:
    """Test apply_ownership."""

    def test_none_leaves_file_untouched(self, tmp_path):
        """Test no ownership settings means no change."""
        path = tmp_path / "a.log"
        path.write_text("x")
        os.chmod(path, 0o600)
        apply_ownership(str(path), None)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_mode_applied(self, tmp_path):
        """Test the configured mode is applied."""
        path = tmp_path / "a.log"
        path.write_text("x")
        apply_ownership(str(path), OwnershipSettings(file_mode="640"))
        assert stat.S_IMODE(path.stat().st_mode) == 0o640

    def test_mode_skipped(self, tmp_path):
        """Test set_mode=False keeps the current mode."""
        path = tmp_path / "a.log"
        path.write_text("x")
        os.chmod(path, 0o600)
        apply_ownership(str(path), OwnershipSettings(file_mode="644"), set_mode=False)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_chown_called(self, tmp_path, mocker):
        """Test user and group are handed to chown."""
        chown = mocker.patch("hdfs_landing.utils.permissions.shutil.chown")
        path = tmp_path / "a.log"
        path.write_text("x")
        apply_ownership(str(path), OwnershipSettings(user="splunk", group="splunk"))
        chown.assert_called_once_with(str(path), user="splunk", group="splunk")

    def test_unknown_user_raises(self, tmp_path):
        """Test an unknown user surfaces as LookupError."""
        path = tmp_path / "a.log"
        path.write_text("x")
        with pytest.raises(LookupError):
            apply_ownership(str(path), OwnershipSettings(user="no-such-user-hdfs-landing"))
