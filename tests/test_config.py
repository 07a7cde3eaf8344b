"""Tests for configuration loading."""

from pathlib import Path

from campusshare.config import Config, get_config, reset_config


class TestConfig:
    """Tests for Config.from_env."""

    def test_defaults(self, campus_env):
        """Test values derived from the data directory."""
        config = Config.from_env()

        assert config.data_dir == campus_env
        assert config.resources_path == campus_env / "resources.db"
        assert config.chats_path == campus_env / "chats.db"
        assert config.borrow_fee == 50.0
        assert config.log_level == "WARNING"

    def test_admins_parsed(self, campus_env, monkeypatch):
        """Test the admin list is split, trimmed and lowercased."""
        monkeypatch.setenv("CAMPUSSHARE_ADMINS", " Admin@Campus.edu , boss@campus.edu,, ")
        config = Config.from_env()

        assert config.admins == frozenset({"admin@campus.edu", "boss@campus.edu"})
        assert config.is_admin("BOSS@campus.edu") is True
        assert config.is_admin("bob@campus.edu") is False
        assert config.is_admin(None) is False

    def test_default_admins(self, campus_env, monkeypatch):
        """Test the built-in admin list applies when unset."""
        monkeypatch.delenv("CAMPUSSHARE_ADMINS")
        assert Config.from_env().admins == frozenset(
            {"admin@campus.edu", "superadmin@campus.edu"}
        )

    def test_explicit_file_paths(self, campus_env, monkeypatch, tmp_path):
        """Test file paths can be set individually."""
        monkeypatch.setenv("CAMPUSSHARE_RESOURCES_FILE", str(tmp_path / "r.db"))
        monkeypatch.setenv("CAMPUSSHARE_CHATS_FILE", str(tmp_path / "c.db"))
        config = Config.from_env()

        assert config.resources_path == tmp_path / "r.db"
        assert config.chats_path == tmp_path / "c.db"

    def test_payment_timeout(self, campus_env, monkeypatch):
        """Test a zero timeout disables the bound."""
        assert Config.from_env().payment_timeout is None

        monkeypatch.setenv("CAMPUSSHARE_PAYMENT_TIMEOUT", "2.5")
        assert Config.from_env().payment_timeout == 2.5

    def test_validate(self, campus_env, monkeypatch):
        """Test validation creates the data dir and flags bad values."""
        assert Config.from_env().validate() == []
        assert campus_env.exists()

        monkeypatch.setenv("CAMPUSSHARE_BORROW_FEE", "0")
        monkeypatch.setenv("CAMPUSSHARE_PAYMENT_SUCCESS_RATE", "2")
        errors = Config.from_env().validate()
        assert len(errors) == 2

    def test_global_instance(self, campus_env):
        """Test get_config caches until reset."""
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first
        assert isinstance(first.data_dir, Path)
