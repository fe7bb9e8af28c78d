"""Tests for configuration."""

from profstore.core.config import Settings, get_logger


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test built-in defaults with no environment."""
        for name in ("PROFSTORE_DSN", "PROFSTORE_LIFETIME", "PROFSTORE_KEY_PREFIX"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.dsn == "memory://"
        assert settings.lifetime == 86400
        assert settings.key_prefix == "sf_profiler_"
        assert settings.max_key_length == 250

    def test_environment_override(self, monkeypatch):
        """Test PROFSTORE_ environment variables."""
        monkeypatch.setenv("PROFSTORE_DSN", "redis://cache:6379/1")
        monkeypatch.setenv("PROFSTORE_LIFETIME", "60")

        settings = Settings(_env_file=None)

        assert settings.dsn == "redis://cache:6379/1"
        assert settings.lifetime == 60


def test_get_logger_namespace():
    """Test that loggers live under the package namespace."""
    assert get_logger("storage.engine").name == "profstore.storage.engine"
