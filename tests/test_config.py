"""Tests for configuration management."""

from tokenauth.config import Settings


class TestConfiguration:
    """Test configuration loading and defaults."""

    def test_settings_loads(self):
        """Settings should load without errors."""
        settings = Settings()
        assert settings is not None

    def test_default_api_prefix(self):
        """Default API prefix should be set."""
        settings = Settings()
        assert settings.api_prefix == "/api"

    def test_cors_origins_is_list(self):
        """CORS origins should be a list."""
        settings = Settings()
        assert isinstance(settings.cors_origins, list)
        assert "http://localhost:3000" in settings.cors_origins

    def test_default_token_lifetime_is_one_week(self, monkeypatch):
        """Issued tokens should expire after 7 days by default."""
        monkeypatch.delenv("TOKEN_EXPIRY_DAYS", raising=False)
        settings = Settings()
        assert settings.token_expiry_days == 7

    def test_default_token_abilities_unrestricted(self):
        """Issued tokens should carry the wildcard ability by default."""
        settings = Settings()
        assert settings.token_abilities == ["*"]

    def test_default_token_name(self):
        settings = Settings()
        assert settings.token_name == "API TOKEN"

    def test_env_overrides_database_path(self, monkeypatch):
        """Environment variables should override defaults."""
        monkeypatch.setenv("DATABASE_PATH", "/tmp/other.db")
        settings = Settings()
        assert settings.database_path == "/tmp/other.db"

    def test_bcrypt_work_factor_from_env(self, monkeypatch):
        monkeypatch.setenv("BCRYPT_WORK_FACTOR", "5")
        settings = Settings()
        assert settings.bcrypt_work_factor == 5
