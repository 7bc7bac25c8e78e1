"""Tests for configuration management."""

from ztauth_core.config import Settings


class TestConfiguration:
    """Test configuration loading and defaults."""

    def test_settings_loads(self):
        """Settings should load without errors."""
        settings = Settings()
        assert settings is not None

    def test_default_database_path(self):
        settings = Settings()
        assert settings.database_path == "./data/ztauth.db"

    def test_reset_token_expiry_is_fifteen_minutes(self):
        settings = Settings()
        assert settings.reset_token_expiry_minutes == 15

    def test_cors_origins_is_list(self):
        """CORS origins should be a list."""
        settings = Settings()
        assert isinstance(settings.cors_origins, list)
        assert "http://localhost:3000" in settings.cors_origins

    def test_environment_overrides(self, monkeypatch):
        """ZTAUTH_ prefixed variables override defaults."""
        monkeypatch.setenv("ZTAUTH_BASE_URL", "https://accounts.example.com")
        monkeypatch.setenv("ZTAUTH_BCRYPT_WORK_FACTOR", "12")

        settings = Settings()

        assert settings.base_url == "https://accounts.example.com"
        assert settings.bcrypt_work_factor == 12

    def test_user_api_key_unset_by_default(self, monkeypatch):
        monkeypatch.delenv("ZTAUTH_USER_API_KEY", raising=False)
        assert Settings().user_api_key is None
