"""
Unit tests for backend/settings.py

Part of HQ-5: Client settings
"""

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "API_BASE_URL",
    "REQUEST_TIMEOUT_SECONDS",
    "TOKEN_STORE_PATH",
    "QUERY_STALE_SECONDS",
    "CORS_ORIGINS",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.environment == "development"

    def test_api_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "http://127.0.0.1:8000/api/v1"
        assert settings.request_timeout_seconds == 30.0

    def test_client_state_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.token_store_path == "~/.hypertroq/credentials.json"
        assert settings.query_stale_seconds == 30.0

    def test_sentry_dsn_default_to_none(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.sentry_dsn is None

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://api.hypertroq.example/api/v1")
        monkeypatch.setenv("QUERY_STALE_SECONDS", "5")
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "https://api.hypertroq.example/api/v1"
        assert settings.query_stale_seconds == 5.0


@pytest.mark.unit
class TestSettingsValidation:
    """Test Settings validation behavior."""

    def test_valid_environments_accepted(self):
        for env in ["development", "staging", "production", "test"]:
            settings = Settings(environment=env, _env_file=None)
            assert settings.environment == env

    def test_environment_case_insensitive(self):
        settings = Settings(environment="PRODUCTION", _env_file=None)
        assert settings.environment == "production"

    def test_invalid_environment_raises_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(environment="invalid", _env_file=None)
        assert "Invalid environment" in str(exc_info.value)

    def test_log_level_normalized(self):
        assert Settings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_raises_error(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty", _env_file=None)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(request_timeout_seconds=0, _env_file=None)


@pytest.mark.unit
class TestSettingsProperties:
    """Test Settings computed properties."""

    @pytest.mark.parametrize("api_url,expected", [
        ("http://127.0.0.1:8000/api/v1", "http://127.0.0.1:8000"),
        ("http://127.0.0.1:8000/api/v1/", "http://127.0.0.1:8000"),
        ("https://api.hypertroq.example", "https://api.hypertroq.example"),
    ])
    def test_backend_base_url(self, api_url, expected):
        settings = Settings(api_base_url=api_url, _env_file=None)
        assert settings.backend_base_url == expected

    def test_cors_origins_list(self):
        settings = Settings(cors_origins=" http://a.test , ,http://b.test", _env_file=None)
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_is_production_property(self):
        assert Settings(environment="production", _env_file=None).is_production is True
        assert Settings(environment="development", _env_file=None).is_production is False

    def test_is_test_property(self):
        assert Settings(environment="test", _env_file=None).is_test is True


@pytest.mark.unit
class TestGetSettings:
    """Test get_settings() function."""

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert isinstance(settings1, Settings)
        assert settings1 is settings2
