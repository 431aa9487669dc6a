"""
Tests for Project Advisor configuration.

Config = single source of truth, Pydantic BaseSettings.
"""

from project_advisor.config import AppSettings, get_settings


class TestConfigLoads:
    def test_get_settings_returns_app_settings(self) -> None:
        s = get_settings()
        assert isinstance(s, AppSettings)

    def test_defaults(self, monkeypatch) -> None:
        for var in ("ADVISORY_API_KEY", "OPENAI_API_KEY", "ADVISORY_MODEL", "HOURLY_RATE"):
            monkeypatch.delenv(var, raising=False)
        s = AppSettings(_env_file=None)
        assert s.advisory_api_key is None
        assert s.advisory_configured is False
        assert s.advisory_model == "gpt-4"
        assert s.advisory_max_tokens == 2000
        assert s.advisory_temperature == 0.3
        assert s.hourly_rate == 50.0

    def test_openai_key_alias(self, monkeypatch) -> None:
        monkeypatch.delenv("ADVISORY_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        s = AppSettings(_env_file=None)
        assert s.advisory_api_key == "sk-test"
        assert s.advisory_configured is True

    def test_hourly_rate_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("HOURLY_RATE", "75")
        assert AppSettings(_env_file=None).hourly_rate == 75.0

    def test_cors_origins_list(self) -> None:
        s = get_settings()
        assert isinstance(s.cors_origins_list, list)
        assert all(isinstance(o, str) for o in s.cors_origins_list)


class TestConfigSingleton:
    def test_get_settings_same_instance(self) -> None:
        a = get_settings()
        b = get_settings()
        assert a is b
