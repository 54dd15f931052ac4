"""
Configuration Tests

Tests environment loading, origin parsing and the startup configuration report.
"""

import pytest
from pydantic import ValidationError

from proxy_server.app.config import Settings, get_settings, validate_configuration

from .helpers import TEST_FLUTTERWAVE_SECRET, make_settings


PROXY_ENV_VARS = [
    "FLUTTERWAVE_SECRET_KEY",
    "PROXY_AUTH_TOKEN",
    "ALLOWED_ORIGINS",
    "UPSTREAM_TIMEOUT_SECONDS",
    "PROXY_HOST",
    "PROXY_PORT",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvironmentLoading:

    def test_reads_variables_from_environment(self, clean_env):
        clean_env.setenv("FLUTTERWAVE_SECRET_KEY", "flw-secret")
        clean_env.setenv("PROXY_AUTH_TOKEN", "proxy-token")
        clean_env.setenv("ALLOWED_ORIGINS", "https://a.example.com")
        clean_env.setenv("PROXY_PORT", "9090")

        settings = Settings(_env_file=None)

        assert settings.FLUTTERWAVE_SECRET_KEY == "flw-secret"
        assert settings.PROXY_AUTH_TOKEN == "proxy-token"
        assert settings.allowed_origins_list == ["https://a.example.com"]
        assert settings.PROXY_PORT == 9090

    def test_defaults_when_unset(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.FLUTTERWAVE_SECRET_KEY is None
        assert settings.PROXY_AUTH_TOKEN is None
        assert settings.allowed_origins_list == ["*"]
        assert settings.PROXY_HOST == "0.0.0.0"
        assert settings.PROXY_PORT == 8080
        assert settings.LOG_LEVEL == "INFO"
        assert settings.UPSTREAM_TIMEOUT_SECONDS == 30.0
        assert not settings.has_upstream_secret
        assert not settings.has_proxy_token

    def test_rejects_invalid_port(self, clean_env):
        clean_env.setenv("PROXY_PORT", "70000")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_settings_are_frozen(self):
        settings = make_settings()

        with pytest.raises(ValidationError):
            settings.PROXY_AUTH_TOKEN = "changed"

    def test_get_settings_is_cached(self, clean_env):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestAllowedOrigins:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, ["*"]),
            ("", ["*"]),
            (" , ", ["*"]),
            ("*", ["*"]),
            ("https://a.example.com", ["https://a.example.com"]),
            (
                "https://a.example.com, https://b.example.com,",
                ["https://a.example.com", "https://b.example.com"],
            ),
        ],
    )
    def test_origin_parsing(self, raw, expected):
        assert make_settings(ALLOWED_ORIGINS=raw).allowed_origins_list == expected


class TestConfigurationReport:

    def test_complete_configuration_is_valid(self):
        report = validate_configuration(
            make_settings(ALLOWED_ORIGINS="https://a.example.com")
        )

        assert report["valid"] is True
        assert report["errors"] == []
        assert report["warnings"] == []
        assert report["allowed_origins"] == ["https://a.example.com"]

    def test_missing_secrets_are_errors(self):
        report = validate_configuration(
            make_settings(FLUTTERWAVE_SECRET_KEY=None, PROXY_AUTH_TOKEN=None)
        )

        assert report["valid"] is False
        assert any("FLUTTERWAVE_SECRET_KEY" in error for error in report["errors"])
        assert any("PROXY_AUTH_TOKEN" in error for error in report["errors"])

    def test_wildcard_origin_is_a_warning(self):
        report = validate_configuration(make_settings())

        assert report["valid"] is True
        assert report["warnings"] == ["ALLOWED_ORIGINS allows any origin ('*')"]

    def test_report_does_not_contain_secret(self):
        report = validate_configuration(make_settings())

        assert TEST_FLUTTERWAVE_SECRET not in repr(report)
