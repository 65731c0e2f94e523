import pytest

from gateway_probe.config.gateway_config import (
    DATABASE_ENV_VARS,
    DEFAULT_BASE_URL,
    DatabaseSettings,
    database_enabled,
    load_database_settings,
    load_gateway_settings,
    log_level,
)
from gateway_probe.core.errors import ConfigurationError

_GATEWAY_VARS = (
    "GATEWAY_BASE_URL",
    "GATEWAY_TIMEOUT_SECONDS",
    "GATEWAY_CLIENT_NAME",
    "GATEWAY_CLIENT_VERSION",
    "GATEWAY_USE_DATABASE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _GATEWAY_VARS + DATABASE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_gateway_settings_defaults():
    settings = load_gateway_settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout_seconds == 30.0
    assert settings.client_name == "gateway-probe"


def test_gateway_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GATEWAY_BASE_URL", "http://gw:9000/")
    monkeypatch.setenv("GATEWAY_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("GATEWAY_CLIENT_NAME", "probe-test")

    settings = load_gateway_settings()

    assert settings.base_url == "http://gw:9000"
    assert settings.timeout_seconds == 2.5
    assert settings.client_name == "probe-test"


def test_explicit_base_url_overrides_environment(monkeypatch):
    monkeypatch.setenv("GATEWAY_BASE_URL", "http://env")
    assert load_gateway_settings("http://arg/").base_url == "http://arg"


@pytest.mark.parametrize("raw", ["soon", "0", "-1"])
def test_invalid_timeout_is_configuration_error(monkeypatch, raw):
    monkeypatch.setenv("GATEWAY_TIMEOUT_SECONDS", raw)
    with pytest.raises(ConfigurationError, match="GATEWAY_TIMEOUT_SECONDS"):
        load_gateway_settings()


def test_database_settings_from_environment(monkeypatch):
    for name, value in zip(DATABASE_ENV_VARS, ("db", "5432", "u", "pw", "app")):
        monkeypatch.setenv(name, value)
    assert load_database_settings() == DatabaseSettings("db", "5432", "u", "pw", "app")
    assert load_database_settings().is_complete()


def test_database_settings_incomplete_when_any_missing(monkeypatch):
    monkeypatch.setenv("PG_HOST", "db")
    assert not load_database_settings().is_complete()


@pytest.mark.parametrize("raw, expected", [("true", True), ("1", True), ("no", False), ("", False)])
def test_database_enabled(monkeypatch, raw, expected):
    monkeypatch.setenv("GATEWAY_USE_DATABASE", raw)
    assert database_enabled() is expected


@pytest.mark.parametrize("raw, expected", [("", "INFO"), ("debug", "DEBUG"), (" warning ", "WARNING")])
def test_log_level_normalizes_names(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert log_level() == expected


def test_log_level_rejects_unknown_names(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        log_level()
