"""Tests for lnquery settings."""

import pytest
from pydantic import ValidationError

from lnquery.utils.config import Settings, get_settings, reload_settings


def test_settings_defaults():
    """Defaults give the 0.1-0.9 health band."""
    settings = Settings(_env_file=None)

    assert settings.health_band == (0.1, 0.9)
    assert settings.alias_timeout_seconds == 5.0
    assert settings.max_concurrent_alias_lookups == 16
    assert settings.fixture_path is None


def test_settings_env_override(monkeypatch):
    """Environment variables override defaults through the LNQUERY_ prefix."""
    monkeypatch.setenv("LNQUERY_HEALTH_MIN_LOCAL_RATIO", "0.2")
    monkeypatch.setenv("LNQUERY_HEALTH_MAX_LOCAL_RATIO", "0.8")
    monkeypatch.setenv("LNQUERY_MAX_CONCURRENT_ALIAS_LOOKUPS", "4")

    settings = reload_settings()

    assert settings.health_band == (0.2, 0.8)
    assert settings.max_concurrent_alias_lookups == 4


def test_singleton_until_reload():
    first = get_settings()

    assert get_settings() is first
    assert reload_settings() is not first


def test_inverted_band_rejected():
    with pytest.raises(ValidationError, match="must be less than"):
        Settings(_env_file=None, health_min_local_ratio=0.9, health_max_local_ratio=0.1)


def test_log_level_normalized():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="LOUD")


@pytest.mark.parametrize(
    ("environment", "strict_pubkeys", "expected"),
    [
        ("production", None, True),
        ("development", None, False),
        ("test", None, False),
        ("development", True, True),
        ("production", False, False),
    ],
)
def test_strict_pubkey_validation(environment, strict_pubkeys, expected):
    settings = Settings(_env_file=None, environment=environment, strict_pubkeys=strict_pubkeys)
    assert settings.strict_pubkey_validation is expected


def test_dev_mode():
    assert Settings(_env_file=None, environment="development").dev_mode
    assert not Settings(_env_file=None, environment="development", json_logs=True).dev_mode
    assert not Settings(_env_file=None, environment="production").dev_mode
