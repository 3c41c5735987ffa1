"""
Tests for load_settings() environment parsing.

Tests cover:
- Missing JWT_SECRET_KEY is fatal in production/staging, tolerated in development
- Out-of-range or non-numeric token TTLs fall back to 60 minutes
- Unsupported algorithms fall back to HS256
- CORS origin list parsing
"""

import importlib
import logging

import pytest

import api
from config import (
    DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    DEFAULT_CORS_ORIGINS,
    DEFAULT_DATABASE_URL,
    load_settings,
)

logger = logging.getLogger(__name__)

ENV_VARS = [
    "ENVIRONMENT",
    "JWT_SECRET_KEY",
    "JWT_ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "DATABASE_URL",
    "CORS_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_in_development():
    settings = load_settings()

    assert settings.environment == "development"
    assert settings.jwt_secret_key.startswith("dev-insecure-key-")
    assert settings.jwt_algorithm == "HS256"
    assert settings.access_token_expire_minutes == DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "INFO"


def test_development_keys_differ_between_loads():
    assert load_settings().jwt_secret_key != load_settings().jwt_secret_key


@pytest.mark.parametrize("environment", ["production", "staging", "Production"])
def test_missing_secret_key_is_fatal_when_production_like(monkeypatch, environment: str):
    monkeypatch.setenv("ENVIRONMENT", environment)

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        load_settings()
    logger.info(f"✓ {environment} refuses to start without a signing key")


def test_explicit_values_are_used(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "prod-key")
    monkeypatch.setenv("JWT_ALGORITHM", "HS512")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.jwt_secret_key == "prod-key"
    assert settings.jwt_algorithm == "HS512"
    assert settings.access_token_expire_minutes == 15
    assert settings.database_url == "sqlite:///./other.db"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["0", "-5", "1441", "ten", ""])
def test_bad_expire_minutes_fall_back_to_default(monkeypatch, caplog, raw: str):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", raw)

    with caplog.at_level(logging.WARNING):
        settings = load_settings()

    assert settings.access_token_expire_minutes == DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES
    assert "ACCESS_TOKEN_EXPIRE_MINUTES" in caplog.text


@pytest.mark.parametrize("raw,expected", [("1", 1), ("1440", 1440)])
def test_expire_minutes_range_is_inclusive(monkeypatch, raw: str, expected: int):
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", raw)

    assert load_settings().access_token_expire_minutes == expected


@pytest.mark.parametrize("raw", ["RS256", "none", "hs256"])
def test_unsupported_algorithm_falls_back_to_hs256(monkeypatch, raw: str):
    monkeypatch.setenv("JWT_ALGORITHM", raw)

    assert load_settings().jwt_algorithm == "HS256"


def test_cors_origins_are_split_and_trimmed(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com ,")

    assert load_settings().cors_origins == ["https://a.example.com", "https://b.example.com"]


def test_app_factory_import_does_not_read_environment(monkeypatch):
    # No JWT_SECRET_KEY: load_settings() would raise here
    monkeypatch.setenv("ENVIRONMENT", "production")

    importlib.reload(api)

    assert callable(api.create_app)
