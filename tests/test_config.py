"""
Tests for environment-driven settings
"""

import pytest

from movies_api.config import DEFAULT_PORT, Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PORT", "MOVIES_PORT", "MOVIES_DATABASE_URL", "DATABASE_URL", "MOVIES_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_default_port(clean_env):
    assert Settings(_env_file=None).port == DEFAULT_PORT == 4000


def test_port_from_environment(clean_env):
    clean_env.setenv("PORT", "8080")

    assert Settings(_env_file=None).port == 8080


def test_prefixed_port_from_environment(clean_env):
    clean_env.setenv("MOVIES_PORT", "9090")

    assert Settings(_env_file=None).port == 9090


@pytest.mark.parametrize("raw", ["", "abc", "80a", "4.5"])
def test_invalid_port_falls_back_to_default(clean_env, raw):
    clean_env.setenv("PORT", raw)

    assert Settings(_env_file=None).port == DEFAULT_PORT


def test_database_url_aliases(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql://a:b@db:5432/plain")
    assert Settings(_env_file=None).database_url.endswith("/plain")

    clean_env.setenv("MOVIES_DATABASE_URL", "postgresql://a:b@db:5432/prefixed")
    assert Settings(_env_file=None).database_url.endswith("/prefixed")


def test_prefixed_flags(clean_env):
    clean_env.setenv("MOVIES_DEBUG", "true")

    assert Settings(_env_file=None).debug is True
