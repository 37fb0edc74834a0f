"""Unit tests for core/config.py -- Settings validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults_without_env(monkeypatch) -> None:
    for var in ("BOOTSTRAP_SECRET", "BACKEND_MODE", "BCRYPT_ROUNDS", "DEBUG"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.backend_mode == "http"
    assert settings.bcrypt_rounds == 10
    assert settings.bootstrap_secret == ""
    assert settings.bootstrap_consume_once is True


def test_backend_mode_normalized() -> None:
    assert Settings(_env_file=None, backend_mode=" LOCAL ").backend_mode == "local"


def test_backend_mode_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, backend_mode="grpc")


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_bounds(rounds) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, bcrypt_rounds=rounds)


def test_short_bootstrap_secret_rejected_in_production() -> None:
    with pytest.raises(ValidationError, match="at least 16 characters"):
        Settings(_env_file=None, debug=False, bootstrap_secret="short")


def test_short_bootstrap_secret_tolerated_in_debug() -> None:
    assert Settings(_env_file=None, debug=True, bootstrap_secret="short").bootstrap_secret == "short"
