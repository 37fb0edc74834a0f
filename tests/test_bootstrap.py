"""
tests/test_bootstrap.py -- Unit tests for auth/bootstrap.py.

Covers:
  - wrong, missing and unconfigured secrets are refused
  - consume-once: the first grant succeeds, every later call is 403
  - consume-once off: repeated grants are idempotent
  - target account must already exist
"""

from __future__ import annotations

import pytest

from auth.bootstrap import BootstrapInitializer
from auth.service import AuthService
from auth.users import UserRepository
from conftest import BOOTSTRAP_SECRET, BOOTSTRAP_USERNAME
from core.errors import AuthorizationError, NotFound
from store.base import BOOTSTRAP_MARKER_KEY
from store.memory import MemoryCredentialStore

SECRET = "correct-horse-battery-staple"


@pytest.fixture
def store():
    return MemoryCredentialStore()


def _register_target(store, username="Mark 2.0"):
    AuthService(store, bcrypt_rounds=4).register(username, "pw123", True)


def _rank(store, username="Mark 2.0"):
    return UserRepository(store).get(username).rank


def test_grant_sets_rank5_and_writes_marker(store) -> None:
    _register_target(store)
    init = BootstrapInitializer(store, SECRET, "mark 2.0")
    assert init.initialize_rank5(SECRET) == "Rank 5 successfully assigned to Mark 2.0"
    assert _rank(store) == 5
    assert store.get(BOOTSTRAP_MARKER_KEY)["username"] == "Mark 2.0"
    assert init.is_consumed()


@pytest.mark.parametrize("supplied", ["wrong-secret-value", "", None, SECRET + "x"])
def test_wrong_secret_refused(store, supplied) -> None:
    _register_target(store)
    init = BootstrapInitializer(store, SECRET, "Mark 2.0")
    with pytest.raises(AuthorizationError, match="Invalid secret key"):
        init.initialize_rank5(supplied)
    assert _rank(store) == 0
    assert not init.is_consumed()


def test_unconfigured_secret_refuses_everything(store) -> None:
    _register_target(store)
    init = BootstrapInitializer(store, "", "Mark 2.0")
    with pytest.raises(AuthorizationError):
        init.initialize_rank5("")
    assert _rank(store) == 0


def test_second_call_refused_when_consume_once(store) -> None:
    _register_target(store)
    init = BootstrapInitializer(store, SECRET, "Mark 2.0", consume_once=True)
    init.initialize_rank5(SECRET)
    with pytest.raises(AuthorizationError, match="Bootstrap already consumed"):
        init.initialize_rank5(SECRET)


def test_marker_survives_new_initializer(store) -> None:
    """The marker lives in the store, not in the initializer instance."""
    _register_target(store)
    BootstrapInitializer(store, SECRET, "Mark 2.0").initialize_rank5(SECRET)
    with pytest.raises(AuthorizationError):
        BootstrapInitializer(store, SECRET, "Mark 2.0").initialize_rank5(SECRET)


def test_idempotent_when_consume_once_off(store) -> None:
    _register_target(store)
    init = BootstrapInitializer(store, SECRET, "Mark 2.0", consume_once=False)
    first = init.initialize_rank5(SECRET)
    keys_after_first = sorted(r.get("username", "") for r in store.scan(""))
    second = init.initialize_rank5(SECRET)
    assert first == second
    assert _rank(store) == 5
    assert sorted(r.get("username", "") for r in store.scan("")) == keys_after_first
    assert store.get(BOOTSTRAP_MARKER_KEY) is None


def test_missing_target_account(store) -> None:
    init = BootstrapInitializer(store, SECRET, "Mark 2.0")
    with pytest.raises(NotFound, match="Bootstrap account Mark 2.0 does not exist"):
        init.initialize_rank5(SECRET)
    assert not init.is_consumed()


def test_configured_services_use_settings(services) -> None:
    """build_services() wires BOOTSTRAP_SECRET and BOOTSTRAP_USERNAME from configuration."""
    services.auth.register(BOOTSTRAP_USERNAME, "pw123", True)
    services.bootstrap.initialize_rank5(BOOTSTRAP_SECRET)
    assert services.auth.get_profile(BOOTSTRAP_USERNAME).rank == 5
