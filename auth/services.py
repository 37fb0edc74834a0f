"""
auth/services.py -- Wires the identity services to one Credential Store.

api/main.py builds one bundle over SqlCredentialStore at startup; local/
builds one over MemoryCredentialStore. Everything above this point is
backend-agnostic.
"""

from __future__ import annotations

from dataclasses import dataclass

from auth.admin import RankEngine
from auth.bootstrap import BootstrapInitializer
from auth.service import AuthService
from core.config import Settings
from store.base import CredentialStore


@dataclass
class IdentityServices:
    store: CredentialStore
    auth: AuthService
    ranks: RankEngine
    bootstrap: BootstrapInitializer

    def close(self) -> None:
        self.store.close()


def build_services(store: CredentialStore, settings: Settings) -> IdentityServices:
    return IdentityServices(
        store=store,
        auth=AuthService(store, bcrypt_rounds=settings.bcrypt_rounds),
        ranks=RankEngine(store),
        bootstrap=BootstrapInitializer(
            store,
            secret=settings.bootstrap_secret,
            target_username=settings.bootstrap_username,
            consume_once=settings.bootstrap_consume_once,
        ),
    )
