"""
client/factory.py -- Pick a BackendClient provider from configuration.

BACKEND_MODE=http   -> HttpBackendClient(API_BASE_URL)
BACKEND_MODE=local  -> LocalBackendClient over a fresh LocalBackend
                       (LOCAL_STORE_PATH, if set, persists its records)
"""

from __future__ import annotations

import logging

from client.base import BackendClient
from client.http import HttpBackendClient
from client.local import LocalBackendClient
from core.config import Settings
from local.router import LocalBackend

logger = logging.getLogger("safecord.client")


def make_client(settings: Settings) -> BackendClient:
    if settings.backend_mode == "local":
        logger.info("Using local simulation backend")
        return LocalBackendClient(LocalBackend.from_settings(settings))
    logger.info("Using HTTP backend at %s", settings.api_base_url)
    return HttpBackendClient(settings.api_base_url)
