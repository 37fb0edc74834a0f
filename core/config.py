"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for SAFECORD happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. bootstrap_secret -> BOOTSTRAP_SECRET).

  @model_validator(mode="after"): cross-field validation once every field is
      resolved. Used for the bootstrap secret policy below.

Security notes:
  [B1] An empty BOOTSTRAP_SECRET disables POST /admin/init-rank5 entirely.
       A configured secret shorter than 16 chars is rejected outside DEBUG
       mode -- the secret is the only thing standing between an anonymous
       caller and rank 5.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
store/, contract/, local/, client/, or console/.
"""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("safecord.config")

_BACKEND_MODES = ("http", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    # Persistent service. File-backed SQLite next to the working directory.
    database_url: str = "sqlite:///safecord.db"
    # Local simulation snapshot file. Empty string keeps it purely in memory.
    local_store_path: str = ""

    # ------------------------------------------------------------------
    # Client backend selection
    # ------------------------------------------------------------------

    backend_mode: str = "http"
    api_base_url: str = "http://127.0.0.1:8000"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # bcrypt cost factor. 10 keeps a single verification in the tens of
    # milliseconds on commodity hardware.
    bcrypt_rounds: int = 10

    # ------------------------------------------------------------------
    # Bootstrap (first rank-5 administrator)
    # ------------------------------------------------------------------

    bootstrap_secret: str = ""
    bootstrap_username: str = "Mark 2.0"
    bootstrap_consume_once: bool = True

    # ------------------------------------------------------------------
    # HTTP service
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("backend_mode")
    @classmethod
    def validate_backend_mode(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in _BACKEND_MODES:
            raise ValueError(f"BACKEND_MODE must be one of {_BACKEND_MODES}, got {value!r}")
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        # bcrypt.gensalt() accepts 4..31; anything else raises deep inside the library.
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value

    @model_validator(mode="after")
    def validate_bootstrap_secret(self) -> "Settings":
        """Enforce the bootstrap secret policy [B1].

        Unset: the bootstrap route refuses every request. Logged once so an
            operator who expected it to work knows why.
        Short (< 16 chars): rejected in production, tolerated with a warning
            when DEBUG=true so local experiments stay convenient.
        """
        if not self.bootstrap_secret:
            logger.info("BOOTSTRAP_SECRET not set -- rank-5 bootstrap is disabled")
            return self
        if len(self.bootstrap_secret) < 16:
            if not self.debug:
                raise ValueError("BOOTSTRAP_SECRET must be at least 16 characters.")
            logger.warning("WARNING: BOOTSTRAP_SECRET is shorter than 16 characters (allowed in DEBUG mode).")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
