"""Runtime settings for the sign-up app, read from SIGNUP_* environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Persisted file next to the package (NOTE: hosted free tiers may reset the disk on redeploy)
DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "signup.sqlite")
DEFAULT_COLLECTION = "bowlers"
DEFAULT_ADMIN_PASSWORD = "admin"
ADMIN_PREFIX = "#/admin"


class Settings(BaseSettings):
    db_path: str = DEFAULT_DB_PATH
    collection: str = DEFAULT_COLLECTION
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_prefix="SIGNUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="after")
    def _warn_on_default_password(self) -> "Settings":
        if not self.admin_password or self.admin_password == DEFAULT_ADMIN_PASSWORD:
            logger.warning("SIGNUP_ADMIN_PASSWORD is not set; using the default admin password.")
        return self
