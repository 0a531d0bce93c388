"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, field_validator


class Settings(BaseModel):
    app_title: str = "Orders Service"
    log_level: str = "INFO"
    mail_sender: str = "orders@example.com"
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level


_ENV_KEYS = {
    "app_title": "ORDERS_APP_TITLE",
    "log_level": "ORDERS_LOG_LEVEL",
    "mail_sender": "ORDERS_MAIL_SENDER",
    "host": "ORDERS_HOST",
    "port": "ORDERS_PORT",
}


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``ORDERS_*`` environment variables."""
    env = os.environ if environ is None else environ
    return Settings(**{field: env[key] for field, key in _ENV_KEYS.items() if key in env})


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
