"""
Runtime settings, read from the environment (and a local .env if present).

APP_ENV                      local | test | production  (local auto-creates tables)
DATABASE_URL                 SQLAlchemy URL
CODEBREAKER_STORE            db | memory
CODEBREAKER_RANDOM_SOURCE    system | random_org
CODEBREAKER_KEY_FORMAT       base36 | base64url
CODEBREAKER_STALE_GAME_DAYS  idle days before a game is purged
CODEBREAKER_CORS_ORIGINS     comma-separated origins
CODEBREAKER_LOG_LEVEL        logging level name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .ids import CODECS
from .random_client import SOURCES

STORES = ("db", "memory")
DEFAULT_DATABASE_URL = "sqlite:///./codebreaker.db"


@dataclass(frozen=True)
class Settings:
    app_env: str
    database_url: str
    store: str
    random_source: str
    key_format: str
    stale_game_days: int
    cors_origins: tuple[str, ...]
    log_level: str


def _choice(name: str, default: str, allowed) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        raise ValueError(f"{name} must be one of {sorted(allowed)}, got {value!r}.")
    return value


def _non_negative_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}.")
    return value


def _log_level(name: str, default: str) -> str:
    value = os.getenv(name, default).strip().upper()
    if value not in logging.getLevelNamesMapping():
        raise ValueError(f"{name} must be a logging level name, got {value!r}.")
    return value


def load_settings() -> Settings:
    # dev convenience; in prod the platform injects env vars
    load_dotenv()
    origins = os.getenv("CODEBREAKER_CORS_ORIGINS", "*")
    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        store=_choice("CODEBREAKER_STORE", "db", STORES),
        random_source=_choice("CODEBREAKER_RANDOM_SOURCE", "system", SOURCES),
        key_format=_choice("CODEBREAKER_KEY_FORMAT", "base36", CODECS),
        stale_game_days=_non_negative_int("CODEBREAKER_STALE_GAME_DAYS", "14"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=_log_level("CODEBREAKER_LOG_LEVEL", "INFO"),
    )
