# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

DEFAULT_SESSION_TTL_SECONDS = 60 * 60


def _get_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    mongodb_uri: str
    mongodb_database: str
    session_secret: str
    store_secret: str
    host: str = "0.0.0.0"
    port: int = 3000
    session_ttl: int = DEFAULT_SESSION_TTL_SECONDS
    cookie_name: str = "portal.sid"
    cookie_secure: bool = False
    log_level: str = "INFO"
    reload: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ`` after loading .env)."""
        if env is None:
            load_dotenv()
            env = os.environ

        database = (env.get("MONGODB_DATABASE") or "portal").strip()

        session_secret = env.get("SESSION_SECRET") or env.get("NODE_SESSION_SECRET")
        if not session_secret:
            raise RuntimeError("Missing SESSION_SECRET (or NODE_SESSION_SECRET) in environment")
        store_secret = env.get("MONGODB_SESSION_SECRET")
        if not store_secret:
            raise RuntimeError("Missing MONGODB_SESSION_SECRET in environment")

        ttl = int(env.get("PORTAL_SESSION_TTL", str(DEFAULT_SESSION_TTL_SECONDS)))
        if ttl < 1:
            raise RuntimeError("PORTAL_SESSION_TTL must be a positive number of seconds")

        return cls(
            mongodb_uri=_mongodb_uri(env, database),
            mongodb_database=database,
            session_secret=session_secret,
            store_secret=store_secret,
            host=env.get("PORTAL_HOST", "0.0.0.0"),
            port=int(env.get("PORT", "3000")),
            session_ttl=ttl,
            cookie_name=env.get("PORTAL_COOKIE_NAME", "portal.sid"),
            cookie_secure=_get_bool(env.get("PORTAL_COOKIE_SECURE")),
            log_level=env.get("PORTAL_LOG_LEVEL", "INFO").upper(),
            reload=_get_bool(env.get("PORTAL_RELOAD")),
        )


def _mongodb_uri(env: Mapping[str, str], database: str) -> str:
    uri = (env.get("MONGODB_URI") or "").strip()
    if uri:
        return uri

    user = env.get("MONGODB_USER")
    password = env.get("MONGODB_PASSWORD")
    host = env.get("MONGODB_HOST")
    if not (user and password and host):
        raise RuntimeError(
            "Missing MongoDB connection settings: set MONGODB_URI or "
            "MONGODB_USER, MONGODB_PASSWORD and MONGODB_HOST"
        )
    return (
        f"mongodb+srv://{quote_plus(user)}:{quote_plus(password)}@{host}/"
        f"{database}?retryWrites=true&w=majority"
    )
