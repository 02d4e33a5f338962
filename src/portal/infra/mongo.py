# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from portal.config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
SESSIONS_COLLECTION = "sessions"


def connect(settings: Settings) -> MongoClient:
    """Create the process-wide client. pymongo connects lazily on first use."""
    return MongoClient(settings.mongodb_uri)


def ensure_indexes(db: Database) -> None:
    """Create the indexes the app relies on (idempotent).

    - users.email is unique: signup inserts and lets the server reject duplicates.
    - sessions.expiresAt carries a TTL index so expired sessions are purged.
    """
    db[USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True, name="email_unique")
    db[SESSIONS_COLLECTION].create_index(
        [("expiresAt", ASCENDING)], expireAfterSeconds=0, name="expiresAt_ttl"
    )
    logger.debug("Indexes ensured on %s", db.name)
