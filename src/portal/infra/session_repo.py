# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, URLSafeSerializer
from pymongo.collection import Collection

logger = logging.getLogger(__name__)

STORE_SALT = "portal.session-store.v1"


def utcnow() -> datetime:
    # pymongo hands back naive UTC datetimes; keep writes comparable with reads.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionRepo:
    """Server-side session records in the ``sessions`` collection.

    The ``data`` payload is signed with the store secret so a record edited
    directly in the database is rejected on load.
    """

    def __init__(self, collection: Collection, *, secret: str, ttl_seconds: int):
        self._col = collection
        self._ttl = int(ttl_seconds)
        self._serializer = URLSafeSerializer(secret_key=secret, salt=STORE_SALT)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def load(self, sid: str) -> Optional[Dict[str, Any]]:
        if not sid:
            return None
        doc = self._col.find_one({"_id": sid, "expiresAt": {"$gt": utcnow()}})
        if not doc:
            return None
        try:
            data = self._serializer.loads(doc.get("data") or "")
        except BadSignature:
            logger.warning("Discarding session %s: stored data failed signature check", sid[:8])
            return None
        return data if isinstance(data, dict) else None

    def save(self, sid: str, data: Dict[str, Any]) -> datetime:
        expires_at = utcnow() + timedelta(seconds=self._ttl)
        self._col.replace_one(
            {"_id": sid},
            {"_id": sid, "data": self._serializer.dumps(data), "expiresAt": expires_at},
            upsert=True,
        )
        return expires_at

    def destroy(self, sid: str) -> None:
        if sid:
            self._col.delete_one({"_id": sid})
