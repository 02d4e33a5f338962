# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

logger = logging.getLogger(__name__)

USER_TYPES = ("user", "admin")


class EmailTakenError(Exception):
    """Raised when an insert collides with the unique email index."""


@dataclass(frozen=True)
class UserRecord:
    name: str
    email: str
    user_type: str
    password_hash: str

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserRecord":
        return cls(
            name=str(doc.get("name") or ""),
            email=str(doc.get("email") or ""),
            user_type=str(doc.get("user_type") or "user"),
            password_hash=str(doc.get("password") or ""),
        )


class UserRepo:
    """Thin wrapper around the ``users`` collection."""

    def __init__(self, collection: Collection):
        self._col = collection

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        e = (email or "").strip().lower()
        if not e:
            return None
        doc = self._col.find_one({"email": e})
        return UserRecord.from_doc(doc) if doc else None

    def insert(self, *, name: str, email: str, password_hash: str, user_type: str = "user") -> UserRecord:
        """Insert a new user. Relies on the unique index, no read-before-write."""
        if user_type not in USER_TYPES:
            raise ValueError(f"Unknown user_type '{user_type}'")
        doc = {
            "name": name,
            "email": email.strip().lower(),
            "password": password_hash,
            "user_type": user_type,
        }
        try:
            self._col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise EmailTakenError(doc["email"]) from exc
        return UserRecord.from_doc(doc)

    def list_all(self) -> List[UserRecord]:
        return [UserRecord.from_doc(d) for d in self._col.find().sort("name", 1)]

    def set_user_type(self, name: str, user_type: str) -> int:
        """Set ``user_type`` on the first user whose display name matches.

        Names are not unique; with a collision only one record changes.
        Returns the number of modified records (0 or 1).
        """
        if user_type not in USER_TYPES:
            raise ValueError(f"Unknown user_type '{user_type}'")
        matches = self._col.count_documents({"name": name})
        if matches > 1:
            logger.warning("%d users share the name %r; only one will be updated", matches, name)
        res = self._col.update_one({"name": name}, {"$set": {"user_type": user_type}})
        return int(res.modified_count)
