# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

COOKIE_SALT = "portal.session.v1"


@dataclass(frozen=True)
class SessionUser:
    """Denormalised copy of the user kept in the session (not refreshed on role changes)."""

    name: str
    email: str
    user_type: str

    @property
    def is_admin(self) -> bool:
        return self.user_type == "admin"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["SessionUser"]:
        if not isinstance(raw, dict):
            return None
        email = str(raw.get("email") or "").strip()
        if not email:
            return None
        return cls(
            name=str(raw.get("name") or ""),
            email=email,
            user_type=str(raw.get("user_type") or "user"),
        )


class Session(dict):
    """Per-request session data. The middleware persists it after the response."""

    def __init__(self, sid: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(data or {})
        self.sid = sid
        self.destroyed = False

    @property
    def user(self) -> Optional[SessionUser]:
        return SessionUser.from_dict(self.get("user"))

    @user.setter
    def user(self, value: SessionUser) -> None:
        self["user"] = value.to_dict()

    def destroy(self) -> None:
        self.clear()
        self.destroyed = True


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class CookieSigner:
    """Signs session ids for the cookie; the signature carries a timestamp."""

    def __init__(self, secret: str, *, max_age: int):
        if not secret:
            raise RuntimeError("Missing session secret")
        self._s = URLSafeTimedSerializer(secret_key=secret, salt=COOKIE_SALT)
        self.max_age = int(max_age)

    def sign(self, sid: str) -> str:
        return self._s.dumps(sid)

    def unsign(self, token: str) -> Optional[str]:
        if not token:
            return None
        try:
            sid = self._s.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        sid = str(sid or "").strip()
        return sid or None
