# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request

from portal.auth.session import Session, SessionUser

LOGIN_URL = "/login"
ADMIN_REQUIRED_MESSAGE = "You need to be an admin to view this page."


def get_session(request: Request) -> Session:
    return request.state.session


def current_user_optional(request: Request) -> Optional[SessionUser]:
    return get_session(request).user


def require_login(request: Request) -> SessionUser:
    u = current_user_optional(request)
    if u:
        return u
    raise HTTPException(status_code=302, headers={"Location": LOGIN_URL})


def require_admin(user: SessionUser = Depends(require_login)) -> SessionUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail=ADMIN_REQUIRED_MESSAGE)
    return user
