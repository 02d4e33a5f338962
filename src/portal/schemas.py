# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Form schemas for signup and login.

Error messages follow the wording users of the previous site already saw, e.g.
``"password" length must be at least 8 characters long``.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

NAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 64


class _Form(BaseModel):
    # Unknown fields are dropped, not rejected.
    model_config = ConfigDict(extra="ignore")


class SignupForm(_Form):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class LoginForm(_Form):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


F = TypeVar("F", bound=_Form)


def _message(err: Mapping[str, Any], payload: Mapping[str, Any]) -> str:
    field = str(err["loc"][0]) if err.get("loc") else "value"
    label = f'"{field}"'
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required"
    if payload.get(field) == "":
        return f"{label} is not allowed to be empty"
    if kind == "string_too_long":
        return f"{label} length must be less than or equal to {ctx.get('max_length')} characters long"
    if kind == "string_too_short":
        return f"{label} length must be at least {ctx.get('min_length')} characters long"
    if kind == "string_type":
        return f"{label} must be a string"
    if field == "email":
        return f"{label} must be a valid email"
    return f"{label} {err.get('msg', 'is invalid')}"


def validate(schema: Type[F], payload: Mapping[str, Any]) -> Tuple[Optional[F], List[str]]:
    """Validate a raw form payload.

    Returns ``(value, [])`` on success or ``(None, messages)`` with every
    failing field reported, in field order.
    """
    data = dict(payload)
    try:
        return schema.model_validate(data), []
    except ValidationError as exc:
        return None, [_message(e, data) for e in exc.errors()]
