# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from portal.auth.passwords import hash_password, verify_password
from portal.auth.session import SessionUser
from portal.infra.user_repo import EmailTakenError, UserRepo
from portal.schemas import SignupForm

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for errors shown to the user on the signup/login forms."""

    message = "Authentication failed."

    def __str__(self) -> str:
        return self.message


class EmailInUseError(AuthError):
    message = "Email already in use. Try a different email."


class UnknownEmailError(AuthError):
    message = "No account exists with that email."


class WrongPasswordError(AuthError):
    message = "Incorrect password. Please try again."


def register(users: UserRepo, form: SignupForm) -> SessionUser:
    email = str(form.email).lower()
    try:
        rec = users.insert(
            name=form.name,
            email=email,
            password_hash=hash_password(form.password),
        )
    except EmailTakenError as exc:
        raise EmailInUseError() from exc
    logger.info("New account registered: %s", rec.email)
    return SessionUser(name=rec.name, email=rec.email, user_type=rec.user_type)


def authenticate(users: UserRepo, email: str, password: str) -> SessionUser:
    u = users.find_by_email(email)
    if not u:
        logger.info("Login failed: no account for %s", email.lower())
        raise UnknownEmailError()
    if not verify_password(password, u.password_hash):
        logger.info("Login failed: wrong password for %s", u.email)
        raise WrongPasswordError()
    logger.info("Login succeeded: %s", u.email)
    return SessionUser(name=u.name, email=u.email, user_type=u.user_type)
