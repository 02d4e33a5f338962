# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of input.
_MAX_BYTES = 72


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    pw = plain.encode("utf-8")[:_MAX_BYTES]
    return bcrypt.hashpw(pw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hash_value: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:_MAX_BYTES], hash_value.encode("utf-8"))
    except (ValueError, TypeError):
        return False
