# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- Password hashing/verification (bcrypt, cost 10)
- Account registration and credential checks against the users collection
- Signed session-id cookies (itsdangerous) and the per-request session object
"""
