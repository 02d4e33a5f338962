# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from pymongo import MongoClient

from portal.auth.session import CookieSigner
from portal.config import Settings
from portal.infra.mongo import SESSIONS_COLLECTION, USERS_COLLECTION
from portal.infra.session_repo import SessionRepo
from portal.infra.user_repo import UserRepo


@dataclass(frozen=True)
class ServiceContext:
    """Everything a request handler needs, built once per app."""

    settings: Settings
    client: MongoClient
    users: UserRepo
    sessions: SessionRepo
    signer: CookieSigner

    @classmethod
    def build(cls, settings: Settings, client: MongoClient) -> "ServiceContext":
        db = client[settings.mongodb_database]
        return cls(
            settings=settings,
            client=client,
            users=UserRepo(db[USERS_COLLECTION]),
            sessions=SessionRepo(
                db[SESSIONS_COLLECTION],
                secret=settings.store_secret,
                ttl_seconds=settings.session_ttl,
            ),
            signer=CookieSigner(settings.session_secret, max_age=settings.session_ttl),
        )


def get_context(request: Request) -> ServiceContext:
    return request.app.state.ctx
