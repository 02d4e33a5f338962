import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import mongomock
import pytest
from fastapi.testclient import TestClient

from portal.app import create_app
from portal.auth.passwords import hash_password
from portal.config import Settings
from portal.infra.mongo import USERS_COLLECTION

PASSWORD = "longenough1"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017/portal_test",
        mongodb_database="portal_test",
        session_secret="cookie-secret-for-tests",
        store_secret="store-secret-for-tests",
    )


@pytest.fixture()
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture()
def db(mongo_client, settings):
    return mongo_client[settings.mongodb_database]


@pytest.fixture()
def app(settings, mongo_client):
    return create_app(settings, client=mongo_client)


@pytest.fixture()
def client(app):
    return TestClient(app, follow_redirects=False)


@pytest.fixture()
def make_user(db):
    """Insert a user directly into the collection (bypassing signup)."""

    def _make(name: str, email: str, *, user_type: str = "user", password: str = PASSWORD):
        db[USERS_COLLECTION].insert_one(
            {
                "name": name,
                "email": email.lower(),
                "password": hash_password(password),
                "user_type": user_type,
            }
        )

    return _make

