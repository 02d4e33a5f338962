from datetime import timedelta

import mongomock

from portal.auth.session import CookieSigner, Session, SessionUser
from portal.infra.session_repo import SessionRepo, utcnow


def _repo(secret="store-secret"):
    col = mongomock.MongoClient()["db"]["sessions"]
    return col, SessionRepo(col, secret=secret, ttl_seconds=3600)


def test_save_load_and_destroy():
    col, repo = _repo()
    expires = repo.save("sid-1", {"user": {"name": "Ann", "email": "a@x.com", "user_type": "user"}})
    assert timedelta(minutes=59) < expires - utcnow() <= timedelta(hours=1)

    doc = col.find_one({"_id": "sid-1"})
    assert isinstance(doc["data"], str)  # signed, not a plain sub-document

    data = repo.load("sid-1")
    assert data["user"]["email"] == "a@x.com"

    repo.destroy("sid-1")
    assert repo.load("sid-1") is None


def test_expired_records_are_ignored():
    col, repo = _repo()
    repo.save("sid-1", {"user": {"email": "a@x.com"}})
    col.update_one({"_id": "sid-1"}, {"$set": {"expiresAt": utcnow() - timedelta(seconds=1)}})
    assert repo.load("sid-1") is None


def test_tampered_or_foreign_data_is_rejected():
    col, repo = _repo()
    repo.save("sid-1", {"user": {"email": "a@x.com", "user_type": "user"}})
    other = SessionRepo(col, secret="another-secret", ttl_seconds=3600)
    other.save("sid-2", {"user": {"email": "a@x.com", "user_type": "admin"}})
    assert repo.load("sid-2") is None

    forged = col.find_one({"_id": "sid-2"})["data"]
    col.update_one({"_id": "sid-1"}, {"$set": {"data": forged}})
    assert repo.load("sid-1") is None


def test_cookie_signer_round_trip_and_tamper():
    signer = CookieSigner("cookie-secret", max_age=3600)
    token = signer.sign("abc")
    assert signer.unsign(token) == "abc"
    assert signer.unsign(token + "x") is None
    assert signer.unsign("") is None
    assert CookieSigner("other", max_age=3600).unsign(token) is None


def test_session_user_accessors():
    s = Session()
    assert s.user is None
    s.user = SessionUser(name="Ann", email="a@x.com", user_type="admin")
    assert s["user"] == {"name": "Ann", "email": "a@x.com", "user_type": "admin"}
    assert s.user.is_admin
    s.destroy()
    assert s.destroyed and s.user is None
