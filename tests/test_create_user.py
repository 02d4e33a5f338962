from portal.auth.passwords import verify_password
from portal.infra.mongo import USERS_COLLECTION
from portal.scripts.create_user import main


def test_creates_admin(mongo_client, settings, db, capsys):
    rc = main(["Root", "Root@Example.com", "longenough1", "admin"], client=mongo_client, settings=settings)
    assert rc == 0
    doc = db[USERS_COLLECTION].find_one({"email": "root@example.com"})
    assert doc["user_type"] == "admin"
    assert verify_password("longenough1", doc["password"])
    assert "with role 'admin'" in capsys.readouterr().out


def test_rejects_duplicate_and_invalid_input(mongo_client, settings, db, capsys):
    assert main(["Root", "root@example.com", "longenough1"], client=mongo_client, settings=settings) == 0
    assert main(["Other", "ROOT@example.com", "longenough1"], client=mongo_client, settings=settings) == 1
    assert "already registered" in capsys.readouterr().err

    assert main(["Short", "short@example.com", "short"], client=mongo_client, settings=settings) == 1
    assert '"password" length must be at least 8' in capsys.readouterr().err
    assert db[USERS_COLLECTION].count_documents({}) == 1
