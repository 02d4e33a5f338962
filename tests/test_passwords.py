import pytest

from portal.auth.passwords import hash_password, verify_password


def test_hash_uses_cost_10_and_verifies():
    h = hash_password("longenough1")
    assert h.startswith("$2b$10$")
    assert verify_password("longenough1", h)
    assert not verify_password("longenough2", h)


def test_hashes_are_salted():
    assert hash_password("longenough1") != hash_password("longenough1")


def test_verify_rejects_empty_and_malformed():
    assert not verify_password("", "$2b$10$abc")
    assert not verify_password("longenough1", "")
    assert not verify_password("longenough1", "not-a-bcrypt-hash")


def test_hash_rejects_empty():
    with pytest.raises(ValueError):
        hash_password("")
