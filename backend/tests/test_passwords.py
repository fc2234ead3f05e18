from __future__ import annotations

from aish.auth import (
    hash_password,
    legacy_password_hash,
    normalize_doctor_name,
    verify_password,
)


def test_normalize_adds_prefix_and_trims():
    assert normalize_doctor_name("  Alice ") == "Dr. Alice"


def test_normalize_keeps_existing_prefix():
    assert normalize_doctor_name("Dr. Alice") == "Dr. Alice"
    assert normalize_doctor_name(" Dr.Bob") == "Dr.Bob"


def test_hash_is_salted_per_call():
    a = hash_password("secret1", "k", iterations=1000)
    b = hash_password("secret1", "k", iterations=1000)
    assert a != b
    assert a.startswith("pbkdf2_sha256$1000$")
    assert "secret1" not in a


def test_verify_salted_hash():
    stored = hash_password("secret1", "k", iterations=1000)
    assert verify_password("secret1", stored, "k")
    assert not verify_password("wrong", stored, "k")
    # the secret is part of the derivation
    assert not verify_password("secret1", stored, "other")


def test_verify_legacy_hmac_hash():
    stored = legacy_password_hash("secret1", "k")
    assert len(stored) == 64
    assert legacy_password_hash("secret1", "k") == stored
    assert verify_password("secret1", stored, "k")
    assert not verify_password("secret2", stored, "k")


def test_verify_rejects_garbage():
    assert not verify_password("secret1", "not-a-hash", "k")
    assert not verify_password("secret1", "md5$1$aa$bb", "k")
