from jose import jwt

from eats.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hashing():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_long_passwords_are_truncated_consistently():
    long = "x" * 100
    assert verify_password(long, hash_password(long))


def test_token_round_trip():
    token = create_access_token({"id": 7})
    payload = decode_access_token(token)
    assert payload["id"] == 7
    assert payload["exp"] > payload["iat"]


def test_expired_token_is_rejected():
    assert decode_access_token(create_access_token({"id": 7}, expires_minutes=-1)) is None


def test_token_signed_with_other_secret_is_rejected():
    forged = jwt.encode({"id": 7}, "not-the-secret", algorithm="HS256")
    assert decode_access_token(forged) is None
    assert decode_access_token("garbage") is None
