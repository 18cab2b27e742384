"""Token cipher and the encrypted columns on Company."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from genuka_auth.core.crypto import TokenCipher
from genuka_auth.models.company import Company


def test_encrypt_round_trip() -> None:
    cipher = TokenCipher("app-key")
    encrypted = cipher.encrypt("access-token")

    assert encrypted != "access-token"
    assert cipher.decrypt(encrypted) == "access-token"


def test_disabled_cipher_passes_values_through() -> None:
    cipher = TokenCipher("app-key", enabled=False)

    assert cipher.encrypt("access-token") == "access-token"
    assert cipher.decrypt("access-token") == "access-token"


def test_none_is_preserved() -> None:
    cipher = TokenCipher("app-key")

    assert cipher.encrypt(None) is None
    assert cipher.decrypt(None) is None


def test_other_key_cannot_decrypt() -> None:
    encrypted = TokenCipher("app-key").encrypt("secret")

    with pytest.raises(ValueError):
        TokenCipher("rotated-key").decrypt(encrypted)


def test_company_tokens_are_encrypted_at_rest(db) -> None:
    db.add(Company(id="C1", name="Boutique", access_token="plain-access", refresh_token="plain-refresh"))
    db.commit()

    raw = db.execute(text("SELECT access_token, refresh_token FROM companies WHERE id = 'C1'")).one()
    assert raw.access_token != "plain-access"
    assert raw.refresh_token != "plain-refresh"

    db.expire_all()
    company = db.get(Company, "C1")
    assert company.access_token == "plain-access"
    assert company.refresh_token == "plain-refresh"
