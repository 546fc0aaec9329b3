"""Unit tests for bearer tokens, password hashing and settings parsing"""

import base64
import json
import pytest
from debt_ledger.config import Settings
from debt_ledger.domain.exceptions import ExpiredTokenError, InvalidTokenError
from debt_ledger.infrastructure.security.passwords import hash_password, verify_password
from debt_ledger.infrastructure.security.tokens import TokenService


NOW = 1_700_000_000


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(secret_key="test-secret", ttl_seconds=3600)


def test_issue_and_verify(tokens: TokenService):
    token = tokens.issue(42, "ana@example.com", now=NOW)
    identity = tokens.verify(token, now=NOW + 10)

    assert identity.id == 42
    assert identity.email == "ana@example.com"


def test_payload_carries_id_email_and_expiry(tokens: TokenService):
    token = tokens.issue(7, "luis@example.com", now=NOW)
    payload_segment = token.split(".")[1]
    payload = json.loads(base64.urlsafe_b64decode(payload_segment + "=" * (-len(payload_segment) % 4)))

    assert payload == {"id": 7, "email": "luis@example.com", "exp": NOW + 3600}


def test_expired_token_rejected(tokens: TokenService):
    token = tokens.issue(1, "ana@example.com", now=NOW)

    with pytest.raises(ExpiredTokenError):
        tokens.verify(token, now=NOW + 3601)


def test_token_from_other_secret_rejected(tokens: TokenService):
    foreign = TokenService(secret_key="another-secret", ttl_seconds=3600).issue(1, "ana@example.com", now=NOW)

    with pytest.raises(InvalidTokenError):
        tokens.verify(foreign, now=NOW)


def test_tampered_payload_rejected(tokens: TokenService):
    header, _, signature = tokens.issue(1, "ana@example.com", now=NOW).split(".")
    forged = base64.urlsafe_b64encode(
        json.dumps({"id": 2, "email": "ana@example.com", "exp": NOW + 3600}).encode()
    ).rstrip(b"=").decode()

    with pytest.raises(InvalidTokenError):
        tokens.verify(f"{header}.{forged}.{signature}", now=NOW)


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "not.a.token"])
def test_malformed_token_rejected(tokens: TokenService, token: str):
    with pytest.raises(InvalidTokenError):
        tokens.verify(token, now=NOW)


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret!")

    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


@pytest.mark.parametrize(
    "raw, seconds",
    [("3600", 3600), ("12h", 43200), ("1d", 86400), ("7d", 604800)],
)
def test_token_ttl_parsing(monkeypatch, raw, seconds):
    monkeypatch.setenv("TOKEN_TTL", raw)
    assert Settings().token_ttl == seconds
