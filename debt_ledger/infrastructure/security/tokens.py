"""HMAC-SHA256 signed bearer tokens carrying {id, email, exp}"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Dict

from debt_ledger.config import settings
from debt_ledger.domain.exceptions import ExpiredTokenError, InvalidTokenError
from debt_ledger.domain.models import Identity

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


def _sign(signing_input: str, secret: str) -> str:
    digest = hmac.new(secret.encode(), msg=signing_input.encode(), digestmod=hashlib.sha256).digest()
    return _b64encode(digest)


class TokenService:
    """Issue and verify compact HS256 tokens"""

    def __init__(self, secret_key: str | None = None, ttl_seconds: int | None = None):
        self.secret_key = secret_key or settings.secret_key
        self.ttl_seconds = ttl_seconds or settings.token_ttl

    def issue(self, user_id: int, email: str, now: float | None = None) -> str:
        """Sign a token for a user, valid for ttl_seconds"""
        issued_at = int(now if now is not None else time.time())
        payload = {"id": user_id, "email": email, "exp": issued_at + self.ttl_seconds}

        header_segment = _b64encode(json.dumps(_HEADER, separators=(",", ":")).encode())
        payload_segment = _b64encode(json.dumps(payload, separators=(",", ":")).encode())
        signing_input = f"{header_segment}.{payload_segment}"
        return f"{signing_input}.{_sign(signing_input, self.secret_key)}"

    def verify(self, token: str, now: float | None = None) -> Identity:
        """
        Check signature and expiry, return the identity inside.

        Raises:
            InvalidTokenError: Malformed token or signature mismatch
            ExpiredTokenError: exp is in the past
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise InvalidTokenError()

        header_segment, payload_segment, signature = parts
        expected = _sign(f"{header_segment}.{payload_segment}", self.secret_key)

        # Constant-time comparison
        if not hmac.compare_digest(signature.encode(), expected.encode()):
            raise InvalidTokenError()

        try:
            payload: Dict[str, Any] = json.loads(_b64decode(payload_segment))
            identity = Identity(id=int(payload["id"]), email=str(payload["email"]))
            expires_at = int(payload["exp"]) if payload.get("exp") is not None else None
        except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            raise InvalidTokenError() from e

        current_time = int(now if now is not None else time.time())
        if expires_at is not None and expires_at < current_time:
            raise ExpiredTokenError()

        return identity
