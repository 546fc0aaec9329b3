"""Dependency injection for FastAPI endpoints"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from debt_ledger.domain.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
)
from debt_ledger.domain.models import Identity
from debt_ledger.infrastructure.observability.metrics import record_auth_failure
from debt_ledger.infrastructure.security.tokens import TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_token_service() -> TokenService:
    """Provide token signer/verifier instance"""
    return TokenService()


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Access gate for protected endpoints.

    Verifies the bearer token and hands the authenticated identity to the
    endpoint, which passes it explicitly to every owner-scoped operation.

    Raises:
        MissingTokenError / InvalidTokenError / ExpiredTokenError (401)
    """
    if credentials is None or not credentials.credentials:
        record_auth_failure("missing_token")
        raise MissingTokenError()

    try:
        return tokens.verify(credentials.credentials)
    except ExpiredTokenError:
        record_auth_failure("expired_token")
        raise
    except InvalidTokenError:
        record_auth_failure("invalid_token")
        raise
