"""POST /auth/register, POST /auth/login - credential check and token issue"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_token_service
from debt_ledger.api.v1.schemas import AuthResponse, LoginRequest, RegisterRequest, UserSchema
from debt_ledger.application.accounts import AccountService
from debt_ledger.domain.exceptions import InvalidCredentialsError
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.metrics import record_auth_failure
from debt_ledger.infrastructure.security.tokens import TokenService

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request_body: RegisterRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create an account and return a token for it.

    Returns 409 when the email is already registered.
    """
    session = AccountService(db, tokens).register(
        name=request_body.name,
        email=request_body.email,
        password=request_body.password,
    )
    return AuthResponse(token=session.token, user=UserSchema.model_validate(session.user))


@router.post("/login", response_model=AuthResponse)
def login(
    request_body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange email and password for a token (401 on bad credentials)"""
    try:
        session = AccountService(db, tokens).login(request_body.email, request_body.password)
    except InvalidCredentialsError:
        record_auth_failure("bad_credentials")
        raise

    return AuthResponse(token=session.token, user=UserSchema.model_validate(session.user))
