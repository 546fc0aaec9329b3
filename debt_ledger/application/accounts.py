"""Account use cases: registration and login"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from debt_ledger.domain.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    ValidationFailure,
)
from debt_ledger.infrastructure.database.models import User
from debt_ledger.infrastructure.database.repositories import UserRepository
from debt_ledger.infrastructure.security.passwords import hash_password, verify_password
from debt_ledger.infrastructure.security.tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """Issued token plus the public user fields"""

    token: str
    user: User


def avatar_for(name: str) -> str:
    """Single upper-case glyph shown in place of a profile picture"""
    stripped = name.strip()
    return stripped[0].upper() if stripped else "U"


class AccountService:
    def __init__(self, db: Session, tokens: TokenService):
        self.db = db
        self.users = UserRepository(db)
        self.tokens = tokens

    def register(self, name: str, email: str, password: str) -> AuthSession:
        """
        Create a user and log them in.

        Raises:
            ValidationFailure: name, email or password empty
            EmailAlreadyRegisteredError: email already taken
        """
        if not name or not email or not password:
            raise ValidationFailure("Name, email and password are required")

        if self.users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError()

        try:
            user = self.users.create_user(
                name=name,
                email=email,
                password_hash=hash_password(password),
                avatar=avatar_for(name),
            )
            self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise EmailAlreadyRegisteredError() from e

        logger.info("User registered", extra={"user_id": user.id})
        return AuthSession(token=self.tokens.issue(user.id, user.email), user=user)

    def login(self, email: str, password: str) -> AuthSession:
        """
        Raises:
            ValidationFailure: email or password empty
            InvalidCredentialsError: unknown email or wrong password
        """
        if not email or not password:
            raise ValidationFailure("Email and password are required")

        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login rejected", extra={"email": email})
            raise InvalidCredentialsError()

        return AuthSession(token=self.tokens.issue(user.id, user.email), user=user)
