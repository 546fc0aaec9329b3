"""Pytest fixtures for testing"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from debt_ledger.api.main import create_app
from debt_ledger.infrastructure.database.models import Debt, User
from debt_ledger.infrastructure.database.session import Database
from debt_ledger.infrastructure.security.passwords import hash_password


@pytest.fixture
def database(tmp_path) -> Generator[Database, None, None]:
    """File-backed SQLite database, so concurrent sessions share it"""
    database = Database(f"sqlite:///{tmp_path / 'test.db'}")
    database.create_all()
    try:
        yield database
    finally:
        database.drop_all()
        database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    """Session for arranging and inspecting test data"""
    with database.session() as session:
        yield session


@pytest.fixture
def client(database: Database) -> TestClient:
    """Create FastAPI test client bound to the test database"""
    app = create_app(database)
    return TestClient(app)


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Insert a user directly, bypassing the API"""

    def _make_user(email: str = "ana@example.com", name: str = "Ana", password: str = "secret123") -> User:
        user = User(name=name, email=email, password_hash=hash_password(password), avatar=name[0].upper())
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_debt(db: Session) -> Callable[..., Debt]:
    """Insert a debt directly with the given principal and paid amount"""

    def _make_debt(
        owner: User,
        amount: str = "1000.00",
        paid_amount: str = "0.00",
        due_date: date | None = None,
        status: str = "pending",
        bank_name: str = "BCP",
        description: str = "Credit card",
    ) -> Debt:
        debt = Debt(
            user_id=owner.id,
            bank_name=bank_name,
            description=description,
            amount=Decimal(amount),
            paid_amount=Decimal(paid_amount),
            due_date=due_date or date.today() + timedelta(days=20),
            frequency="monthly",
            status=status,
        )
        db.add(debt)
        db.commit()
        return debt

    return _make_debt


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict[str, str]]:
    """Register through the API and return bearer headers"""

    def _register(email: str = "ana@example.com", name: str = "Ana", password: str = "secret123") -> Dict[str, str]:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register) -> Dict[str, str]:
    return register()
