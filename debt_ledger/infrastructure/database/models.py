"""SQLAlchemy ORM models for users, debts, payment history, banks and notifications"""

from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey, Text, Numeric
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(12, 2)


class User(Base):
    """Registered account holder"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    avatar = Column(String(8), nullable=False, default="U")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debts = relationship("Debt", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")


class Debt(Base):
    """Principal owed to a bank with a cached paid-to-date balance"""

    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    bank_name = Column(String(120), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    # Sum of payment_history.amount for this debt, maintained by the payment ledger
    paid_amount = Column(MONEY, nullable=False, default=0)
    due_date = Column(Date, nullable=False, index=True)
    frequency = Column(String(32), nullable=False, default="monthly")
    status = Column(String(16), nullable=False, default="pending")
    created_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="debts")
    payments = relationship(
        "Payment",
        back_populates="debt",
        cascade="all, delete-orphan",
    )


class Payment(Base):
    """Append-only payment applied toward a debt"""

    __tablename__ = "payment_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    debt_id = Column(Integer, ForeignKey("debts.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String(32), nullable=False)
    reference = Column(String(120), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("Debt", back_populates="payments")


class Bank(Base):
    """Static bank catalogue"""

    __tablename__ = "banks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    code = Column(String(16), nullable=False, unique=True)
    logo_url = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class Notification(Base):
    """User-facing notice, optionally about one debt"""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    debt_id = Column(Integer, ForeignKey("debts.id", ondelete="SET NULL"), nullable=True)
    type = Column(String(32), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="notifications")
