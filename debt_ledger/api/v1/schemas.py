"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Fixed-point internally, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register"""

    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login"""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    avatar: str


class AuthResponse(BaseModel):
    """Response for register and login"""

    token: str
    user: UserSchema


class DebtCreateRequest(BaseModel):
    """Request body for POST /debts"""

    bank_name: str = Field(..., min_length=1, max_length=120)
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    due_date: date
    frequency: Optional[str] = Field(None, max_length=32)


class DebtUpdateRequest(BaseModel):
    """Request body for PUT /debts/{id}; omitted fields keep their value"""

    bank_name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    due_date: Optional[date] = None
    frequency: Optional[str] = Field(None, max_length=32)


class DebtResponse(BaseModel):
    """Debt with read-time fields (remaining_amount, urgency)"""

    id: int
    bank_name: str
    description: str
    amount: Money
    paid_amount: Money
    remaining_amount: Money
    due_date: date
    frequency: str
    status: str
    created_date: Optional[datetime] = None
    urgency: str


class DebtListResponse(BaseModel):
    debts: List[DebtResponse]


class PaymentRequest(BaseModel):
    """Request body for POST /payments"""

    debt_id: int
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    payment_date: date
    payment_method: Optional[str] = Field(None, max_length=32)
    reference: Optional[str] = Field(None, max_length=120)
    notes: Optional[str] = None


class PaymentSchema(BaseModel):
    """Single row of payment history"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    debt_id: int
    amount: Money
    payment_date: date
    payment_method: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class PaymentResponse(PaymentSchema):
    """Response for POST /payments: the new payment plus the debt's new state"""

    paid_amount: Money
    status: str


class PaymentHistoryResponse(BaseModel):
    payments: List[PaymentSchema]


class StatisticsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_debts: int
    total_amount: Money
    pending_count: int
    pending_amount: Money
    overdue_count: int
    overdue_amount: Money
    paid_count: int
    paid_amount: Money


class StatisticsResponse(BaseModel):
    statistics: StatisticsSchema


class NotificationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    debt_id: Optional[int] = None
    type: str
    title: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationListResponse(BaseModel):
    notifications: List[NotificationSchema]


class MarkReadResponse(BaseModel):
    success: bool = True


class BankSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    logo_url: Optional[str] = None


class BankListResponse(BaseModel):
    banks: List[BankSchema]
