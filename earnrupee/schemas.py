from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, EmailStr

from earnrupee.models import AccountRole, AdType, PaymentMethod


class RequestModel(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


class RegisterRequest(RequestModel):
    username: str = Field(..., min_length=3, max_length=80)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(RequestModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class WithdrawalCreate(RequestModel):
    amount: Decimal = Field(..., max_digits=10, decimal_places=2)
    payment_method: PaymentMethod
    payment_details: str = ""


class WithdrawalStatusUpdate(RequestModel):
    status: str


class AdCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: AdType
    category: str = Field(..., min_length=1, max_length=100)
    duration: int = Field(..., gt=0)
    reward: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    network_code: str = Field(..., min_length=1)
    is_active: bool = True


class AdUpdate(RequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[AdType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    duration: Optional[int] = Field(None, gt=0)
    reward: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    network_code: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None


class AccountUpdate(RequestModel):
    """Operator edit of an account; balances are checked against the ledger invariant"""
    username: Optional[str] = Field(None, min_length=3, max_length=80)
    email: Optional[EmailStr] = None
    role: Optional[AccountRole] = None
    is_active: Optional[bool] = None
    bio: Optional[str] = None
    current_streak: Optional[int] = Field(None, ge=0)
    ads_watched_today: Optional[int] = Field(None, ge=0)
    total_earnings: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    available_balance: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class ProfileUpdate(RequestModel):
    username: Optional[str] = Field(None, min_length=3, max_length=80)
    bio: Optional[str] = None


class AccountCreate(RegisterRequest):
    """Operator-created account; may be created directly as an operator"""
    role: AccountRole = AccountRole.USER
