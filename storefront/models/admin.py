"""Admin dashboard models"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator, model_validator

UserRole = Literal["customer", "admin"]


class AdminLoginRequest(BaseModel):
    """Login form, forwarded to the backend's /auth/login"""
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(BaseModel):
    """Backend login answer"""
    token: str


class AdminSession(BaseModel):
    """Who is logged in to the dashboard"""
    email: str


class AdminOrder(BaseModel):
    id: Union[str, int]
    email: Optional[str] = None
    total_cents: int = 0
    created_at: Optional[str] = None


class AdminUser(BaseModel):
    id: Optional[Union[str, int]] = None
    email: str
    role: str = "customer"
    created_at: Optional[str] = None


class NewUserRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    role: UserRole = "customer"


class UpdateUserRequest(BaseModel):
    role: UserRole


class AdminCoupon(BaseModel):
    code: str
    percent_off: Optional[int] = None
    amount_off: Optional[int] = None
    remaining_uses: int = 0


class NewCouponRequest(BaseModel):
    """
    Coupon created from the dashboard.

    Exactly one of percent_off and amount_off (minor units) is given.
    The code is stored upper case.
    """
    code: str = Field(..., min_length=1)
    percent_off: Optional[int] = Field(None, gt=0, le=100)
    amount_off: Optional[int] = Field(None, gt=0)
    remaining_uses: int = Field(100, ge=0)

    @field_validator("code")
    @classmethod
    def upper_case_code(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("code must not be blank")
        return value

    @model_validator(mode="after")
    def one_discount(self) -> "NewCouponRequest":
        if (self.percent_off is None) == (self.amount_off is None):
            raise ValueError("give either percent_off or amount_off")
        return self
