# decorbook/api/schemas.py
# Request and response schemas: Pydantic models for validation.

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email")
        return v


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    @classmethod
    def role_value(cls, v):
        return getattr(v, "value", v)


class PackageItemIn(BaseModel):
    name: str = Field(min_length=1)
    price: int = Field(ge=0)


class PackageItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: int


class PackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: int
    package_items: list[PackageItemResponse] = []


class PackageCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: int = Field(ge=0)
    packageItems: list[PackageItemIn] = []


class PackageUpdate(BaseModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    packageItems: list[PackageItemIn] = []


class OrderCreate(BaseModel):
    packageId: int
    scheduleDate: str = Field(min_length=1)
    customerName: str = Field(min_length=1)
    customerEmail: str = Field(min_length=1)
    customerPhone: str = Field(min_length=1)
    customerAddress: str = Field(min_length=1)


class PackageSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: int
    package_id: int
    schedule_date: date
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    total_amount: int
    dp_amount: int
    final_amount: int
    status: str
    dp_status: str
    final_status: str
    dp_transaction_id: Optional[str] = None
    final_transaction_id: Optional[str] = None
    transaction_status: Optional[str] = None
    fraud_status: Optional[str] = None
    payment_type: Optional[str] = None
    created_at: Optional[datetime] = None
    dp_paid_at: Optional[datetime] = None
    final_paid_at: Optional[datetime] = None

    @field_validator("status", "dp_status", "final_status", mode="before")
    @classmethod
    def enum_value(cls, v):
        return getattr(v, "value", v)


class OrderListItem(OrderResponse):
    package: PackageSummary


class OrderDetail(OrderResponse):
    package: PackageResponse


class ScheduleCheck(BaseModel):
    date: str = Field(min_length=1)


class PaymentRequest(BaseModel):
    orderId: str = Field(min_length=1)
