# File: app/schemas/user.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)


class UserCreate(UserBase):
    email: EmailStr = Field(max_length=255)
    username: str = Field(min_length=1, max_length=255)
    password: str
    password_confirmation: str


class UserUpdate(UserBase):
    """Partial update; only fields present in the request body are applied."""

    email: Optional[EmailStr] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, min_length=1, max_length=255)
    password: Optional[str] = None
    password_confirmation: Optional[str] = None
    is_active: Optional[bool] = None
    is_staff: Optional[bool] = None


class UserRead(UserBase):
    id: int
    email: EmailStr
    username: str
    slug: str
    is_active: bool
    is_staff: bool
    email_verified_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class UserSummary(BaseModel):
    id: int
    username: str
    email: EmailStr

    class Config:
        from_attributes = True


class UserCreatedResponse(BaseModel):
    success: str
    user: UserSummary
