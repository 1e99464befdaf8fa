# File: app/schemas/auth.py

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class LoginRequest(BaseModel):
    email_or_username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def accept_email_or_username_alias(cls, data: Any) -> Any:
        # Older clients send {"email": ...} or {"username": ...}
        if isinstance(data, dict) and not data.get("email_or_username"):
            alias = data.get("email") or data.get("username")
            if alias:
                data = {**data, "email_or_username": alias}
        return data


class TokenResponse(BaseModel):
    success: str = "Login successful."
    token: str
    token_type: str = "Bearer"
    expires_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    success: str
