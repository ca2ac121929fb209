"""Authentication schemas."""
from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from festgate.core.roles import Role
from festgate.core.sanitization import normalize_email, sanitize_name, sanitize_text, validate_phone
from festgate.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = None
    college: Optional[str] = Field(None, max_length=200)

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        return sanitize_name(v)

    @field_validator('email')
    @classmethod
    def normalize_email_field(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator('phone')
    @classmethod
    def validate_phone_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone(v)

    @field_validator('college')
    @classmethod
    def sanitize_college_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_text(v, max_length=200) or None


class LoginRequest(CamelModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    college: Optional[str] = None
    role: Role
    is_active: bool
    created_at: datetime


class UserData(CamelModel):
    user: UserResponse


class AuthResponse(CamelModel):
    """Login/registration/me envelope: {success, data: {user}}."""
    success: bool = True
    data: UserData
