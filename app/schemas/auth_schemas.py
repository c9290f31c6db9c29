from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, constr, field_validator

from app.models.user_role_models import AppRole


def _clean_full_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = " ".join(value.split())
    return cleaned or None


class SignupSchema(BaseModel):
    email: EmailStr
    password: constr(min_length=8, max_length=128)
    full_name: Optional[str] = Field(None, max_length=100)

    @field_validator("full_name")
    def validate_full_name(cls, value):
        return _clean_full_name(value)


class LoginSchema(BaseModel):
    email: EmailStr
    password: constr(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdateSchema(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)

    @field_validator("full_name")
    def validate_full_name(cls, value):
        return _clean_full_name(value)


class RolesResponse(BaseModel):
    roles: List[AppRole]


class PasswordUpdateIn(BaseModel):
    current_password: str = Field(..., min_length=8, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)
    confirm_new_password: str = Field(..., min_length=8, max_length=128)
