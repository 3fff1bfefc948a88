from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional


class SignupRequest(BaseModel):
    fullname: str
    email: EmailStr
    password: str

    model_config = ConfigDict(title="SignupRequest")

    @field_validator("fullname", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("All fields are required")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    model_config = ConfigDict(title="LoginRequest")


class CheckEmailRequest(BaseModel):
    email: EmailStr


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str
    new_password: str = Field(alias="newPassword")

    model_config = ConfigDict(populate_by_name=True, title="ResetPasswordRequest")


class UserOut(BaseModel):
    id: int
    fullname: str
    email: str
    role: str
    profile_picture: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, title="UserOut")


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: Optional[UserOut] = None
    access_token: Optional[str] = None
    token_type: Optional[str] = None


class GoogleProfile(BaseModel):
    """Subset of the provider's userinfo payload we rely on"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
