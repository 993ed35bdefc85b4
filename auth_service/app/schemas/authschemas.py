from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from shared.utils.enums import UserRole
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class LoginRequest(EmptyStringModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(EmptyStringModel):
    refresh_token: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: UUID
    tenant_id: Optional[UUID] = None
    email: str
    first_name: str
    last_name: Optional[str] = None
    full_name: str
    role: UserRole
    is_active: bool
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class AuthenticationResponse(TokenResponse):
    user: UserResponse


class LogoutResponse(BaseModel):
    message: str
