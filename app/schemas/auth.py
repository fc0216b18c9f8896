"""Request/response schemas for auth endpoints."""

import uuid
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from app.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN, USERNAME_MIN_LEN


class LoginRequest(BaseModel):
    """Credentials for login. Any mismatch is reported as 401, so only presence is checked here."""

    email: str = Field(..., min_length=1, max_length=256, description="Registered email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RegisterRequest(BaseModel):
    """New account details. Password strength is checked by the credential store."""

    email: EmailStr = Field(..., description="Email, used as the login identifier")
    username: Annotated[
        str,
        StringConstraints(
            strip_whitespace=True, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN
        ),
    ] = Field(..., description="Display name")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class UserResponse(BaseModel):
    """Bearer token and username returned after register or login."""

    token: str = Field(..., description="JWT access token")
    username: str


class CurrentUser(BaseModel):
    """Authenticated caller, built from validated token claims."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    roles: list[str]
