"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, UserResponse
from app.schemas.health import HealthResponse
from app.schemas.todo import TodoCreate, TodoRead, TodoUpdate

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "TodoCreate",
    "TodoRead",
    "TodoUpdate",
    "UserResponse",
]
