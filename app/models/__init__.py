"""SQLAlchemy ORM models."""

from app.models.base import Base, IdentityBase
from app.models.role import Role, RoleClaim, RoleName, UserRole
from app.models.todo import TodoItem
from app.models.user import User, UserClaim, UserLogin, UserToken

__all__ = [
    "Base",
    "IdentityBase",
    "Role",
    "RoleClaim",
    "RoleName",
    "TodoItem",
    "User",
    "UserClaim",
    "UserLogin",
    "UserRole",
    "UserToken",
]
