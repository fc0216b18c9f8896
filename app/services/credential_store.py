"""Persistence for user accounts, password checks and role assignments."""

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, UnknownRoleError, ValidationFailed
from app.core.security import (
    BCRYPT_ROUNDS,
    hash_password,
    password_policy_errors,
    verify_password,
)
from app.models import Role, User, UserRole

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists."


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """Repository for users and their roles on one identity-data session."""

    def __init__(self, session: Session, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self.session = session
        self._bcrypt_rounds = bcrypt_rounds

    def find_by_email(self, email: str) -> User | None:
        return (
            self.session.query(User)
            .filter(User.email == normalize_email(email))
            .first()
        )

    def create(
        self, username: str, email: str, password: str, roles: Iterable[str] = ()
    ) -> User:
        """
        Create an account with a hashed password and the given roles, in one commit.

        Raises ConflictError if the email is taken, ValidationFailed if the
        password breaks the policy and UnknownRoleError if a role is not seeded.
        Nothing is written in any of these cases.
        """
        if self.find_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        errors = password_policy_errors(password)
        if errors:
            raise ValidationFailed({"password": errors})
        role_rows = self._resolve_roles(roles)

        password_hash = hash_password(password, rounds=self._bcrypt_rounds)
        user = User(
            username=username.strip(),
            email=normalize_email(email),
            password_hash=password_hash,
        )
        self.session.add(user)
        try:
            self.session.flush()
            for role in role_rows:
                self.session.add(UserRole(user_id=user.id, role_id=role.id))
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email.
            self.session.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        self.session.refresh(user)
        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user

    def get_role(self, role_name: str) -> Role | None:
        return self.session.query(Role).filter(Role.name == role_name).first()

    def _resolve_roles(self, role_names: Iterable[str]) -> list[Role]:
        resolved: dict[str, Role] = {}
        for name in role_names:
            if name in resolved:
                continue
            role = self.get_role(name)
            if role is None:
                raise UnknownRoleError(name)
            resolved[name] = role
        return list(resolved.values())

    def assign_role(self, user: User, role_name: str) -> None:
        """Grant role_name to user. Granting a role the user already has is a no-op."""
        role = self.get_role(role_name)
        if role is None:
            raise UnknownRoleError(role_name)
        existing = (
            self.session.query(UserRole)
            .filter(UserRole.user_id == user.id, UserRole.role_id == role.id)
            .first()
        )
        if existing is not None:
            return
        self.session.add(UserRole(user_id=user.id, role_id=role.id))
        self.session.commit()

    def get_role_names(self, user: User) -> list[str]:
        rows = (
            self.session.query(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user.id)
            .order_by(Role.name)
            .all()
        )
        return [name for (name,) in rows]

    def verify_password(self, user: User, password: str) -> bool:
        return verify_password(password, user.password_hash)

    def count_users(self) -> int:
        return self.session.query(User).count()
