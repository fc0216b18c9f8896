"""Registration, login and the auth dependencies (get_current_user, require_role)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.context import AppContext, get_context
from app.core.database import get_identity_db
from app.core.security import TokenClaims, has_role
from app.models import RoleName
from app.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, UserResponse
from app.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT. Raises 401 if missing, malformed, or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        return ctx.token_service.validate(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")


def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
) -> CurrentUser:
    """Dependency: the authenticated caller, taken from the token alone (no store lookup)."""
    return CurrentUser(id=claims.user_id, username=claims.username, roles=list(claims.roles))


def require_role(role: RoleName) -> Callable[..., CurrentUser]:
    """Build a dependency that admits only callers whose token carries role. Raises 403 otherwise."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_token_claims)],
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not has_role(role.value, claims):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role.value} role required",
            )
        return current_user

    return dependency


def _credential_store(db: Session, ctx: AppContext) -> CredentialStore:
    return CredentialStore(db, bcrypt_rounds=ctx.settings.BCRYPT_ROUNDS)


@router.post("/register", response_model=UserResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_identity_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> UserResponse:
    """
    Create an account with the User role and return a bearer token for it.
    Duplicate email, a weak password or an unseeded User role is a 400, and nothing is saved.
    """
    store = _credential_store(db, ctx)
    user = store.create(body.username, body.email, body.password, roles=[RoleName.USER.value])
    roles = store.get_role_names(user)
    token = ctx.token_service.issue(user.id, user.username, roles)
    return UserResponse(token=token, username=user.username)


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_identity_db)],
    ctx: Annotated[AppContext, Depends(get_context)],
) -> UserResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    store = _credential_store(db, ctx)
    user = store.find_by_email(body.email)
    if user is None or not store.verify_password(user, body.password):
        logger.info("Login failed for email=%s", body.email)
        raise _unauthorized("Invalid email or password.")
    token = ctx.token_service.issue(user.id, user.username, store.get_role_names(user))
    return UserResponse(token=token, username=user.username)
