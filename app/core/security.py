"""Password hashing, password policy, JWT issuance/validation and role checks."""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 256
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
# bcrypt only reads this many bytes of the UTF-8 encoded password
PASSWORD_MAX_BYTES = 72

ROLES_CLAIM = "roles"
USERNAME_CLAIM = "name"


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt rejects or ignores anything past 72 bytes; the policy keeps new passwords within it.
    pw_bytes = plain_password.encode("utf-8")[:PASSWORD_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:PASSWORD_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def password_policy_errors(password: str) -> list[str]:
    """Return every policy rule the password breaks, in a stable order. Empty list means acceptable."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LEN:
        errors.append(f"Passwords must be at least {PASSWORD_MIN_LEN} characters.")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Passwords must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded.")
    if not any(c.isdigit() for c in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if all(c.isalnum() for c in password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    return errors


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a validated bearer token."""

    user_id: uuid.UUID
    username: str
    roles: tuple[str, ...]


def has_role(required_role: str, claims: TokenClaims) -> bool:
    """Capability check used by the access-control dependency."""
    return required_role in claims.roles


class TokenService:
    """Issues and validates HMAC-signed JWT bearer tokens."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM
        self._issuer = settings.JWT_ISSUER
        self._audience = settings.JWT_AUDIENCE
        self._lifetime = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    def issue(self, user_id: uuid.UUID, username: str, roles: Iterable[str]) -> str:
        """Create a token with sub, name, roles, iss, aud, iat and exp."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            USERNAME_CLAIM: username,
            ROLES_CLAIM: sorted(set(roles)),
            "iss": self._issuer,
            "aud": self._audience,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> TokenClaims:
        """
        Decode and validate a token (signature, issuer, audience, expiry).
        Raises jwt.PyJWTError on any failure, including a malformed payload.
        """
        payload = jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            issuer=self._issuer,
            audience=self._audience,
            options={"require": ["sub", "exp", "iat", "iss", "aud"]},
        )
        try:
            user_id = uuid.UUID(payload["sub"])
        except (TypeError, ValueError) as e:
            raise jwt.InvalidTokenError("Subject is not a user id") from e
        roles = payload.get(ROLES_CLAIM) or []
        if isinstance(roles, str):
            roles = [roles]
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise jwt.InvalidTokenError("Malformed roles claim")
        return TokenClaims(
            user_id=user_id,
            username=str(payload.get(USERNAME_CLAIM, "")),
            roles=tuple(roles),
        )
