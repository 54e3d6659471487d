from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.core.config import get_settings

JWT_ALGORITHM = "HS256"

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"
ROLE_SUPERADMIN = "superadmin"
KNOWN_ROLES = frozenset({ROLE_STUDENT, ROLE_ADMIN, ROLE_SUPERADMIN})


class AuthError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class Identity:
    subject_id: int
    role: str
    email: str

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT

    @property
    def is_superadmin(self) -> bool:
        return self.role == ROLE_SUPERADMIN


def hash_password(password: str, *, rounds: int | None = None) -> str:
    cost = rounds if rounds is not None else get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=cost)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(
    *,
    subject_id: int,
    role: str,
    email: str,
    now_utc: datetime | None = None,
) -> str:
    settings = get_settings()
    issued_at = now_utc or datetime.now(timezone.utc)
    payload = {
        "sub": str(subject_id),
        "role": role,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.jwt_ttl_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(
            token,
            get_settings().jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise AuthError("token invalid") from exc

    role = payload.get("role")
    if role not in KNOWN_ROLES:
        raise AuthError("token role invalid")
    try:
        subject_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise AuthError("token subject invalid") from exc

    return Identity(subject_id=subject_id, role=role, email=str(payload.get("email") or ""))
