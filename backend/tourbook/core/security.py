from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from tourbook.core.errors import AuthenticationError
from tourbook.models.domain import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bool(pwd_context.verify(password, password_hash))
    except ValueError:
        # stored value is not a recognizable hash
        return False


def create_access_token(subject: str, role: Role, secret: str, minutes: int = 60) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str) -> Principal:
    try:
        payload: Dict[str, Any] = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    subject = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise AuthenticationError("Invalid token payload")
    if not subject:
        raise AuthenticationError("Invalid token payload")
    return Principal(id=str(subject), role=role)
