# freshlink/auth.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings

pwd = CryptContext(schemes=["argon2"], deprecated="auto")

ROLES = ("hotel", "dealer")


def hash_password(p: str) -> str:
    return pwd.hash(p)


def verify_password(p: str, h: str) -> bool:
    try:
        return pwd.verify(p, h)
    except ValueError:
        # unknown / corrupt hash format
        return False


def create_token(user_id: str, role: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {"sub": str(user_id), "role": role, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """{"sub": ..., "role": ...} for a valid token, else None."""
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except JWTError:
        return None
    sub = str(data.get("sub") or "")
    role = data.get("role")
    if not sub or role not in ROLES:
        return None
    return {"sub": sub, "role": role}
