# freshlink/accounts.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from .auth import ROLES, hash_password, verify_password
from .models import User

logger = logging.getLogger(__name__)

# Demo accounts so a fresh install can log in straight away.
DEMO_USERS: List[Dict[str, str]] = [
    {"id": "h1", "name": "Grand Hotel Delhi", "email": "grand@hotel.com", "password": "hotel123", "role": "hotel"},
    {"id": "h2", "name": "Taj Punjabi", "email": "taj@hotel.com", "password": "taj123", "role": "hotel"},
    {"id": "h3", "name": "Mumbai Palace", "email": "palace@hotel.com", "password": "palace123", "role": "hotel"},
    {"id": "d1", "name": "Fresh Vegetables Co.", "email": "fresh@dealer.com", "password": "dealer123", "role": "dealer"},
    {"id": "d2", "name": "Premium Produce", "email": "premium@dealer.com", "password": "premium123", "role": "dealer"},
]


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_user(db: Session, public_id: str, name: str, email: str, password: str, role: str) -> User:
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}, expected one of {ROLES}")
    email = _normalize_email(email)
    if db.query(User).filter(User.email == email).first():
        raise ValueError(f"Email already exists: {email}")
    if db.query(User).filter(User.public_id == public_id).first():
        raise ValueError(f"User id already exists: {public_id}")

    u = User(
        public_id=public_id,
        name=name,
        email=email,
        role=role,
        password_hash=hash_password(password),
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def authenticate(db: Session, email: str, password: str, role: Optional[str] = None) -> Optional[User]:
    """The matching user, or None on unknown email, bad password or wrong role."""
    u = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not u or not verify_password(password, u.password_hash):
        return None
    if role and u.role != role:
        return None
    return u


def get_user(db: Session, public_id: str) -> Optional[User]:
    return db.query(User).filter(User.public_id == public_id).first()


def seed_demo_users(db: Session) -> int:
    """Insert the demo accounts when the user table is empty."""
    if db.query(User).first():
        return 0
    for d in DEMO_USERS:
        create_user(db, d["id"], d["name"], d["email"], d["password"], d["role"])
    logger.info("Seeded %d demo user(s)", len(DEMO_USERS))
    return len(DEMO_USERS)


def public_user(u: User) -> Dict[str, Any]:
    return {"id": u.public_id, "name": u.name, "email": u.email}
