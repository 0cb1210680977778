# freshlink/models.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    # id handed to the ordering core as hotelId ("h1", "d2", ...)
    public_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, nullable=False)  # hotel | dealer
    password_hash = Column(String, nullable=False)


class Blob(Base):
    """Whole-value JSON storage: one row per key (hotelOrders, itemPrices)."""

    __tablename__ = "blobs"
    key = Column(String, primary_key=True)
    value_json = Column(Text, nullable=False, default="null")
    updated_at = Column(DateTime, default=datetime.utcnow)
