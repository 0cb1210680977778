# freshlink/ordering/blob_store.py
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import PersistenceError
from ..models import Blob

logger = logging.getLogger(__name__)

ORDERS_KEY = "hotelOrders"
PRICES_KEY = "itemPrices"


def _safe_json(raw: str | None, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except Exception:
        return default


class BlobStore:
    """Reads and writes whole JSON values keyed by name."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def read(self, key: str, default: Any) -> Any:
        """Missing, corrupt or unreadable values come back as `default`."""
        try:
            with self._session_factory() as db:
                row = db.get(Blob, key)
                raw = row.value_json if row else None
        except SQLAlchemyError as e:
            logger.warning("Blob %s unreadable, using default: %s", key, e)
            return default

        value = _safe_json(raw, default)
        if raw and value is default:
            logger.warning("Blob %s holds invalid JSON, using default", key)
        return value

    def write(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot serialize blob {key}: {e}") from e

        try:
            with self._session_factory() as db:
                row = db.get(Blob, key)
                if row is None:
                    row = Blob(key=key)
                    db.add(row)
                row.value_json = payload
                row.updated_at = datetime.utcnow()
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot write blob {key}: {e}") from e
