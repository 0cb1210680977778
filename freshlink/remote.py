# freshlink/remote.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from .errors import RemoteError
from .ordering.entities import HotelRef, PendingItem

logger = logging.getLogger(__name__)


def submission_payload(hotel: HotelRef, items: Sequence[PendingItem]) -> Dict[str, Any]:
    return {
        "hotelId": hotel.id,
        "hotelName": hotel.name,
        "items": [
            {"itemName": it.item_name, "quantity": str(it.quantity), "unit": it.unit}
            for it in items
        ],
    }


def submit_orders(
    url: str,
    hotel: HotelRef,
    items: Sequence[PendingItem],
    timeout: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> Any:
    """
    POST a validated batch to the remote order service. Any transport error,
    timeout or non-2xx answer becomes RemoteError; there is no retry.
    """
    payload = submission_payload(hotel, items)
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        resp = http.post(url, json=payload)
    except httpx.HTTPError as e:
        logger.error("Order submission to %s failed: %s", url, e)
        raise RemoteError("Order submission failed") from e
    finally:
        if owns_client:
            http.close()

    if resp.status_code >= 400:
        logger.error("Order submission to %s rejected with status %s", url, resp.status_code)
        raise RemoteError(f"Order submission failed with status {resp.status_code}")

    try:
        return resp.json()
    except ValueError:
        return None
