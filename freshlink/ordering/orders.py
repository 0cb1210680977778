# freshlink/ordering/orders.py
from __future__ import annotations

import logging
from datetime import date as date_cls
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from pydantic import ValidationError as ModelError

from .entities import UNITS, HotelRef, Order, PendingItem
from .nlp import display_item_name, parse_quantity

logger = logging.getLogger(__name__)


def new_order_id() -> str:
    return "order_" + uuid4().hex


def today_iso() -> str:
    return date_cls.today().isoformat()


def check_items(pending_items: Iterable[PendingItem]) -> Tuple[List[PendingItem], List[Dict[str, Any]]]:
    """
    Split form lines into valid ones (name trimmed, quantity parsed, unit known) and
    rejected ones with a reason each.
    """
    valid: List[PendingItem] = []
    rejected: List[Dict[str, Any]] = []

    for line in pending_items:
        name = display_item_name(line.item_name)
        if not name:
            rejected.append({"itemName": line.item_name, "quantity": str(line.quantity), "reason": "Item name is required"})
            continue

        qty = parse_quantity(line.quantity)
        if qty is None:
            rejected.append({"itemName": name, "quantity": str(line.quantity), "reason": "Quantity must be a positive number"})
            continue

        unit = (line.unit or "kg").strip().lower() or "kg"
        if unit not in UNITS:
            rejected.append({"itemName": name, "quantity": str(line.quantity), "reason": f"Unit must be one of {', '.join(UNITS)}"})
            continue

        valid.append(PendingItem(item_name=name, quantity=qty, unit=unit))

    return valid, rejected


def create_orders(
    pending_items: Iterable[PendingItem],
    hotel: HotelRef,
    date: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Order]:
    """
    One pending order per valid line. Lines that fail validation are skipped;
    if none pass, nothing is created.
    """
    valid, rejected = check_items(pending_items)
    if rejected:
        logger.info("create_orders: %d line(s) rejected for hotel %s", len(rejected), hotel.id)
    if not valid:
        return []

    day = date or today_iso()
    stamp = (now or datetime.now(timezone.utc)).isoformat()

    return [
        Order(
            id=new_order_id(),
            hotel_id=hotel.id,
            hotel_name=hotel.name,
            item_name=line.item_name,
            quantity=line.quantity,
            unit=line.unit,
            date=day,
            status="pending",
            dealer_note="",
            timestamp=stamp,
        )
        for line in valid
    ]


def orders_for_hotel(orders: Iterable[Order], hotel_id: str, date: str) -> List[Order]:
    return [o for o in orders if o.hotel_id == hotel_id and o.date == date]


def find_order(orders: Iterable[Order], order_id: str) -> Optional[Order]:
    for o in orders:
        if o.id == order_id:
            return o
    return None


def _is_iso_day(value: str) -> bool:
    try:
        return date_cls.fromisoformat(value).isoformat() == value
    except ValueError:
        return False


def load_orders(raw: Any) -> List[Order]:
    """Orders from a stored blob. Anything unreadable is skipped, never fatal."""
    if not isinstance(raw, list):
        return []

    out: List[Order] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            order = Order.model_validate(item)
        except ModelError as e:
            logger.warning("Skipping malformed stored order %r: %s", item.get("id"), e.error_count())
            continue
        if order.quantity <= 0 or not _is_iso_day(order.date):
            logger.warning("Skipping stored order %s with quantity %s and date %r", order.id, order.quantity, order.date)
            continue
        if order.id in seen:
            logger.warning("Skipping duplicate stored order id %s", order.id)
            continue
        seen.add(order.id)
        out.append(order)
    return out


def dump_orders(orders: Iterable[Order]) -> List[Dict[str, Any]]:
    return [o.to_json() for o in orders]
