# freshlink/ordering/reconcile.py
from __future__ import annotations

from typing import List, Sequence

from .entities import Order, OrderStatus
from .nlp import canonical_item_name


def matches_item(order: Order, item_name: str, date: str) -> bool:
    return order.date == date and canonical_item_name(order.item_name) == canonical_item_name(item_name)


def update_status(
    orders: Sequence[Order],
    item_name: str,
    date: str,
    status: OrderStatus,
    note: str = "",
) -> List[Order]:
    """
    Set status and dealer note on every order of `item_name` for `date`.
    Item names match case-insensitively, the same way aggregate() groups them.
    Unmatched orders are passed through as the same objects; the input
    sequence is left untouched.
    """
    out: List[Order] = []
    for o in orders:
        if matches_item(o, item_name, date) and (o.status != status or o.dealer_note != note):
            o = o.model_copy(update={"status": status, "dealer_note": note})
        out.append(o)
    return out


def count_matching(orders: Sequence[Order], item_name: str, date: str) -> int:
    return sum(1 for o in orders if matches_item(o, item_name, date))


def remove_order(orders: Sequence[Order], order_id: str) -> List[Order]:
    """Drop the order with this id. An unknown id is a no-op."""
    out: List[Order] = []
    removed = False
    for o in orders:
        if not removed and o.id == order_id:
            removed = True
            continue
        out.append(o)
    return out
