# freshlink/ordering/aggregate.py
"""
Read-side projections over the order list.

Everything here is a pure function of (orders, date, prices): nothing is
cached and no input is mutated, so a view can be recomputed on every request.
"""
from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Sequence

from .entities import ORDER_STATUSES, AggregatedItem, HotelContribution, Order, PriceTable
from .nlp import canonical_item_name
from .orders import orders_for_hotel
from .prices import price_for

_ZERO = Decimal("0")
_CENTS = Decimal("0.01")


def aggregate(orders: Iterable[Order], date: str, prices: PriceTable) -> List[AggregatedItem]:
    """
    Per-item dealer summary for one date.

    Groups by canonical item name in first-seen order. The display name and
    unit come from the first order of each group; every order contributes its
    own hotel entry, even when one hotel ordered the same item twice.
    """
    groups: Dict[str, Dict[str, Any]] = {}

    for o in orders:
        if o.date != date:
            continue
        key = canonical_item_name(o.item_name)
        g = groups.get(key)
        if g is None:
            g = {"name": o.item_name, "unit": o.unit, "total": _ZERO, "hotels": []}
            groups[key] = g
        g["total"] += o.quantity
        g["hotels"].append(
            HotelContribution(
                hotel_id=o.hotel_id,
                hotel_name=o.hotel_name,
                quantity=o.quantity,
                status=o.status,
                order_id=o.id,
            )
        )

    out: List[AggregatedItem] = []
    for key, g in groups.items():
        price = price_for(prices, key, g["unit"])
        out.append(
            AggregatedItem(
                item_name=g["name"],
                key=key,
                total_quantity=g["total"],
                unit=g["unit"],
                hotels=g["hotels"],
                price=price,
                value=g["total"] * price.amount,
            )
        )
    return out


# ----------------------------
# Derived metrics
# ----------------------------
def total_value(items: Iterable[AggregatedItem]) -> Decimal:
    return sum((it.total_quantity * it.price.amount for it in items), _ZERO)


def pending_item_count(items: Iterable[AggregatedItem]) -> int:
    """Dealer view: distinct items with at least one pending order."""
    return sum(1 for it in items if any(h.status == "pending" for h in it.hotels))


def unique_hotel_count(items: Iterable[AggregatedItem]) -> int:
    return len({h.hotel_id for it in items for h in it.hotels})


def status_counts(orders: Iterable[Order]) -> Dict[str, int]:
    """Hotel view: individual orders per status (all statuses present, zero-filled)."""
    counts = Counter(o.status for o in orders)
    return {s: counts.get(s, 0) for s in ORDER_STATUSES}


def filter_items(items: Sequence[AggregatedItem], query: str) -> List[AggregatedItem]:
    q = (query or "").strip().lower()
    if not q:
        return list(items)
    return [it for it in items if q in it.item_name.lower()]


def format_money(value: Decimal, symbol: str = "") -> str:
    return f"{symbol}{value.quantize(_CENTS, rounding=ROUND_HALF_UP)}"


def by_hotel(orders: Iterable[Order], date: str) -> Dict[str, Dict[str, Any]]:
    """
    Per-hotel breakdown for the date, keyed by hotel name:
      {"Taj Punjabi": {"hotelId": "h2", "totalItems": 2,
                       "items": [{"itemName": "Tomato", "totalQuantity": "8", "unit": "kg"}, ...]}}
    Lines of the same item from one hotel are summed.
    """
    hotels: Dict[str, Dict[str, Any]] = {}

    for o in orders:
        if o.date != date:
            continue
        h = hotels.setdefault(o.hotel_name, {"hotelId": o.hotel_id, "_items": {}})
        key = canonical_item_name(o.item_name)
        line = h["_items"].get(key)
        if line is None:
            h["_items"][key] = {"itemName": o.item_name, "totalQuantity": o.quantity, "unit": o.unit}
        else:
            line["totalQuantity"] += o.quantity

    out: Dict[str, Dict[str, Any]] = {}
    for name, h in hotels.items():
        items = [
            {"itemName": x["itemName"], "totalQuantity": str(x["totalQuantity"]), "unit": x["unit"]}
            for x in h["_items"].values()
        ]
        out[name] = {"hotelId": h["hotelId"], "totalItems": len(items), "items": items}
    return out


# ----------------------------
# Screens
# ----------------------------
def dealer_dashboard(
    orders: Sequence[Order],
    date: str,
    prices: PriceTable,
    query: str = "",
    currency_symbol: str = "",
) -> Dict[str, Any]:
    all_items = aggregate(orders, date, prices)
    shown = filter_items(all_items, query)
    value = total_value(shown)

    return {
        "date": date,
        "summary": {
            "totalItems": len(all_items),
            "totalHotels": unique_hotel_count(all_items),
            "totalPendingItems": pending_item_count(all_items),
            "totalValue": str(value),
            "totalValueDisplay": format_money(value, currency_symbol),
            "byItem": {it.item_name: str(it.total_quantity) for it in all_items},
        },
        "items": [it.to_json() for it in shown],
        "byHotel": by_hotel(orders, date),
    }


def hotel_summary(
    orders: Sequence[Order],
    hotel_id: str,
    date: str,
    prices: PriceTable,
    currency_symbol: str = "",
) -> Dict[str, Any]:
    mine = orders_for_hotel(orders, hotel_id, date)

    lines: List[Dict[str, Any]] = []
    total = _ZERO
    for o in mine:
        unit_price = price_for(prices, o.item_name, o.unit).amount
        line_total = o.quantity * unit_price
        total += line_total
        row = o.to_json()
        row["unitPrice"] = str(unit_price)
        row["lineTotal"] = str(line_total)
        lines.append(row)

    counts = status_counts(mine)
    return {
        "date": date,
        "orders": lines,
        "counts": {"total": len(mine), **counts},
        "estimatedTotal": str(total),
        "estimatedTotalDisplay": format_money(total, currency_symbol),
    }
