# freshlink/ordering/prices.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from ..errors import ValidationError
from .entities import PriceEntry, PriceTable
from .nlp import canonical_item_name, parse_amount


def set_price(table: PriceTable, item_name: str, amount: Any, unit: str = "kg") -> PriceTable:
    """Upsert a price under the item's canonical key. Returns a new table."""
    key = canonical_item_name(item_name)
    if not key:
        raise ValidationError("Item name is required")

    value = parse_amount(amount)
    if value is None:
        raise ValidationError(f"Invalid price for {item_name!r}: {amount!r}")

    out = dict(table)
    out[key] = PriceEntry(amount=value, unit=(unit or "kg").strip() or "kg")
    return out


def delete_price(table: PriceTable, item_name: str) -> PriceTable:
    key = canonical_item_name(item_name)
    if key not in table:
        return table
    out = dict(table)
    del out[key]
    return out


def price_for(table: PriceTable, item_name: str, default_unit: str) -> PriceEntry:
    """Missing prices are a normal state: zero amount in the caller's unit."""
    found = table.get(canonical_item_name(item_name))
    if found is not None:
        return found
    return PriceEntry(amount=Decimal("0"), unit=default_unit)


def load_price_table(raw: Any) -> PriceTable:
    """
    Build a table from a stored blob. Non-dict blobs give an empty table;
    bad entries are dropped so one typo cannot hide the whole list.
    """
    if not isinstance(raw, dict):
        return {}
    out: Dict[str, PriceEntry] = {}
    for k, v in raw.items():
        key = canonical_item_name(str(k))
        if not key or not isinstance(v, dict):
            continue
        amount = parse_amount(v.get("amount"))
        if amount is None:
            continue
        out[key] = PriceEntry(amount=amount, unit=str(v.get("unit") or "kg"))
    return out


def dump_price_table(table: PriceTable) -> Dict[str, Any]:
    return {k: v.to_json() for k, v in table.items()}
