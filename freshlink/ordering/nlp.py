# freshlink/ordering/nlp.py
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

# ----------------------------
# Regex helpers
# ----------------------------
_SPACES_RE = re.compile(r"\s+")

# Plain decimal numbers as typed into a form: "5", "2.5", ".5", "+3"
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


# ----------------------------
# Item names
# ----------------------------
def display_item_name(raw: str | None) -> str:
    """Trimmed item name with inner whitespace collapsed; case is kept."""
    return _SPACES_RE.sub(" ", (raw or "").strip())


def canonical_item_name(raw: str | None) -> str:
    """
    Key used everywhere items are matched: grouping, price lookup and
    status updates.
      "  Green  Chilli " -> "green chilli"
    """
    return display_item_name(raw).lower()


# ----------------------------
# Numbers
# ----------------------------
def parse_decimal(raw: Any) -> Optional[Decimal]:
    """
    Accepts form text or JSON numbers. Floats go through str() so 0.1 stays 0.1.
    Returns None for anything that is not a finite plain number.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    if isinstance(raw, (int, float)):
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            return None
        return value if value.is_finite() else None

    s = str(raw).strip()
    if not _NUMBER_RE.match(s):
        return None
    return Decimal(s)


def parse_quantity(raw: Any) -> Optional[Decimal]:
    """Strictly positive quantity, or None."""
    value = parse_decimal(raw)
    if value is None or value <= 0:
        return None
    return value


def parse_amount(raw: Any) -> Optional[Decimal]:
    """Non-negative price amount, or None."""
    value = parse_decimal(raw)
    if value is None or value < 0:
        return None
    return value
