from decimal import Decimal

import pytest

from freshlink.errors import ValidationError
from freshlink.ordering.entities import PriceEntry
from freshlink.ordering.prices import delete_price, dump_price_table, load_price_table, price_for, set_price


def test_set_price_upserts_under_lowercase_key() -> None:
    table = set_price({}, "Tomato", "20", "kg")
    table = set_price(table, "TOMATO", "22.5", "kg")

    assert table == {"tomato": PriceEntry(amount=Decimal("22.5"), unit="kg")}


@pytest.mark.parametrize("name,amount", [("", "10"), ("  ", "10"), ("Tomato", "abc"), ("Tomato", "-1"), ("Tomato", "")])
def test_set_price_rejects_bad_input_without_touching_the_table(name, amount) -> None:
    table = {"onion": PriceEntry(amount=Decimal("30"), unit="kg")}
    with pytest.raises(ValidationError):
        set_price(table, name, amount)
    assert table == {"onion": PriceEntry(amount=Decimal("30"), unit="kg")}


def test_delete_price() -> None:
    table = set_price({}, "Onion", 30)
    assert delete_price(table, "ONION") == {}
    assert delete_price(table, "garlic") is table


def test_missing_price_is_zero_in_the_callers_unit() -> None:
    assert price_for({}, "Egg", "dozen") == PriceEntry(amount=Decimal("0"), unit="dozen")


def test_price_table_blob_drops_bad_entries() -> None:
    raw = {
        "Tomato": {"amount": 20, "unit": "kg"},
        "onion": {"amount": "-4", "unit": "kg"},
        "garlic": "cheap",
        "egg": {"amount": "6.5"},
    }
    table = load_price_table(raw)

    assert table == {
        "tomato": PriceEntry(amount=Decimal("20"), unit="kg"),
        "egg": PriceEntry(amount=Decimal("6.5"), unit="kg"),
    }
    assert dump_price_table(table) == {
        "tomato": {"amount": "20", "unit": "kg"},
        "egg": {"amount": "6.5", "unit": "kg"},
    }
    assert load_price_table(["not", "a", "dict"]) == {}
