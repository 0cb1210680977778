from decimal import Decimal

from freshlink.ordering.aggregate import (
    aggregate,
    by_hotel,
    dealer_dashboard,
    filter_items,
    format_money,
    hotel_summary,
    pending_item_count,
    status_counts,
    total_value,
    unique_hotel_count,
)
from freshlink.ordering.entities import Order, PriceEntry
from freshlink.ordering.nlp import canonical_item_name
from freshlink.ordering.prices import delete_price, set_price

DAY = "2024-01-01"


def _order(oid, item, qty, hotel, date=DAY, status="pending", unit="kg"):
    return Order(
        id=oid,
        hotel_id=hotel,
        hotel_name=f"Hotel {hotel}",
        item_name=item,
        quantity=Decimal(str(qty)),
        unit=unit,
        date=date,
        status=status,
        timestamp="2024-01-01T06:00:00+00:00",
    )


def _tomatoes():
    return [
        _order("o1", "Tomato", 5, "H1"),
        _order("o2", "tomato", 3, "H2"),
    ]


def test_tomatoes_from_two_hotels_collapse_into_one_item() -> None:
    prices = {"tomato": PriceEntry(amount=Decimal("20"), unit="kg")}
    items = aggregate(_tomatoes(), DAY, prices)

    assert len(items) == 1
    item = items[0]
    assert item.item_name == "Tomato"
    assert item.key == "tomato"
    assert item.total_quantity == Decimal("8")
    assert [(h.hotel_id, h.quantity) for h in item.hotels] == [("H1", Decimal("5")), ("H2", Decimal("3"))]
    assert [h.order_id for h in item.hotels] == ["o1", "o2"]
    assert format_money(total_value(items)) == "160.00"


def test_deleting_a_price_zeroes_value_but_keeps_the_item() -> None:
    prices = set_price({}, "Tomato", "20", "kg")
    prices = delete_price(prices, "TOMATO")
    items = aggregate(_tomatoes(), DAY, prices)

    assert len(items) == 1
    assert items[0].total_quantity == Decimal("8")
    assert items[0].price == PriceEntry(amount=Decimal("0"), unit="kg")
    assert format_money(total_value(items)) == "0.00"


def test_empty_date_gives_empty_list_and_zero_value() -> None:
    items = aggregate(_tomatoes(), "2030-05-05", {})
    assert items == []
    assert format_money(total_value(items)) == "0.00"
    assert pending_item_count(items) == 0
    assert unique_hotel_count(items) == 0


def test_groups_follow_first_seen_order_and_same_hotel_lines_stay_separate() -> None:
    orders = [
        _order("o1", "Potato", 2, "H1"),
        _order("o2", "Apple", 1, "H2"),
        _order("o3", "potato", 4, "H1"),
        _order("o4", "Apple", 1, "H1", date="2024-01-02"),
    ]
    items = aggregate(orders, DAY, {})

    assert [it.item_name for it in items] == ["Potato", "Apple"]
    assert [h.order_id for h in items[0].hotels] == ["o1", "o3"]
    assert items[0].total_quantity == Decimal("6")
    assert unique_hotel_count(items) == 2


def test_every_order_of_the_day_lands_in_exactly_one_group() -> None:
    orders = [
        _order("o1", "Onion", "1.5", "H1"),
        _order("o2", "ONION", "0.5", "H2"),
        _order("o3", "Carrot", 2, "H3"),
        _order("o4", "carrot ", 1, "H1"),
        _order("o5", "Carrot", 9, "H2", date="2023-12-31"),
    ]
    items = aggregate(orders, DAY, {})
    todays = [o for o in orders if o.date == DAY]

    assert {it.key for it in items} == {canonical_item_name(o.item_name) for o in todays}
    assert sum(len(it.hotels) for it in items) == len(todays)


def test_value_matches_per_order_sum() -> None:
    orders = [
        _order("o1", "Onion", "1.5", "H1"),
        _order("o2", "onion", "0.1", "H2"),
        _order("o3", "Garlic", "0.2", "H3"),
        _order("o4", "Ginger", 3, "H1"),
        _order("o5", "Onion", 7, "H2", date="2024-01-02"),
    ]
    prices = set_price({}, "onion", "32.5")
    prices = set_price(prices, "garlic", "0.3")

    items = aggregate(orders, DAY, prices)
    per_order = sum(
        (o.quantity * prices[canonical_item_name(o.item_name)].amount
         for o in orders if o.date == DAY and canonical_item_name(o.item_name) in prices),
        Decimal("0"),
    )
    assert total_value(items) == per_order
    assert total_value(items) == Decimal("52.060")


def test_decimal_quantities_sum_exactly() -> None:
    orders = [_order(f"o{i}", "Chilli", "0.1", "H1") for i in range(3)]
    assert aggregate(orders, DAY, {})[0].total_quantity == Decimal("0.3")


def test_aggregate_is_pure_and_repeatable() -> None:
    orders = _tomatoes()
    before = list(orders)
    prices = {"tomato": PriceEntry(amount=Decimal("20"), unit="kg")}

    first = aggregate(orders, DAY, prices)
    second = aggregate(orders, DAY, prices)

    assert first == second
    assert orders == before
    assert prices == {"tomato": PriceEntry(amount=Decimal("20"), unit="kg")}


def test_display_unit_comes_from_first_order() -> None:
    orders = [
        _order("o1", "Egg", 2, "H1", unit="dozen"),
        _order("o2", "egg", 10, "H2", unit="piece"),
    ]
    items = aggregate(orders, DAY, {})
    assert items[0].unit == "dozen"
    assert items[0].price.unit == "dozen"


def test_pending_items_count_distinct_items_not_orders() -> None:
    orders = [
        _order("o1", "Tomato", 5, "H1"),
        _order("o2", "Tomato", 3, "H2"),
        _order("o3", "Potato", 3, "H2", status="completed"),
        _order("o4", "Onion", 3, "H3", status="partial"),
        _order("o5", "Onion", 1, "H1"),
    ]
    items = aggregate(orders, DAY, {})
    assert pending_item_count(items) == 2
    assert status_counts(orders) == {"pending": 3, "partial": 1, "completed": 1, "unavailable": 0}


def test_filter_items_is_case_insensitive_substring() -> None:
    items = aggregate(
        [_order("o1", "Green Chilli", 1, "H1"), _order("o2", "Tomato", 1, "H1")],
        DAY,
        {},
    )
    assert [it.item_name for it in filter_items(items, "CHIL")] == ["Green Chilli"]
    assert len(filter_items(items, "  ")) == 2


def test_by_hotel_sums_lines_of_the_same_item() -> None:
    orders = [
        _order("o1", "Tomato", 5, "H1"),
        _order("o2", "tomato", 2, "H1"),
        _order("o3", "Potato", 1, "H2"),
    ]
    out = by_hotel(orders, DAY)

    assert out["Hotel H1"] == {
        "hotelId": "H1",
        "totalItems": 1,
        "items": [{"itemName": "Tomato", "totalQuantity": "7", "unit": "kg"}],
    }
    assert out["Hotel H2"]["items"][0]["itemName"] == "Potato"


def test_dealer_dashboard_summary() -> None:
    orders = _tomatoes() + [_order("o3", "Potato", 4, "H1", status="completed")]
    prices = set_price({}, "tomato", 20)

    out = dealer_dashboard(orders, DAY, prices, currency_symbol="₹")

    assert out["date"] == DAY
    assert out["summary"]["totalItems"] == 2
    assert out["summary"]["totalHotels"] == 2
    assert out["summary"]["totalPendingItems"] == 1
    assert out["summary"]["totalValueDisplay"] == "₹160.00"
    assert out["summary"]["byItem"] == {"Tomato": "8", "Potato": "4"}
    assert [it["itemName"] for it in out["items"]] == ["Tomato", "Potato"]
    assert out["items"][0]["hotels"][0]["hotelId"] == "H1"


def test_dealer_dashboard_search_narrows_items_and_value() -> None:
    orders = _tomatoes() + [_order("o3", "Potato", 4, "H1")]
    prices = set_price({}, "tomato", 20)
    prices = set_price(prices, "potato", 10)

    out = dealer_dashboard(orders, DAY, prices, query="pot")

    assert [it["itemName"] for it in out["items"]] == ["Potato"]
    assert out["summary"]["totalValue"] == "40"
    assert out["summary"]["totalItems"] == 2


def test_hotel_summary_only_shows_own_orders_for_the_day() -> None:
    orders = _tomatoes() + [
        _order("o3", "Potato", 2, "H1", status="completed"),
        _order("o4", "Potato", 2, "H1", date="2024-01-02"),
    ]
    prices = set_price({}, "tomato", 20)

    out = hotel_summary(orders, "H1", DAY, prices)

    assert [o["id"] for o in out["orders"]] == ["o1", "o3"]
    assert out["orders"][0]["lineTotal"] == "100"
    assert out["orders"][1]["unitPrice"] == "0"
    assert out["counts"]["total"] == 2
    assert out["counts"]["pending"] == 1
    assert out["counts"]["completed"] == 1
    assert out["estimatedTotalDisplay"] == "100.00"
