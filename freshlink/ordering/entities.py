# freshlink/ordering/entities.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "partial", "completed", "unavailable"]
ORDER_STATUSES: tuple[str, ...] = ("pending", "partial", "completed", "unavailable")

# statuses a dealer must explain with a note
NOTE_REQUIRED_STATUSES = {"partial", "unavailable"}

UNITS: tuple[str, ...] = ("kg", "g", "piece", "dozen", "box")


class _Wire(BaseModel):
    # camelCase on the wire / in the stored blobs, snake_case in Python
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Order(_Wire):
    id: str
    hotel_id: str = Field(alias="hotelId")
    hotel_name: str = Field(alias="hotelName")
    item_name: str = Field(alias="itemName")
    quantity: Decimal
    unit: str
    date: str  # YYYY-MM-DD
    status: OrderStatus = "pending"
    dealer_note: str = Field(default="", alias="dealerNote")
    timestamp: str


class PriceEntry(_Wire):
    amount: Decimal
    unit: str


PriceTable = Dict[str, PriceEntry]


class HotelRef(_Wire):
    id: str
    name: str


class PendingItem(_Wire):
    """A line typed into the hotel order form, quantity still unparsed."""

    item_name: str = Field(alias="itemName")
    quantity: Any
    unit: str = "kg"


class HotelContribution(_Wire):
    hotel_id: str = Field(alias="hotelId")
    hotel_name: str = Field(alias="hotelName")
    quantity: Decimal
    status: OrderStatus
    order_id: str = Field(alias="orderId")


class AggregatedItem(_Wire):
    item_name: str = Field(alias="itemName")
    key: str
    total_quantity: Decimal = Field(alias="totalQuantity")
    unit: str
    hotels: List[HotelContribution]
    price: PriceEntry
    value: Decimal
