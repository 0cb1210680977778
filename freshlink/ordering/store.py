# freshlink/ordering/store.py
from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional, Sequence, Tuple

from ..errors import PersistenceError
from . import prices as price_ops
from . import reconcile
from .blob_store import ORDERS_KEY, PRICES_KEY, BlobStore
from .entities import Order, OrderStatus, PriceEntry, PriceTable
from .orders import dump_orders, find_order, load_orders

logger = logging.getLogger(__name__)


class MarketStore:
    """
    The shared order list and price table for one running service.

    Mutations are serialized by a lock and each one is followed by a
    best-effort write of the whole affected blob. A failed write is logged and
    the in-memory state stays authoritative.
    """

    def __init__(
        self,
        blobs: Optional[BlobStore] = None,
        orders: Optional[Sequence[Order]] = None,
        prices: Optional[PriceTable] = None,
    ):
        self._lock = threading.RLock()
        self._blobs = blobs
        self._orders: List[Order] = list(orders or [])
        self._prices: PriceTable = dict(prices or {})

    @classmethod
    def load(cls, blobs: BlobStore) -> "MarketStore":
        orders = load_orders(blobs.read(ORDERS_KEY, []))
        prices = price_ops.load_price_table(blobs.read(PRICES_KEY, {}))
        logger.info("Loaded %d order(s) and %d price(s)", len(orders), len(prices))
        return cls(blobs, orders, prices)

    # -------------------
    # Reads (snapshots)
    # -------------------
    @property
    def orders(self) -> List[Order]:
        with self._lock:
            return list(self._orders)

    @property
    def prices(self) -> PriceTable:
        with self._lock:
            return dict(self._prices)

    def snapshot(self) -> Tuple[List[Order], PriceTable]:
        with self._lock:
            return list(self._orders), dict(self._prices)

    # -------------------
    # Order mutations
    # -------------------
    def add_orders(self, new_orders: Sequence[Order]) -> List[Order]:
        if not new_orders:
            return []
        with self._lock:
            self._orders = self._orders + list(new_orders)
            self._save_orders()
        logger.info("Added %d order(s) for hotel %s", len(new_orders), new_orders[0].hotel_id)
        return list(new_orders)

    def remove_order(self, order_id: str, hotel_id: Optional[str] = None) -> bool:
        """
        Remove one order. With `hotel_id`, orders of other hotels count as
        absent. Returns whether anything was removed.
        """
        with self._lock:
            target = find_order(self._orders, order_id)
            if target is None or (hotel_id is not None and target.hotel_id != hotel_id):
                return False
            self._orders = reconcile.remove_order(self._orders, order_id)
            self._save_orders()
        logger.info("Removed order %s", order_id)
        return True

    def update_status(self, item_name: str, date: str, status: OrderStatus, note: str = "") -> int:
        """Returns how many orders matched the item and date."""
        with self._lock:
            matched = reconcile.count_matching(self._orders, item_name, date)
            if not matched:
                return 0
            updated = reconcile.update_status(self._orders, item_name, date, status, note)
            if updated != self._orders:
                self._orders = updated
                self._save_orders()
        logger.info("Status %s set on %d order(s) of %r for %s", status, matched, item_name, date)
        return matched

    # -------------------
    # Price mutations
    # -------------------
    def set_price(self, item_name: str, amount: Any, unit: str = "kg") -> PriceEntry:
        with self._lock:
            table = price_ops.set_price(self._prices, item_name, amount, unit)
            self._prices = table
            self._save_prices()
        return price_ops.price_for(table, item_name, unit)

    def delete_price(self, item_name: str) -> bool:
        with self._lock:
            table = price_ops.delete_price(self._prices, item_name)
            if table is self._prices:
                return False
            self._prices = table
            self._save_prices()
        return True

    # -------------------
    # Persistence
    # -------------------
    def _save_orders(self) -> None:
        self._save(ORDERS_KEY, dump_orders(self._orders))

    def _save_prices(self) -> None:
        self._save(PRICES_KEY, price_ops.dump_price_table(self._prices))

    def _save(self, key: str, value: Any) -> None:
        if self._blobs is None:
            return
        try:
            self._blobs.write(key, value)
        except PersistenceError as e:
            logger.error("Storage error, keeping in-memory state: %s", e)
