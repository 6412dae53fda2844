import logging
import threading
from typing import Dict, Iterable, List, Tuple

from core.errors import InsufficientStock, ItemNotFound
from .item import InventoryItem
from .reservation import Reservation

logger = logging.getLogger(__name__)


class InventoryStore:
    """Single source of truth for remaining stock.

    Every read returns a copy; quantities only change through reserve/release,
    both of which run under the store lock.
    """

    def __init__(self, items: Iterable[InventoryItem] = ()):
        self._lock = threading.Lock()
        self._items: Dict[int, InventoryItem] = {}
        for it in items:
            if it.id in self._items:
                raise ValueError(f"duplicate inventory item id {it.id}")
            if it.quantity < 0:
                raise ValueError(f"item {it.id} has negative quantity")
            self._items[it.id] = it.copy()

    def lookup(self, item_id: int) -> InventoryItem:
        with self._lock:
            it = self._items.get(item_id)
            if it is None:
                raise ItemNotFound(item_id)
            return it.copy()

    def list(self) -> List[InventoryItem]:
        with self._lock:
            return [it.copy() for it in self._items.values()]

    def reserve(self, lines: Iterable[Tuple[int, int]]) -> Reservation:
        """Deduct every line, or none of them.

        Lines naming the same item are summed before checking. Raises
        InsufficientStock for the first failing item in submission order.
        """
        wanted: Dict[int, int] = {}
        for item_id, quantity in lines:
            if quantity <= 0:
                raise ValueError(f"quantity must be > 0 (item {item_id})")
            wanted[item_id] = wanted.get(item_id, 0) + int(quantity)

        with self._lock:
            for item_id, qty in wanted.items():
                it = self._items.get(item_id)
                if it is None or it.quantity < qty:
                    raise InsufficientStock(item_id)
            for item_id, qty in wanted.items():
                self._items[item_id].quantity -= qty

        logger.debug("reserved %s", wanted)
        return Reservation(deducted=wanted)

    def release(self, reservation: Reservation) -> None:
        """Compensating rollback of a previous reserve()."""
        if reservation.is_empty:
            return
        with self._lock:
            for item_id, qty in reservation.deducted.items():
                self._items[item_id].quantity += qty
        logger.debug("released %s", dict(reservation.deducted))
