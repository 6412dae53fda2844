import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Tuple

from core.errors import OrderNotFound
from .driver import Driver


@dataclass(frozen=True)
class DriverSnapshot:
    """The driver as assigned to an order. Assigned drivers are never available."""

    id: str
    name: str

    @classmethod
    def of(cls, driver: Driver) -> "DriverSnapshot":
        return cls(id=driver.id, name=driver.name)

    @property
    def to_schema(self):
        return {"id": self.id, "name": self.name, "available": False}


class OrderLineItem(NamedTuple):
    item_id: int
    quantity: int


@dataclass(frozen=True)
class Order:
    id: uuid.UUID
    restaurant_id: Any
    items: Tuple[OrderLineItem, ...]
    driver: DriverSnapshot
    timestamp: datetime = field(compare=False)

    @property
    def driver_id(self) -> str:
        return self.driver.id

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "restaurant_id": self.restaurant_id,
            "items": [{"item_id": li.item_id, "quantity": li.quantity} for li in self.items],
            "driver_id": self.driver.id,
            "driver": self.driver.to_schema,
            "timestamp": self.timestamp,
        }


class OrderLog:
    """Append-only log of completed orders, kept for the life of the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._orders: Dict[uuid.UUID, Order] = {}

    def append(self, order: Order) -> None:
        with self._lock:
            if order.id in self._orders:
                raise ValueError(f"order {order.id} already recorded")
            self._orders[order.id] = order

    def get(self, order_id: uuid.UUID) -> Order:
        with self._lock:
            o = self._orders.get(order_id)
        if o is None:
            raise OrderNotFound(order_id)
        return o

    def list(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
