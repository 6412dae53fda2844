import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List

from core.errors import DriverNotFound, NoDriverAvailable

logger = logging.getLogger(__name__)


@dataclass
class Driver:
    id: str
    name: str
    available: bool = True

    def copy(self) -> "Driver":
        return replace(self)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "available": self.available,
        }


class DriverPool:
    """Exclusive allocation of delivery drivers.

    Drivers keep their registration order; acquire_any hands out the first
    available one. All flag changes happen under the pool lock.
    """

    def __init__(self, drivers: Iterable[Driver] = ()):
        self._lock = threading.Lock()
        # dicts keep insertion order, which is the registration order
        self._drivers: Dict[str, Driver] = {}
        for d in drivers:
            if d.id in self._drivers:
                raise ValueError(f"duplicate driver id {d.id}")
            self._drivers[d.id] = d.copy()

    def get(self, driver_id: str) -> Driver:
        with self._lock:
            d = self._drivers.get(driver_id)
            if d is None:
                raise DriverNotFound(driver_id)
            return d.copy()

    def list(self) -> List[Driver]:
        with self._lock:
            return [d.copy() for d in self._drivers.values()]

    def acquire_any(self) -> Driver:
        with self._lock:
            for d in self._drivers.values():
                if d.available:
                    d.available = False
                    logger.debug("acquired driver %s", d.id)
                    return d.copy()
        raise NoDriverAvailable()

    def release(self, driver_id: str) -> Driver:
        with self._lock:
            d = self._drivers.get(driver_id)
            if d is None:
                raise DriverNotFound(driver_id)
            d.available = True
            logger.debug("released driver %s", driver_id)
            return d.copy()

    def set_availability(self, driver_id: str, available: bool) -> Driver:
        with self._lock:
            d = self._drivers.get(driver_id)
            if d is None:
                raise DriverNotFound(driver_id)
            d.available = bool(available)
            return d.copy()
