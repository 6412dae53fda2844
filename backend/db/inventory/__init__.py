"""
In-memory inventory.

Models:
- InventoryItem (id, name, remaining quantity)
- Reservation (applied batch deduction, used for compensating release)
- InventoryStore (lock-guarded owner of all items)
"""

from .item import InventoryItem
from .reservation import Reservation
from .store import InventoryStore

__all__ = ["InventoryItem", "Reservation", "InventoryStore"]
