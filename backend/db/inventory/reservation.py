from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Reservation:
    """A batch deduction applied by InventoryStore.reserve.

    `deducted` holds the aggregated quantity taken per item id. Releasing the
    reservation adds exactly these quantities back.
    """

    deducted: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "deducted", MappingProxyType(dict(self.deducted)))

    @property
    def is_empty(self) -> bool:
        return not self.deducted
