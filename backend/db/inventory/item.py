from dataclasses import dataclass, replace


@dataclass
class InventoryItem:
    id: int
    name: str
    quantity: int = 0

    def copy(self) -> "InventoryItem":
        return replace(self)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
        }
