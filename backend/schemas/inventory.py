from .base import CamelModel


class InventoryItemRead(CamelModel):
    id: int
    name: str
    quantity: int
