from db.driver import Driver
from db.inventory import InventoryItem
from db.order import Order
from schemas.drivers import DriverRead
from schemas.inventory import InventoryItemRead
from schemas.orders import OrderRead


def driver_to_schema(driver: Driver) -> DriverRead:
    return DriverRead(**driver.to_schema)


def item_to_schema(item: InventoryItem) -> InventoryItemRead:
    return InventoryItemRead(**item.to_schema)


def order_to_schema(order: Order) -> OrderRead:
    """Convert a recorded Order to its API schema (items echoed as submitted)"""
    return OrderRead(**order.to_schema)
