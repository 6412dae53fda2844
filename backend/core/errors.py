from fastapi import status


class FulfillmentError(Exception):
    """Base class for errors raised by the stores and the order pipeline."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# --- business rejections (client errors) ---

class ValidationFailure(FulfillmentError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientStock(ValidationFailure):
    def __init__(self, item_id: int):
        super().__init__(f"Insufficient stock for item {item_id}")
        self.item_id = item_id


class ResourceExhausted(FulfillmentError):
    status_code = status.HTTP_400_BAD_REQUEST


class NoDriverAvailable(ResourceExhausted):
    def __init__(self):
        super().__init__("No available drivers")


# --- lookups ---

class NotFound(FulfillmentError):
    status_code = status.HTTP_404_NOT_FOUND


class ItemNotFound(NotFound):
    def __init__(self, item_id: int):
        super().__init__("Item not found")
        self.item_id = item_id


class DriverNotFound(NotFound):
    def __init__(self, driver_id: str):
        super().__init__("Driver not found")
        self.driver_id = driver_id


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        super().__init__("Order not found")
        self.order_id = order_id


# --- server errors ---

class InternalError(FulfillmentError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Inventory update failed"):
        super().__init__(message)
