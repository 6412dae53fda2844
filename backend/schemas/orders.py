from datetime import datetime
from typing import Annotated, List, Optional, Union
from uuid import UUID

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from .base import CamelModel
from .drivers import DriverRead

# Opaque caller identifier, echoed back exactly as received (no coercion, no trimming)
RestaurantId = Optional[Union[StrictBool, StrictInt, StrictFloat, StrictStr]]


class OrderLineItemIn(CamelModel):
    # strict: "1" is not item 1
    item_id: StrictInt
    quantity: Annotated[StrictInt, Field(gt=0)]


class OrderCreate(CamelModel):
    restaurant_id: RestaurantId = None
    items: List[OrderLineItemIn]


class OrderLineItemRead(CamelModel):
    item_id: int
    quantity: int


class OrderRead(CamelModel):
    id: UUID
    restaurant_id: RestaurantId = None
    items: List[OrderLineItemRead]
    driver_id: str
    driver: DriverRead
    timestamp: datetime


class OrderCreated(CamelModel):
    message: str = "Order processed successfully"
    order: OrderRead
