from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from core.converters import order_to_schema
from core.pipeline import OrderPipeline
from db.database import Stores, get_stores
from schemas.base import ErrorResponse
from schemas.orders import OrderCreate, OrderCreated, OrderRead

router = APIRouter()


def get_pipeline(request: Request) -> OrderPipeline:
    return request.app.state.pipeline


@router.post(
    "/order",
    response_model=OrderCreated,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def create_order(
    payload: OrderCreate,
    pipeline: OrderPipeline = Depends(get_pipeline),
):
    outcome = pipeline.submit(
        payload.restaurant_id,
        [(li.item_id, li.quantity) for li in payload.items],
    )
    if not outcome.ok:
        # mapped to {"error": ...} by the app's FulfillmentError handler
        raise outcome.error
    return OrderCreated(order=order_to_schema(outcome.order))


@router.get("/orders", response_model=List[OrderRead])
def list_orders(stores: Stores = Depends(get_stores)):
    return [order_to_schema(o) for o in stores.orders.list()]


@router.get(
    "/orders/{order_id}",
    response_model=OrderRead,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_order(order_id: UUID, stores: Stores = Depends(get_stores)):
    return order_to_schema(stores.orders.get(order_id))
