from typing import List

from fastapi import APIRouter, Depends, status

from core.converters import item_to_schema
from db.database import Stores, get_stores
from schemas.base import ErrorResponse
from schemas.inventory import InventoryItemRead

router = APIRouter()


@router.get("/", response_model=List[InventoryItemRead])
def list_inventory(stores: Stores = Depends(get_stores)):
    return [item_to_schema(it) for it in stores.inventory.list()]


@router.get(
    "/{item_id}",
    response_model=InventoryItemRead,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_inventory_item(item_id: int, stores: Stores = Depends(get_stores)):
    return item_to_schema(stores.inventory.lookup(item_id))
