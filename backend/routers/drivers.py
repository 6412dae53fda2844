import logging
from typing import List

from fastapi import APIRouter, Depends, status

from core.converters import driver_to_schema
from db.database import Stores, get_stores
from schemas.base import ErrorResponse
from schemas.drivers import DriverAvailabilityResponse, DriverAvailabilityUpdate, DriverRead

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/drivers", response_model=List[DriverRead])
def list_drivers(stores: Stores = Depends(get_stores)):
    return [driver_to_schema(d) for d in stores.drivers.list()]


@router.put(
    "/driver/{driver_id}/availability",
    response_model=DriverAvailabilityResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def update_driver_availability(
    driver_id: str,
    payload: DriverAvailabilityUpdate,
    stores: Stores = Depends(get_stores),
):
    driver = stores.drivers.set_availability(driver_id, payload.available)
    logger.info("driver %s availability set to %s", driver.id, driver.available)
    return DriverAvailabilityResponse(driver=driver_to_schema(driver))
