from .base import CamelModel


class DriverRead(CamelModel):
    id: str
    name: str
    available: bool


class DriverAvailabilityUpdate(CamelModel):
    available: bool


class DriverAvailabilityResponse(CamelModel):
    message: str = "Driver availability updated"
    driver: DriverRead
