import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import Settings, settings as default_settings
from core.errors import FulfillmentError, InternalError
from core.logging import configure_logging
from core.pipeline import OrderPipeline
from db.database import create_stores, load_seed
from routers.drivers import router as drivers_router
from routers.inventory import router as inventory_router
from routers.orders import router as orders_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        stores = create_stores(load_seed(settings.seed_file))
        app.state.stores = stores
        app.state.pipeline = OrderPipeline(
            stores.inventory,
            stores.drivers,
            stores.orders,
            compensate_on_driver_failure=settings.compensate_on_driver_failure,
        )
        logger.info(
            "loaded %d items and %d drivers",
            len(stores.inventory.list()), len(stores.drivers.list()),
        )
        yield

    app = FastAPI(
        title="Delivery Dispatch API",
        description="Order intake with atomic stock reservation and driver assignment",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FulfillmentError)
    async def fulfillment_error_handler(request: Request, exc: FulfillmentError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        err = InternalError()
        return JSONResponse(status_code=err.status_code, content={"error": err.message})

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    # Orders (POST /order, GET /orders)
    app.include_router(orders_router, tags=["orders"])
    # Drivers (PUT /driver/{id}/availability, GET /drivers)
    app.include_router(drivers_router, tags=["drivers"])
    app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host=default_settings.host, port=default_settings.port)
