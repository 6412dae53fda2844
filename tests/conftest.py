import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.pipeline import OrderPipeline
from db.database import DEFAULT_SEED, create_stores
from main import create_app


@pytest.fixture()
def stores():
    return create_stores(DEFAULT_SEED)


@pytest.fixture()
def pipeline(stores):
    return OrderPipeline(stores.inventory, stores.drivers, stores.orders)


@pytest.fixture()
def settings(monkeypatch):
    for name in ("HOST", "PORT", "LOG_LEVEL", "COMPENSATE_ON_DRIVER_FAILURE", "SEED_FILE"):
        monkeypatch.delenv(name, raising=False)
    return Settings.from_env()


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


