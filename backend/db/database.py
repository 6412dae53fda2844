import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request

from .driver import Driver, DriverPool
from .inventory import InventoryItem, InventoryStore
from .order import OrderLog

DEFAULT_SEED: Dict[str, Any] = {
    "inventory": [
        {"id": 1, "name": "Apples", "quantity": 100},
        {"id": 2, "name": "Bananas", "quantity": 150},
        {"id": 3, "name": "Carrots", "quantity": 200},
    ],
    "drivers": [
        {"id": "D1", "name": "Driver One", "available": True},
        {"id": "D2", "name": "Driver Two", "available": True},
        {"id": "D3", "name": "Driver Three", "available": True},
    ],
}


@dataclass
class Stores:
    inventory: InventoryStore
    drivers: DriverPool
    orders: OrderLog


def load_seed(seed_file: Optional[str] = None) -> Dict[str, Any]:
    if not seed_file:
        return DEFAULT_SEED
    data = json.loads(Path(seed_file).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"seed file {seed_file} must contain a JSON object")
    return {
        "inventory": data.get("inventory") or [],
        "drivers": data.get("drivers") or [],
    }


def create_stores(seed: Optional[Dict[str, Any]] = None) -> Stores:
    seed = DEFAULT_SEED if seed is None else seed
    inventory = InventoryStore(
        InventoryItem(id=int(it["id"]), name=str(it["name"]), quantity=int(it.get("quantity", 0)))
        for it in seed.get("inventory", [])
    )
    drivers = DriverPool(
        Driver(id=str(d["id"]), name=str(d["name"]), available=bool(d.get("available", True)))
        for d in seed.get("drivers", [])
    )
    return Stores(inventory=inventory, drivers=drivers, orders=OrderLog())


def get_stores(request: Request) -> Stores:
    return request.app.state.stores
