"""
dispatch_api_client.py

Copy this file into any service that needs to place delivery orders.

What it provides:
- A tiny API client for the Delivery Dispatch backend
- Helpers for:
  - Order creation: POST /order
  - Driver availability override: PUT /driver/{id}/availability
  - Read-only views: GET /orders, /orders/{id}, /drivers, /inventory/

Environment variables expected:
- DISPATCH_API_URL: e.g. "http://localhost:3000"

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

import requests


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: int, error: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        # The server's {"error": "..."} message, when there is one
        self.error = error


@dataclass
class DispatchApiClient:
    base_url: str
    timeout: float = 30

    @classmethod
    def from_env(cls) -> "DispatchApiClient":
        return cls(base_url=os.getenv("DISPATCH_API_URL", "http://localhost:3000"))

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        resp = requests.request(
            method,
            url,
            json=json,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )

        if resp.status_code >= 400:
            error = None
            try:
                body = resp.json()
                if isinstance(body, dict):
                    error = body.get("error")
            except ValueError:
                pass
            raise ApiError(
                f"{method} {path} failed ({resp.status_code}): {error or resp.text}",
                status_code=resp.status_code,
                error=error,
            )

        if resp.status_code == 204:
            return None
        return resp.json()

    # ----------------------------
    # Orders
    # ----------------------------

    def create_order(self, *, restaurant_id: Any, items: Iterable[Tuple[int, int]]) -> Dict[str, Any]:
        """
        Calls: POST /order
        items: (item_id, quantity) pairs.
        Returns the created order (the "order" field of the response).
        """
        payload = {
            "restaurantId": restaurant_id,
            "items": [{"itemId": item_id, "quantity": qty} for item_id, qty in items],
        }
        return self._request("POST", "/order", json=payload)["order"]

    def list_orders(self) -> Any:
        return self._request("GET", "/orders")

    def get_order(self, order_id: str) -> Any:
        return self._request("GET", f"/orders/{order_id}")

    # ----------------------------
    # Drivers + inventory
    # ----------------------------

    def update_driver_availability(self, driver_id: str, *, available: bool) -> Dict[str, Any]:
        """
        Calls: PUT /driver/{driver_id}/availability
        Returns the updated driver record.
        """
        data = self._request("PUT", f"/driver/{driver_id}/availability", json={"available": available})
        return data["driver"]

    def list_drivers(self) -> Any:
        return self._request("GET", "/drivers")

    def list_inventory(self) -> Any:
        return self._request("GET", "/inventory/")
