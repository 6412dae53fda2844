"""
Order fulfillment pipeline.

    VALIDATING -> RESERVING_INVENTORY -> ASSIGNING_DRIVER -> RECORDING -> COMPLETED

Each stage either hands over to the next one or ends the run:
- business rejections (InsufficientStock, NoDriverAvailable) end as REJECTED
- anything unexpected ends as FAILED with an InternalError

Whatever the exit, stock and drivers taken by earlier stages are given back,
except that a NoDriverAvailable rejection keeps its reservation when
compensation is switched off (legacy behaviour).
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from core.errors import (
    FulfillmentError,
    InsufficientStock,
    InternalError,
    ItemNotFound,
    NoDriverAvailable,
    ResourceExhausted,
    ValidationFailure,
)
from db.driver import Driver, DriverPool
from db.inventory import InventoryStore, Reservation
from db.order import DriverSnapshot, Order, OrderLineItem, OrderLog

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    VALIDATING = "VALIDATING"
    RESERVING_INVENTORY = "RESERVING_INVENTORY"
    ASSIGNING_DRIVER = "ASSIGNING_DRIVER"
    RECORDING = "RECORDING"
    COMPLETED = "COMPLETED"


class OutcomeStatus(str, Enum):
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class OrderOutcome:
    status: OutcomeStatus
    stage: Stage
    order: Optional[Order] = None
    error: Optional[FulfillmentError] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.COMPLETED


@dataclass
class _Run:
    restaurant_id: Any
    lines: Tuple[OrderLineItem, ...]
    reservation: Optional[Reservation] = None
    driver: Optional[Driver] = None
    order: Optional[Order] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderPipeline:
    # stage -> (handler, stage entered on success)
    TRANSITIONS: Dict[Stage, Tuple[str, Stage]] = {
        Stage.VALIDATING: ("_validate", Stage.RESERVING_INVENTORY),
        Stage.RESERVING_INVENTORY: ("_reserve_inventory", Stage.ASSIGNING_DRIVER),
        Stage.ASSIGNING_DRIVER: ("_assign_driver", Stage.RECORDING),
        Stage.RECORDING: ("_record", Stage.COMPLETED),
    }

    def __init__(
        self,
        inventory: InventoryStore,
        drivers: DriverPool,
        orders: OrderLog,
        *,
        compensate_on_driver_failure: bool = True,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ):
        self.inventory = inventory
        self.drivers = drivers
        self.orders = orders
        self.compensate_on_driver_failure = compensate_on_driver_failure
        self._clock = clock
        self._id_factory = id_factory

    def submit(self, restaurant_id: Any, items: Iterable[Tuple[int, int]]) -> OrderOutcome:
        lines = tuple(OrderLineItem(int(item_id), int(qty)) for item_id, qty in items)
        for li in lines:
            if li.quantity <= 0:
                raise ValueError(f"quantity must be > 0 (item {li.item_id})")

        run = _Run(restaurant_id=restaurant_id, lines=lines)
        stage = Stage.VALIDATING
        while stage is not Stage.COMPLETED:
            handler, next_stage = self.TRANSITIONS[stage]
            try:
                getattr(self, handler)(run)
            except (ValidationFailure, ResourceExhausted) as e:
                return self._reject(run, stage, e)
            except Exception:
                logger.exception("order for restaurant %r failed at %s", restaurant_id, stage.value)
                self._rollback(run)
                return OrderOutcome(OutcomeStatus.FAILED, stage, error=InternalError())
            stage = next_stage

        logger.info(
            "order %s completed: restaurant=%r driver=%s lines=%d",
            run.order.id, restaurant_id, run.order.driver_id, len(lines),
        )
        return OrderOutcome(OutcomeStatus.COMPLETED, Stage.COMPLETED, order=run.order)

    # --- stages ---

    def _validate(self, run: _Run) -> None:
        # Advisory only: reserve() is the authoritative check.
        for li in run.lines:
            try:
                item = self.inventory.lookup(li.item_id)
            except ItemNotFound:
                raise InsufficientStock(li.item_id) from None
            if item.quantity < li.quantity:
                raise InsufficientStock(li.item_id)

    def _reserve_inventory(self, run: _Run) -> None:
        run.reservation = self.inventory.reserve(run.lines)

    def _assign_driver(self, run: _Run) -> None:
        run.driver = self.drivers.acquire_any()

    def _record(self, run: _Run) -> None:
        order = Order(
            id=self._id_factory(),
            restaurant_id=run.restaurant_id,
            items=run.lines,
            driver=DriverSnapshot.of(run.driver),
            timestamp=self._clock(),
        )
        self.orders.append(order)
        run.order = order

    # --- failure exits ---

    def _reject(self, run: _Run, stage: Stage, error: FulfillmentError) -> OrderOutcome:
        if isinstance(error, NoDriverAvailable) and not self.compensate_on_driver_failure:
            logger.warning(
                "order for restaurant %r rejected at %s: %s (reserved stock kept)",
                run.restaurant_id, stage.value, error.message,
            )
        else:
            self._rollback(run)
            logger.warning("order for restaurant %r rejected at %s: %s", run.restaurant_id, stage.value, error.message)
        return OrderOutcome(OutcomeStatus.REJECTED, stage, error=error)

    def _rollback(self, run: _Run) -> None:
        if run.driver is not None:
            self.drivers.release(run.driver.id)
            logger.info("rolled back driver %s", run.driver.id)
            run.driver = None
        if run.reservation is not None and not run.reservation.is_empty:
            self.inventory.release(run.reservation)
            logger.info("rolled back reservation %s", dict(run.reservation.deducted))
        run.reservation = None
