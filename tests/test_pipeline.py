import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from core.errors import InsufficientStock, InternalError, NoDriverAvailable
from core.pipeline import OrderPipeline, OutcomeStatus, Stage
from db.database import create_stores
from db.order import OrderLineItem, OrderLog


class ExplodingLog(OrderLog):
    def append(self, order):
        raise RuntimeError("disk on fire")


def _quantities(stores):
    return {it.id: it.quantity for it in stores.inventory.list()}


def _available(stores):
    return [d.id for d in stores.drivers.list() if d.available]


class TestHappyPath:
    def test_completes_and_records(self, stores, pipeline):
        outcome = pipeline.submit("R1", [(1, 10), (2, 5)])

        assert outcome.ok
        assert outcome.status is OutcomeStatus.COMPLETED
        assert outcome.stage is Stage.COMPLETED
        order = outcome.order
        assert order.restaurant_id == "R1"
        assert order.items == (OrderLineItem(1, 10), OrderLineItem(2, 5))
        assert order.driver_id == "D1"
        assert order.timestamp.tzinfo is not None
        assert stores.orders.get(order.id) is order

        assert _quantities(stores) == {1: 90, 2: 145, 3: 200}
        assert _available(stores) == ["D2", "D3"]

    def test_items_echoed_as_submitted(self, pipeline):
        outcome = pipeline.submit("R1", [(2, 1), (1, 1), (2, 1)])
        assert [li.item_id for li in outcome.order.items] == [2, 1, 2]

    def test_empty_order_still_takes_a_driver(self, stores, pipeline):
        outcome = pipeline.submit("R1", [])
        assert outcome.ok
        assert outcome.order.items == ()
        assert _available(stores) == ["D2", "D3"]

    def test_identical_payloads_are_not_deduplicated(self, stores, pipeline):
        first = pipeline.submit("R1", [(1, 5)])
        second = pipeline.submit("R1", [(1, 5)])
        assert first.order.id != second.order.id
        assert _quantities(stores)[1] == 90
        assert len(stores.orders) == 2

    def test_injected_clock_and_ids(self, stores):
        fixed_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
        at = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        pipeline = OrderPipeline(
            stores.inventory, stores.drivers, stores.orders,
            clock=lambda: at, id_factory=lambda: fixed_id,
        )
        order = pipeline.submit("R1", [(3, 1)]).order
        assert order.id == fixed_id
        assert order.timestamp == at

    def test_rejects_non_positive_quantity(self, stores, pipeline):
        with pytest.raises(ValueError):
            pipeline.submit("R1", [(1, 0)])
        assert _quantities(stores)[1] == 100


class TestInsufficientStock:
    def test_rejected_without_side_effects(self, stores, pipeline):
        outcome = pipeline.submit("R1", [(1, 150)])

        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.stage is Stage.VALIDATING
        assert isinstance(outcome.error, InsufficientStock)
        assert outcome.error.item_id == 1
        assert _quantities(stores)[1] == 100
        assert len(_available(stores)) == 3
        assert len(stores.orders) == 0

    def test_unknown_item(self, stores, pipeline):
        outcome = pipeline.submit("R1", [(1, 1), (77, 1)])
        assert isinstance(outcome.error, InsufficientStock)
        assert outcome.error.item_id == 77
        assert _quantities(stores)[1] == 100

    def test_repeated_lines_fail_at_reservation(self, stores, pipeline):
        # each line alone fits, together they do not
        outcome = pipeline.submit("R1", [(1, 60), (1, 60)])
        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.stage is Stage.RESERVING_INVENTORY
        assert _quantities(stores)[1] == 100
        assert len(_available(stores)) == 3


class TestNoDriver:
    def test_fourth_order_rejected(self, stores, pipeline):
        for _ in range(3):
            assert pipeline.submit("R1", [(1, 1)]).ok

        outcome = pipeline.submit("R1", [(1, 1)])

        assert outcome.status is OutcomeStatus.REJECTED
        assert outcome.stage is Stage.ASSIGNING_DRIVER
        assert isinstance(outcome.error, NoDriverAvailable)
        # reservation was rolled back
        assert _quantities(stores)[1] == 97
        assert len(stores.orders) == 3

    def test_legacy_mode_keeps_stock_consumed(self, stores):
        pipeline = OrderPipeline(
            stores.inventory, stores.drivers, stores.orders,
            compensate_on_driver_failure=False,
        )
        for _ in range(3):
            pipeline.submit("R1", [(1, 1)])

        outcome = pipeline.submit("R1", [(1, 1)])

        assert isinstance(outcome.error, NoDriverAvailable)
        assert _quantities(stores)[1] == 96

    def test_driver_returned_by_availability_update(self, stores, pipeline):
        for _ in range(3):
            pipeline.submit("R1", [(1, 1)])
        stores.drivers.set_availability("D2", True)

        outcome = pipeline.submit("R1", [(1, 1)])
        assert outcome.ok
        assert outcome.order.driver_id == "D2"


class TestRecordingFailure:
    def test_rolls_back_stock_and_driver(self, stores):
        pipeline = OrderPipeline(stores.inventory, stores.drivers, ExplodingLog())

        outcome = pipeline.submit("R1", [(1, 10), (2, 5)])

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.stage is Stage.RECORDING
        assert isinstance(outcome.error, InternalError)
        assert outcome.error.message == "Inventory update failed"
        assert _quantities(stores) == {1: 100, 2: 150, 3: 200}
        assert _available(stores) == ["D1", "D2", "D3"]

    def test_rolls_back_even_in_legacy_mode(self, stores):
        pipeline = OrderPipeline(
            stores.inventory, stores.drivers, ExplodingLog(),
            compensate_on_driver_failure=False,
        )
        pipeline.submit("R1", [(1, 10)])
        assert _quantities(stores)[1] == 100
        assert len(_available(stores)) == 3


class TestConcurrency:
    def test_no_oversell_no_double_assignment(self):
        stores = create_stores(
            {
                "inventory": [{"id": 1, "name": "Apples", "quantity": 50}],
                "drivers": [{"id": f"D{i}", "name": f"Driver {i}"} for i in range(100)],
            }
        )
        pipeline = OrderPipeline(stores.inventory, stores.drivers, stores.orders)
        workers = 40
        barrier = threading.Barrier(workers)

        def attempt(n):
            barrier.wait()
            return pipeline.submit(f"R{n}", [(1, 3)])

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(attempt, range(workers)))

        completed = [o for o in outcomes if o.ok]
        assert len(completed) == 16
        assert all(isinstance(o.error, InsufficientStock) for o in outcomes if not o.ok)
        assert _quantities(stores)[1] == 50 - 16 * 3

        drivers = [o.order.driver_id for o in completed]
        assert len(set(drivers)) == len(drivers)
        assert len(_available(stores)) == 100 - 16

    def test_driver_shortage_restores_stock(self):
        stores = create_stores(
            {
                "inventory": [{"id": 1, "name": "Apples", "quantity": 1000}],
                "drivers": [{"id": f"D{i}", "name": f"Driver {i}"} for i in range(5)],
            }
        )
        pipeline = OrderPipeline(stores.inventory, stores.drivers, stores.orders)
        workers = 30
        barrier = threading.Barrier(workers)

        def attempt(n):
            barrier.wait()
            return pipeline.submit(f"R{n}", [(1, 2)])

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(attempt, range(workers)))

        completed = [o for o in outcomes if o.ok]
        assert len(completed) == 5
        assert len({o.order.driver_id for o in completed}) == 5
        assert all(isinstance(o.error, NoDriverAvailable) for o in outcomes if not o.ok)
        assert _quantities(stores)[1] == 1000 - 5 * 2


class TestRecordedOrders:
    def test_driver_release_does_not_touch_recorded_order(self, stores, pipeline):
        order = pipeline.submit("R1", [(1, 1)]).order
        stores.drivers.release(order.driver_id)

        recorded = stores.orders.get(order.id)
        assert recorded.driver.to_schema["available"] is False
        with pytest.raises(AttributeError):
            recorded.driver.available = True
