import argparse
import sys
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

"""
Fire a burst of concurrent orders at a running dispatch API and print a tally.

Useful to eyeball the no-oversell / no-double-assignment guarantees against a
live process: the sum of deducted stock never exceeds the starting quantity,
and every completed order names a different driver.

Run:
- start the API: `cd backend && python main.py`
- from repo root: `python backend/scripts/simulate_rush.py --orders 20 --item 1 --quantity 30`
"""

# Allow running from anywhere by ensuring the repo root (client helper) is on sys.path
REPO_DIR = Path(__file__).resolve().parents[2]
if str(REPO_DIR) not in sys.path:
    sys.path.insert(0, str(REPO_DIR))

from dispatch_api_client import ApiError, DispatchApiClient  # noqa: E402


def place(client: DispatchApiClient, n: int, item_id: int, quantity: int):
    try:
        order = client.create_order(restaurant_id=f"R{n}", items=[(item_id, quantity)])
        return "created", order["driverId"]
    except ApiError as e:
        return e.error or f"HTTP {e.status_code}", None


def run(base_url: str, orders: int, item_id: int, quantity: int, workers: int) -> int:
    client = DispatchApiClient(base_url=base_url)
    before = {it["id"]: it["quantity"] for it in client.list_inventory()}
    if item_id not in before:
        print(f"Unknown item {item_id}; known items: {sorted(before)}")
        return 1

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda n: place(client, n, item_id, quantity), range(orders)))

    tally = Counter(status for status, _ in results)
    drivers = [d for _, d in results if d]
    after = {it["id"]: it["quantity"] for it in client.list_inventory()}

    for status, count in tally.most_common():
        print(f"{status:40s} {count}")
    print(f"item {item_id}: {before[item_id]} -> {after[item_id]}")
    print(f"drivers assigned: {', '.join(drivers) or '-'}")

    if len(drivers) != len(set(drivers)):
        print("ERROR: a driver was assigned twice")
        return 2
    if before[item_id] - after[item_id] != tally["created"] * quantity:
        print("ERROR: stock deducted does not match created orders")
        return 2
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--url", default=None, help="API base URL (default: $DISPATCH_API_URL or http://localhost:3000)")
    parser.add_argument("--orders", type=int, default=10, help="Number of concurrent orders to submit")
    parser.add_argument("--item", type=int, default=1, help="Inventory item id to order")
    parser.add_argument("--quantity", type=int, default=10, help="Quantity per order")
    parser.add_argument("--workers", type=int, default=8, help="Concurrent request threads")
    args = parser.parse_args()

    url = args.url or DispatchApiClient.from_env().base_url
    raise SystemExit(run(url, args.orders, args.item, args.quantity, args.workers))
