"""Generate synthetic till traffic against the POS API.

Worker threads read the catalog once, then keep submitting random orders
and fetching them back (JSON and, now and then, the PDF receipt).

* HTTP_BASE_URL: base URL of the API, default http://127.0.0.1:8000
* HTTP_WORKERS: number of concurrent workers (default 2)
* HTTP_SLEEP: pause between requests per worker, in seconds (default 0.3)
* ORDERS_PER_WORKER: stop after this many orders per worker (0 = run forever)
"""
from __future__ import annotations

import os
import random
import string
import threading
import time
from typing import Dict, List
from urllib.parse import urljoin

import requests

HTTP_BASE_URL = os.getenv("HTTP_BASE_URL", "http://127.0.0.1:8000")
HTTP_WORKERS = int(os.getenv("HTTP_WORKERS", "2"))
HTTP_DELAY = float(os.getenv("HTTP_SLEEP", "0.3"))
ORDERS_PER_WORKER = int(os.getenv("ORDERS_PER_WORKER", "0"))

PAYMENT_METHODS = ["Mpesa", "Cash", "Card"]
CUSTOMERS = [None, "Amina", "Brian", "Chebet", "Otieno"]


def rand_transaction_code(length: int = 10) -> str:
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


def random_order(product_ids: List[int]) -> Dict:
    lines = random.sample(product_ids, k=random.randint(1, min(4, len(product_ids))))
    method = random.choice(PAYMENT_METHODS)
    body = {
        "items": [{"product_id": pid, "quantity": random.randint(1, 5)} for pid in lines],
        "paymentMethod": method,
    }
    customer = random.choice(CUSTOMERS)
    if customer:
        body["customer_name"] = customer
        body["customer_phone"] = "07" + "".join(random.choices(string.digits, k=8))
    if method == "Mpesa":
        body["transactionCode"] = rand_transaction_code()
    return body


def load_product_ids(session: requests.Session) -> List[int]:
    resp = session.get(urljoin(HTTP_BASE_URL, "/products"), timeout=5)
    resp.raise_for_status()
    return [p["product_id"] for p in resp.json()]


def http_worker(name: str, product_ids: List[int], stats: Dict[str, int], stop: threading.Event) -> None:
    session = requests.Session()
    placed = 0
    while not stop.is_set():
        if ORDERS_PER_WORKER and placed >= ORDERS_PER_WORKER:
            return
        try:
            resp = session.post(urljoin(HTTP_BASE_URL, "/orders"), json=random_order(product_ids), timeout=5)
            if resp.status_code != 200:
                with STATS_LOCK:
                    stats["failed"] += 1
                print(f"[http:{name}] POST /orders -> {resp.status_code} {resp.text[:120]}")
                continue
            order_id = resp.json()["orderId"]
            placed += 1
            with STATS_LOCK:
                stats["placed"] += 1

            session.get(urljoin(HTTP_BASE_URL, f"/orders/{order_id}"), timeout=5)
            if random.random() < 0.2:
                session.get(urljoin(HTTP_BASE_URL, f"/orders/{order_id}/receipt"), timeout=10)
        except requests.RequestException as exc:
            with STATS_LOCK:
                stats["failed"] += 1
            print(f"[http:{name}] error: {exc}")
        finally:
            time.sleep(HTTP_DELAY)


STATS_LOCK = threading.Lock()


def main() -> None:
    session = requests.Session()
    product_ids = load_product_ids(session)
    if not product_ids:
        print("[info] catalog is empty; add products with POST /products first")
        return

    stats = {"placed": 0, "failed": 0}
    stop = threading.Event()
    threads: List[threading.Thread] = []
    for idx in range(HTTP_WORKERS):
        thread = threading.Thread(
            target=http_worker,
            name=f"http-{idx}",
            args=(f"w{idx}", product_ids, stats, stop),
            daemon=True,
        )
        thread.start()
        threads.append(thread)
    print(f"[info] {HTTP_WORKERS} workers against {HTTP_BASE_URL} ({len(product_ids)} products). Ctrl+C to stop.")

    try:
        while any(t.is_alive() for t in threads):
            time.sleep(1.0)
    except KeyboardInterrupt:
        print("\n[info] Stopped by user")
    finally:
        stop.set()
        for thread in threads:
            thread.join(timeout=1.0)
        print(f"[info] placed={stats['placed']} failed={stats['failed']}")


if __name__ == "__main__":
    main()
