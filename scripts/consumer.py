# scripts/consumer.py
"""Live sales monitor: prints every order.created event with running totals."""
import json
import os
from collections import defaultdict
from decimal import Decimal

import pika

RABBIT_HOST   = os.getenv("RABBIT_HOST", "127.0.0.1")
RABBIT_PORT   = int(os.getenv("RABBIT_PORT", "5672"))
RABBIT_USER   = os.getenv("RABBIT_USER", "guest")
RABBIT_PASS   = os.getenv("RABBIT_PASS", "guest")
RABBIT_VHOST  = os.getenv("RABBIT_VHOST", "/")
EXCHANGE      = os.getenv("RABBIT_EXCHANGE", "pos_events")

BIND_KEYS = ["order.created"]


class SalesTally:
    def __init__(self):
        self.orders = 0
        self.by_method = defaultdict(Decimal)

    def add(self, event: dict) -> None:
        self.orders += 1
        self.by_method[event.get("payment_method") or "?"] += Decimal(event.get("total", "0"))

    def summary(self) -> str:
        parts = ", ".join(f"{m}={v:.2f}" for m, v in sorted(self.by_method.items()))
        return f"{self.orders} orders | {parts}"


def main():
    params = pika.ConnectionParameters(
        host=RABBIT_HOST, port=RABBIT_PORT, virtual_host=RABBIT_VHOST,
        credentials=pika.PlainCredentials(RABBIT_USER, RABBIT_PASS),
        heartbeat=30, blocked_connection_timeout=10,
    )
    conn = pika.BlockingConnection(params)
    ch = conn.channel()
    ch.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)

    # Exclusive auto-delete queue: the monitor sees only events published while it runs
    qname = ch.queue_declare(queue="", exclusive=True, auto_delete=True).method.queue
    for key in BIND_KEYS:
        ch.queue_bind(exchange=EXCHANGE, queue=qname, routing_key=key)

    tally = SalesTally()

    def on_msg(ch_, method, props, body):
        try:
            event = json.loads(body)
        except ValueError:
            print(f"[!] {method.routing_key} unreadable body: {body[:80]!r}")
        else:
            tally.add(event)
            print(f"[x] order #{event.get('order_id')} {event.get('total')} via {event.get('payment_method')}"
                  f"  ({tally.summary()})")
        ch_.basic_ack(delivery_tag=method.delivery_tag)

    print(f"Watching {BIND_KEYS} on {EXCHANGE}. Ctrl+C to quit.")
    ch.basic_consume(queue=qname, on_message_callback=on_msg, auto_ack=False)
    try:
        ch.start_consuming()
    except KeyboardInterrupt:
        ch.stop_consuming()
        conn.close()
        print(f"\nFinal: {tally.summary()}")

if __name__ == "__main__":
    main()
