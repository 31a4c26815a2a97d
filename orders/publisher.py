# orders/publisher.py
import json
import logging
import os
from decimal import Decimal

import pika
from pika.exceptions import AMQPError

logger = logging.getLogger(__name__)

# Always read from the environment (nothing hardcoded)
RABBIT_HOST   = os.getenv("RABBIT_HOST")                # e.g. 10.0.0.12
RABBIT_PORT   = int(os.getenv("RABBIT_PORT", "5672"))
RABBIT_VHOST  = os.getenv("RABBIT_VHOST", "/")
RABBIT_USER   = os.getenv("RABBIT_USER", "guest")
RABBIT_PASS   = os.getenv("RABBIT_PASS", "guest")
EXCHANGE      = os.getenv("RABBIT_EXCHANGE", "pos_events")
RABBIT_HEARTBEAT        = int(os.getenv("RABBIT_HEARTBEAT", "30"))
RABBIT_TIMEOUT          = float(os.getenv("RABBIT_TIMEOUT", "5"))
RABBIT_CONNECT_ATTEMPTS = int(os.getenv("RABBIT_CONNECT_ATTEMPTS", "3"))
RABBIT_RETRY_DELAY      = float(os.getenv("RABBIT_RETRY_DELAY", "2.0"))

def _connection_parameters() -> pika.ConnectionParameters:
    """Broker parameters; timeouts and retries come from the environment.
    A slow or unreachable broker must not hold the request for long."""
    return pika.ConnectionParameters(
        host=RABBIT_HOST,
        port=RABBIT_PORT,
        virtual_host=RABBIT_VHOST,
        credentials=pika.PlainCredentials(RABBIT_USER, RABBIT_PASS),
        heartbeat=RABBIT_HEARTBEAT,
        blocked_connection_timeout=RABBIT_TIMEOUT,
        socket_timeout=RABBIT_TIMEOUT,
        connection_attempts=RABBIT_CONNECT_ATTEMPTS,
        retry_delay=RABBIT_RETRY_DELAY,
    )

def _publish(routing_key: str, payload: dict) -> bool:
    """Publish without failing the request if the broker is down."""
    if not RABBIT_HOST:
        logger.debug("RABBIT_HOST not set; event skipped", extra={"routing_key": routing_key})
        return False
    conn = None
    try:
        conn = pika.BlockingConnection(_connection_parameters())
        ch = conn.channel()
        ch.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)
        ch.basic_publish(
            exchange=EXCHANGE,
            routing_key=routing_key,
            body=json.dumps(payload).encode("utf-8"),
            properties=pika.BasicProperties(
                content_type="application/json",
                delivery_mode=2,  # persistent when the queue is durable
            ),
        )
        return True
    except (AMQPError, OSError) as e:
        logger.warning("event publish failed", extra={"routing_key": routing_key, "error": str(e)})
        return False
    finally:
        if conn is not None and conn.is_open:
            conn.close()

def publish_order_created(order_id: int, total: Decimal, payment_method: str) -> bool:
    return _publish("order.created", {
        "order_id": order_id,
        "total": str(total),
        "payment_method": payment_method,
    })
