"""Order pricing and persistence.

``OrderService`` receives its stores and event publisher at construction,
so tests can hand it in-memory doubles instead of the Django-backed ones.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from .catalog import CatalogStore
from .money import MAX_AMOUNT, to_money
from .publisher import publish_order_created
from .store import OrderStore
from .validators import InvalidPayload, OrderRequest, product_not_found

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    total: Decimal


class OrderService:

    def __init__(
        self,
        catalog: CatalogStore | None = None,
        orders: OrderStore | None = None,
        publish: Callable[..., object] | None = publish_order_created,
    ):
        self.catalog = catalog or CatalogStore()
        self.orders = orders or OrderStore()
        self.publish = publish

    def price_lines(self, req: OrderRequest) -> tuple[list[dict], Decimal]:
        """
        Snapshot the current unit price of every line and compute subtotals.
        Raises ReferenceNotFound for the first line whose product is missing,
        InvalidPayload when the total does not fit the amount columns.
        """
        prices = self.catalog.unit_prices(line.product_id for line in req.lines)
        priced = []
        total = Decimal("0.00")
        for line in req.lines:
            if line.product_id not in prices:
                raise product_not_found(line.product_id)
            unit_price = to_money(prices[line.product_id])
            subtotal = to_money(unit_price * line.quantity)
            priced.append({
                "product_id": line.product_id,
                "quantity": line.quantity,
                "unit_price": unit_price,
                "subtotal": subtotal,
            })
            total += subtotal
        total = to_money(total)
        if total > MAX_AMOUNT:
            raise InvalidPayload(f"order total must not exceed {MAX_AMOUNT}")
        return priced, total

    def place_order(self, req: OrderRequest) -> PlacedOrder:
        # Price lookups and both inserts run in one transaction; nothing is
        # written unless every product resolves and every insert succeeds.
        with self.orders.atomic():
            priced, total = self.price_lines(req)
            order_id = self.orders.create(req, priced, total)
            if self.publish is not None:
                publish = self.publish
                self.orders.on_commit(
                    lambda: publish(order_id, total, req.payment_method)
                )

        logger.info(
            "order created",
            extra={"order_id": order_id, "total": str(total), "lines": len(priced)},
        )
        return PlacedOrder(order_id=order_id, total=total)
