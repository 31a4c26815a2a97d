"""Order store: atomic order + item writes and the read paths used by the API."""
from decimal import Decimal
from typing import Callable, Sequence

from django.db import DatabaseError, transaction

from .models import Order, OrderItem
from .validators import OrderRequest, StoreError, order_not_found


def order_row(o: Order) -> dict:
    return {
        "order_id": o.order_id,
        "customer_name": o.customer_name,
        "customer_phone": o.customer_phone,
        "total_amount": o.total_amount,
        "status": o.status,
        "payment_method": o.payment_method,
        "transaction_code": o.transaction_code,
        "created_at": o.created_at,
    }


class OrderStore:

    def atomic(self):
        """Context manager wrapping a unit of work in one database transaction."""
        return transaction.atomic()

    def on_commit(self, fn: Callable[[], None]) -> None:
        transaction.on_commit(fn)

    def create(self, req: OrderRequest, priced: Sequence[dict], total: Decimal) -> int:
        """
        Insert the order row and one item row per priced line.
        Both inserts share one transaction: if any item insert fails the
        order row is rolled back with it.
        """
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    customer_name=req.customer_name,
                    customer_phone=req.customer_phone,
                    total_amount=total,
                    status=Order.PAID,
                    payment_method=req.payment_method,
                    transaction_code=req.transaction_code,
                )
                OrderItem.objects.bulk_create([
                    OrderItem(
                        order=order,
                        product_id=line["product_id"],
                        quantity=line["quantity"],
                        unit_price=line["unit_price"],
                        subtotal=line["subtotal"],
                    )
                    for line in priced
                ])
        except DatabaseError as e:
            raise StoreError(str(e)) from e
        return order.order_id

    def get(self, order_id: int) -> tuple[dict, list[dict]]:
        """Order row plus its items (with product names). Raises ReferenceNotFound."""
        try:
            order = Order.objects.filter(pk=order_id).first()
            if order is None:
                raise order_not_found(order_id)
            items = [
                {
                    "product_id": it.product_id,
                    "product_name": it.product.name,
                    "quantity": it.quantity,
                    "unit_price": it.unit_price,
                    "subtotal": it.subtotal,
                }
                for it in OrderItem.objects.filter(order_id=order_id).select_related("product").order_by("id")
            ]
        except DatabaseError as e:
            raise StoreError(str(e)) from e
        return order_row(order), items

    def list_all(self) -> list[dict]:
        """Every order, newest first, without items."""
        try:
            return [order_row(o) for o in Order.objects.order_by("-created_at", "-order_id")]
        except DatabaseError as e:
            raise StoreError(str(e)) from e
