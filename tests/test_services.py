from contextlib import nullcontext
from decimal import Decimal

from django.test import SimpleTestCase

from orders.services import OrderService
from orders.validators import InvalidPayload, LineRequest, OrderRequest, ReferenceNotFound


class FakeCatalog:
    def __init__(self, prices):
        self.prices = {pid: Decimal(p) for pid, p in prices.items()}
        self.lookups = []

    def unit_prices(self, product_ids):
        ids = set(product_ids)
        self.lookups.append(ids)
        return {pid: price for pid, price in self.prices.items() if pid in ids}


class FakeOrders:
    def __init__(self):
        self.created = []
        self.committed = []

    def atomic(self):
        return nullcontext()

    def on_commit(self, fn):
        self.committed.append(fn)
        fn()

    def create(self, req, priced, total):
        self.created.append((req, priced, total))
        return len(self.created)


def _order(*lines, method="Cash", code=None):
    return OrderRequest(
        lines=tuple(LineRequest(pid, qty) for pid, qty in lines),
        payment_method=method,
        transaction_code=code,
    )


class TestOrderService(SimpleTestCase):

    def setUp(self):
        self.catalog = FakeCatalog({1: "50.00", 2: "19.99", 3: "0.35"})
        self.orders = FakeOrders()
        self.events = []
        self.service = OrderService(
            catalog=self.catalog,
            orders=self.orders,
            publish=lambda *args: self.events.append(args),
        )

    def test_single_line_total(self):
        placed = self.service.place_order(_order((1, 2)))
        self.assertEqual(placed.order_id, 1)
        self.assertEqual(placed.total, Decimal("100.00"))
        _, priced, total = self.orders.created[0]
        self.assertEqual(total, Decimal("100.00"))
        self.assertEqual(priced, [{
            "product_id": 1,
            "quantity": 2,
            "unit_price": Decimal("50.00"),
            "subtotal": Decimal("100.00"),
        }])

    def test_total_is_sum_of_subtotals(self):
        placed = self.service.place_order(_order((1, 1), (2, 3), (3, 7)))
        _, priced, _ = self.orders.created[0]
        self.assertEqual(len(priced), 3)
        self.assertEqual(placed.total, sum(line["subtotal"] for line in priced))
        self.assertEqual(placed.total, Decimal("50.00") + Decimal("59.97") + Decimal("2.45"))

    def test_repeated_product_keeps_separate_lines(self):
        self.service.place_order(_order((2, 1), (2, 2)))
        _, priced, total = self.orders.created[0]
        self.assertEqual([line["quantity"] for line in priced], [1, 2])
        self.assertEqual(total, Decimal("59.97"))
        self.assertEqual(self.catalog.lookups, [{2}])

    def test_missing_product_writes_nothing(self):
        with self.assertRaises(ReferenceNotFound) as ctx:
            self.service.place_order(_order((1, 1), (99, 1), (98, 1)))
        self.assertEqual(str(ctx.exception), "Product ID 99 not found")
        self.assertEqual(self.orders.created, [])
        self.assertEqual(self.events, [])

    def test_event_published_after_commit(self):
        placed = self.service.place_order(_order((1, 1), method="Mpesa", code="QX1"))
        self.assertEqual(self.events, [(placed.order_id, Decimal("50.00"), "Mpesa")])

    def test_publisher_optional(self):
        service = OrderService(catalog=self.catalog, orders=self.orders, publish=None)
        service.place_order(_order((1, 1)))
        self.assertEqual(self.orders.committed, [])

    def test_total_beyond_amount_column_writes_nothing(self):
        catalog = FakeCatalog({1: "9999999999.99", 2: "999999.99"})
        service = OrderService(catalog=catalog, orders=self.orders, publish=lambda *args: self.events.append(args))
        with self.assertRaises(InvalidPayload):
            service.place_order(_order((1, 1_000_000)))
        # each line fits on its own, the sum does not
        with self.assertRaises(InvalidPayload):
            service.place_order(_order((2, 1_000_000), (2, 1_000_000)))
        self.assertEqual(self.orders.created, [])
        self.assertEqual(self.events, [])

    def test_largest_line_that_fits(self):
        catalog = FakeCatalog({2: "999999.99"})
        service = OrderService(catalog=catalog, orders=self.orders, publish=None)
        placed = service.place_order(_order((2, 1_000_000)))
        self.assertEqual(placed.total, Decimal("999999990000.00"))
