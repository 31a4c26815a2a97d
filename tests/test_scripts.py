import random
from decimal import Decimal

from django.test import SimpleTestCase

from scripts.consumer import SalesTally
from scripts.pump_orders import random_order


class TestPumpOrders(SimpleTestCase):

    def test_random_order_shape(self):
        random.seed(7)
        for _ in range(50):
            body = random_order([1, 2, 3])
            self.assertTrue(1 <= len(body["items"]) <= 3)
            for item in body["items"]:
                self.assertIn(item["product_id"], (1, 2, 3))
                self.assertGreaterEqual(item["quantity"], 1)
            self.assertEqual("transactionCode" in body, body["paymentMethod"] == "Mpesa")


class TestSalesTally(SimpleTestCase):

    def test_running_totals(self):
        tally = SalesTally()
        tally.add({"order_id": 1, "total": "100.00", "payment_method": "Mpesa"})
        tally.add({"order_id": 2, "total": "19.99", "payment_method": "Cash"})
        tally.add({"order_id": 3, "total": "0.01", "payment_method": "Mpesa"})
        self.assertEqual(tally.orders, 3)
        self.assertEqual(tally.by_method["Mpesa"], Decimal("100.01"))
        self.assertEqual(tally.summary(), "3 orders | Cash=19.99, Mpesa=100.01")
