from django.db import models


class Product(models.Model):
    product_id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    description = models.TextField(null=True, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    stock_quantity = models.IntegerField(default=0)  # informational; never decremented

    class Meta:
        db_table = "products"
        ordering = ["product_id"]

    def __str__(self):
        return f"{self.product_id}:{self.name}:{self.unit_price}"


class Order(models.Model):
    PAID = "Paid"

    order_id = models.BigAutoField(primary_key=True)
    customer_name = models.CharField(max_length=255, null=True, blank=True)
    customer_phone = models.CharField(max_length=32, null=True, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(max_length=32, default=PAID)
    payment_method = models.CharField(max_length=64)
    transaction_code = models.CharField(max_length=128, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "orders"

    def __str__(self):
        return f"{self.order_id}:{self.status}:{self.total_amount}"


class OrderItem(models.Model):
    id = models.BigAutoField(primary_key=True)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="+")
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)  # price snapshot at order time
    subtotal = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "order_items"
        ordering = ["id"]

    def __str__(self):
        return f"{self.order_id}:{self.product_id}x{self.quantity}"
