"""Catalog store: product reads and writes behind a small injectable class."""
from decimal import Decimal
from typing import Iterable

from django.db import DatabaseError

from .models import Product
from .validators import ProductRequest, StoreError


def product_row(p: Product) -> dict:
    return {
        "product_id": p.product_id,
        "name": p.name,
        "description": p.description,
        "unit_price": p.unit_price,
        "stock_quantity": p.stock_quantity,
    }


class CatalogStore:

    def list_products(self) -> list[dict]:
        try:
            return [product_row(p) for p in Product.objects.order_by("product_id")]
        except DatabaseError as e:
            raise StoreError(str(e)) from e

    def create_product(self, req: ProductRequest) -> dict:
        try:
            p = Product.objects.create(
                name=req.name,
                description=req.description,
                unit_price=req.unit_price,
                stock_quantity=req.stock_quantity,
            )
        except DatabaseError as e:
            raise StoreError(str(e)) from e
        return product_row(p)

    def unit_prices(self, product_ids: Iterable[int]) -> dict[int, Decimal]:
        """Current unit price per product id; unknown ids are simply absent."""
        ids = set(product_ids)
        try:
            rows = Product.objects.filter(product_id__in=ids).values_list("product_id", "unit_price")
            return {pid: price for pid, price in rows}
        except DatabaseError as e:
            raise StoreError(str(e)) from e
