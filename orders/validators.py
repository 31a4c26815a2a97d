import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from .money import MAX_UNIT_PRICE, to_money


class BadJSON(Exception):
    """Raised when the request body is not valid JSON."""
    pass


class InvalidPayload(Exception):
    """Raised when a JSON body is missing required fields or has the wrong shape."""
    pass


class ReferenceNotFound(Exception):
    """A referenced product or order does not exist."""

    def __init__(self, kind: str, ref_id, message: str | None = None):
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(message or f"{kind} {ref_id} not found")


class StoreError(Exception):
    """The database rejected or failed a query."""
    pass


class NotAllowedOrigin(Exception):
    """The Origin header is not on the CORS allow-list."""
    pass


def product_not_found(product_id) -> ReferenceNotFound:
    return ReferenceNotFound("product", product_id, f"Product ID {product_id} not found")


def order_not_found(order_id) -> ReferenceNotFound:
    return ReferenceNotFound("order", order_id, "Order not found")


def parse_json_body(request) -> dict:
    """
    Decode the request body as a JSON object.
    Raises BadJSON if it is not JSON, InvalidPayload if it is not an object.
    """
    try:
        body = request.body.decode("utf-8") if request.body else "{}"
        data = json.loads(body or "{}")
    except Exception as e:
        raise BadJSON(f"invalid JSON: {e}")
    if not isinstance(data, dict):
        raise InvalidPayload("request body must be a JSON object")
    return data


# ---------------------------------------------------------------------------
# Order payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LineRequest:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderRequest:
    lines: tuple[LineRequest, ...]
    payment_method: str
    customer_name: str | None = None
    customer_phone: str | None = None
    transaction_code: str | None = None


MAX_ID = 2**63 - 1         # BigAutoField upper bound
MAX_QUANTITY = 1_000_000   # per line; keeps subtotals inside the amount columns
MAX_STOCK = 2**31 - 1      # IntegerField upper bound


def parse_id(raw) -> int | None:
    """Positive ASCII-decimal integer within the id range, else None."""
    if isinstance(raw, str):
        raw = raw.strip()
        if not (raw.isascii() and raw.isdecimal()) or len(raw) > 19:
            return None
        raw = int(raw)
    if isinstance(raw, bool) or not isinstance(raw, int) or not 0 < raw <= MAX_ID:
        return None
    return raw


def _positive_int(value, field: str, upper: int = MAX_ID) -> int:
    parsed = parse_id(value)
    if parsed is None or parsed > upper:
        raise InvalidPayload(f"{field} must be a positive integer no larger than {upper}")
    return parsed


def _optional_text(value, field: str) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InvalidPayload(f"{field} must be a string")
    return value


def validate_order_payload(body: dict) -> OrderRequest:
    """
    Turn a POST /orders body into an OrderRequest.
    - items must be a non-empty list of {product_id, quantity}.
    - paymentMethod is required.
    - customer_name, customer_phone and transactionCode are optional;
      empty strings are stored as missing.
    """
    items = body.get("items")
    if not isinstance(items, list) or not items:
        raise InvalidPayload("items must be a non-empty list")

    lines = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidPayload(f"items[{idx}] must be an object")
        if "product_id" not in item or "quantity" not in item:
            raise InvalidPayload(f"items[{idx}] requires product_id and quantity")
        lines.append(LineRequest(
            product_id=_positive_int(item["product_id"], f"items[{idx}].product_id"),
            quantity=_positive_int(item["quantity"], f"items[{idx}].quantity", MAX_QUANTITY),
        ))

    payment_method = body.get("paymentMethod")
    if not isinstance(payment_method, str) or not payment_method.strip():
        raise InvalidPayload("paymentMethod is required")

    return OrderRequest(
        lines=tuple(lines),
        payment_method=payment_method.strip(),
        customer_name=_optional_text(body.get("customer_name"), "customer_name"),
        customer_phone=_optional_text(body.get("customer_phone"), "customer_phone"),
        transaction_code=_optional_text(body.get("transactionCode"), "transactionCode"),
    )


# ---------------------------------------------------------------------------
# Product payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProductRequest:
    name: str
    unit_price: Decimal
    description: str | None = None
    stock_quantity: int = 0


def validate_product_payload(body: dict) -> ProductRequest:
    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidPayload("name is required")

    raw_price = body.get("unit_price")
    if raw_price is None or isinstance(raw_price, bool):
        raise InvalidPayload("unit_price is required")
    try:
        unit_price = Decimal(str(raw_price))
    except InvalidOperation:
        raise InvalidPayload("unit_price must be a number")
    if not unit_price.is_finite() or unit_price < 0:
        raise InvalidPayload("unit_price must be a non-negative number")
    if unit_price > MAX_UNIT_PRICE:
        raise InvalidPayload(f"unit_price must not exceed {MAX_UNIT_PRICE}")
    unit_price = to_money(unit_price)

    stock = body.get("stock_quantity", 0)
    if stock is None:
        stock = 0
    if isinstance(stock, bool) or not isinstance(stock, int) or not 0 <= stock <= MAX_STOCK:
        raise InvalidPayload(f"stock_quantity must be an integer between 0 and {MAX_STOCK}")

    return ProductRequest(
        name=name.strip(),
        unit_price=unit_price,
        description=_optional_text(body.get("description"), "description"),
        stock_quantity=stock,
    )
