import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from .catalog import CatalogStore
from .receipts import render_receipt
from .services import OrderService
from .store import OrderStore
from .validators import (
    BadJSON,
    InvalidPayload,
    ReferenceNotFound,
    order_not_found,
    parse_id,
    parse_json_body,
    validate_order_payload,
    validate_product_payload,
)

logger = logging.getLogger(__name__)

# Module-level wiring; tests swap these for doubles.
catalog = CatalogStore()
orders = OrderStore()
service = OrderService(catalog=catalog, orders=orders)


def _json(data, status=200):
    return JsonResponse(data, status=status, safe=False, json_dumps_params={"ensure_ascii": False})


def _error(message, status):
    return _json({"error": message}, status)


def _order_id(raw: str) -> int:
    """Path ids that are not positive integers can never match an order."""
    oid = parse_id(raw)
    if oid is None:
        raise order_not_found(raw)
    return oid


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

@require_http_methods(["GET", "POST"])
def orders_collection(request):
    if request.method == "POST":
        return create_order(request)
    return list_orders(request)


def create_order(request):
    try:
        body = parse_json_body(request)
        order_req = validate_order_payload(body)
    except (BadJSON, InvalidPayload) as e:
        logger.warning("order rejected", extra={"error": str(e)})
        return _error(str(e), 400)

    try:
        placed = service.place_order(order_req)
    except ReferenceNotFound as e:
        logger.warning("order rejected", extra={"error": str(e), "product_id": e.ref_id})
        return _error(str(e), 400)
    except InvalidPayload as e:
        logger.warning("order rejected", extra={"error": str(e)})
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("order creation failed")
        return _error(str(e), 500)

    return _json({
        "message": "Order created successfully",
        "orderId": placed.order_id,
        "total": placed.total,
    })


def list_orders(request):
    try:
        return _json(orders.list_all())
    except Exception:
        logger.exception("order listing failed")
        return _error("Server error", 500)


@require_GET
def get_order(request, order_id: str):
    try:
        order, items = orders.get(_order_id(order_id))
    except ReferenceNotFound as e:
        return _error(str(e), 404)
    except Exception:
        logger.exception("order fetch failed", extra={"order_id": order_id})
        return _error("Server error", 500)
    return _json({"order": order, "items": items})


@require_GET
def order_receipt(request, order_id: str):
    """
    Small POS-style PDF receipt, served inline.
    - 404 if the order does not exist (the renderer is never called).
    - 500 if loading or rendering fails.
    """
    try:
        order, items = orders.get(_order_id(order_id))
    except ReferenceNotFound as e:
        return _error(str(e), 404)
    except Exception:
        logger.exception("receipt fetch failed", extra={"order_id": order_id})
        return _error("Server error", 500)

    try:
        pdf = render_receipt(order, items)
    except Exception:
        logger.exception("PDF receipt generation failed", extra={"order_id": order["order_id"]})
        return _error("Server error", 500)

    response = HttpResponse(pdf, content_type="application/pdf")
    response["Content-Disposition"] = f"inline; filename=receipt-{order['order_id']}.pdf"
    return response


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

@require_http_methods(["GET", "POST"])
def products_collection(request):
    if request.method == "POST":
        return create_product(request)
    try:
        return _json(catalog.list_products())
    except Exception:
        logger.exception("product listing failed")
        return HttpResponse("Error fetching products", status=500, content_type="text/plain")


def create_product(request):
    try:
        product_req = validate_product_payload(parse_json_body(request))
    except (BadJSON, InvalidPayload) as e:
        logger.warning("product rejected", extra={"error": str(e)})
        return _error(str(e), 400)
    try:
        product = catalog.create_product(product_req)
    except Exception:
        logger.exception("product creation failed")
        return HttpResponse("Error adding product", status=500, content_type="text/plain")
    logger.info("product created", extra={"product_id": product["product_id"]})
    return _json(product)
