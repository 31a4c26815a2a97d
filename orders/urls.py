from django.urls import re_path
from .views import get_order, order_receipt, orders_collection, products_collection

urlpatterns = [
    re_path(r"^orders/?$", orders_collection),
    re_path(r"^orders/(?P<order_id>[^/]+)/receipt/?$", order_receipt),
    re_path(r"^orders/(?P<order_id>[^/]+)/?$", get_order),
    re_path(r"^products/?$", products_collection),
]
