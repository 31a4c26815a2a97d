import logging

from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def index(request):
    return HttpResponse("POS API is running... Use /products or /orders", content_type="text/plain")


@require_GET
def test_db(request):
    """Connectivity probe: returns the database's current time."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT CURRENT_TIMESTAMP")
            (now,) = cursor.fetchone()
    except DatabaseError:
        logger.exception("database probe failed")
        return HttpResponse("Database error", status=500, content_type="text/plain")
    return JsonResponse({"time": {"now": now}})
