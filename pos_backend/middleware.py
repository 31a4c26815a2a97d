import logging

from django.conf import settings
from django.http import JsonResponse

from orders.validators import NotAllowedOrigin

logger = logging.getLogger(__name__)


def check_origin(origin: str | None) -> None:
    """Requests without an Origin header (server-to-server) always pass."""
    if origin and origin not in settings.CORS_ALLOWED_ORIGINS:
        raise NotAllowedOrigin(origin)


class OriginAllowListMiddleware:
    """Reject browser requests from origins outside CORS_ALLOWED_ORIGINS.

    django-cors-headers only decides which CORS headers to send; this
    refuses the request itself so a disallowed origin never reaches a view.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        try:
            check_origin(request.headers.get("Origin"))
        except NotAllowedOrigin as e:
            logger.warning("origin rejected", extra={"origin": str(e), "path": request.path})
            return JsonResponse({"error": "Not allowed by CORS"}, status=403)
        return self.get_response(request)
