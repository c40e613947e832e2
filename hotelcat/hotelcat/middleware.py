import logging
import time

from django.conf import settings
from django.utils.cache import patch_cache_control

logger = logging.getLogger('hotelcat.requests')


class RequestLogMiddleware:
    """Logs one line per request: method, path, status and duration."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            '%s %s %s %.1fms',
            request.method, request.path, response.status_code, elapsed_ms,
        )
        return response


class NoStoreMiddleware:
    """Marks token-bearing and hotel-private responses as ``no-store``.

    Applies to the paths in ``NO_STORE_PATHS`` (login, register, me) and to
    every request sent with an ``Authorization`` header.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.no_store_paths = tuple(getattr(settings, 'NO_STORE_PATHS', ()))

    def __call__(self, request):
        response = self.get_response(request)
        if request.path.startswith(self.no_store_paths) or 'Authorization' in request.headers:
            patch_cache_control(response, no_store=True)
        return response
