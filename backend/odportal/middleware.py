import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('odportal.slow_requests')


def _describe_user(request: HttpRequest) -> str:
    user = getattr(request, 'user', None)
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'anonymous'
    return f"{user.username}({getattr(user, 'role', '-')})"


class SlowRequestLoggingMiddleware:
    """Log API calls that take longer than ``SLOW_REQUEST_LOG_MS``.

    Static and media files are never timed.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response
        self.enabled = bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True))
        self.threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        self.skip_prefixes = tuple(
            p for p in (getattr(settings, 'STATIC_URL', None), getattr(settings, 'MEDIA_URL', None)) if p
        )

    def __call__(self, request: HttpRequest):
        if not self.enabled or request.path.startswith(self.skip_prefixes):
            return self.get_response(request)

        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= self.threshold_ms:
            match = getattr(request, 'resolver_match', None)
            logger.warning(
                'SLOW_REQUEST %s %s view=%s status=%s duration_ms=%.2f user=%s',
                request.method,
                request.path,
                getattr(match, 'view_name', None) or '-',
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
                _describe_user(request),
            )
        return response
