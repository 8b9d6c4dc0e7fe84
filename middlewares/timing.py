import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000


class TimingMiddleware(BaseHTTPMiddleware):
    """Adds X-Latency-Ms to every response and logs requests slower than SLOW_REQUEST_MS."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Latency-Ms"] = str(latency_ms)

        if latency_ms >= SLOW_REQUEST_MS:
            logger.warning("slow request %s %s took %dms", request.method, request.url.path, latency_ms)
        else:
            logger.debug("%s %s %s %dms", request.method, request.url.path, response.status_code, latency_ms)
        return response
