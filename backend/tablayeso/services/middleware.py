"""Request timing and tracing middleware for the estimator API."""
import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tablayeso.services.logging_config import bind_request_id, reset_request_id

logger = logging.getLogger("tablayeso-api.middleware")

SKIP_LOG_PATHS = {"/health"}

# Calculation context a route may leave on request.state for the request line
STATE_FIELDS = ("work_area", "item_count", "error_count", "material_count")


def _calculation_context(request: Request) -> dict:
    context = {}
    for field in STATE_FIELDS:
        value = getattr(request.state, field, None)
        if value is not None:
            context[field] = value
    return context


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Tags every response with X-Request-ID and X-Process-Time (ms) and logs
    one line per request, health probes excepted.

    An incoming X-Request-ID is reused. The id is bound to the logging
    context for the duration of the request, and calculation routes add the
    work area and item, error and material counts to the request line.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.perf_counter()
        request.state.request_id = request_id
        token = bind_request_id(request_id)

        try:
            response: Response = await call_next(request)
        finally:
            reset_request_id(token)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)

        if request.url.path not in SKIP_LOG_PATHS:
            context = _calculation_context(request)
            summary = ""
            if "item_count" in context:
                summary = f" ({context['item_count']} items, {context.get('error_count', 0)} errors)"
            logger.info(
                "%s %s -> %s%s",
                request.method, request.url.path, response.status_code, summary,
                extra={
                    "http_method": request.method,
                    "http_path": request.url.path,
                    "http_status": response.status_code,
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                    **context,
                },
            )

        return response
