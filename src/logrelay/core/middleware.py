# src/logrelay/core/middleware.py
"""
Correlation-id middleware for FastAPI / Starlette.

For each request the middleware:
1. Takes the correlation id from `X-Correlation-ID` (or `X-Request-ID`) when
   present and well-formed, otherwise generates a UUID4 string. Values longer
   than 128 chars or containing control characters are replaced, to avoid log
   injection.
2. Stores it with `set_correlation_id()` so handlers can pass
   `correlation_id=get_correlation_id()` to their own log calls.
3. Logs "HTTP request" and "HTTP response" through the "http" logger, with
   method, url, status_code and duration_ms in `meta`.
4. Echoes the id on the response in `X-Correlation-ID`.

If logging is not configured the request passes through with only the header
handling. Register it early:

    app.add_middleware(CorrelationIdMiddleware)
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_correlation_id, set_correlation_id
from .manager import get_registry

CORRELATION_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
HTTP_LOGGER_NAME = "http"
MAX_CORRELATION_ID_LENGTH = 128


def _valid_correlation_id(value: str | None) -> bool:
    if not value or len(value) > MAX_CORRELATION_ID_LENGTH:
        return False
    return value.isprintable()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, logger_name: str = HTTP_LOGGER_NAME, header_name: str = CORRELATION_HEADER):
        super().__init__(app)
        self.logger_name = logger_name
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(self.header_name) or request.headers.get(REQUEST_ID_HEADER)
        cid = incoming if _valid_correlation_id(incoming) else str(uuid.uuid4())
        token = set_correlation_id(cid)

        registry = get_registry()
        # Resolve per request: a reconfigure invalidates previously created loggers.
        http_logger = registry.get_logger(self.logger_name) if registry.is_configured() else None
        request_meta = {"method": request.method, "url": str(request.url)}
        started = time.perf_counter()

        try:
            if http_logger is not None:
                await http_logger.info("HTTP request", meta=request_meta, correlation_id=cid)

            try:
                response = await call_next(request)
            except Exception as exc:
                if http_logger is not None:
                    await http_logger.error(
                        "HTTP request failed",
                        meta={**request_meta, "duration_ms": _elapsed_ms(started)},
                        error=exc,
                        correlation_id=cid,
                    )
                raise

            if http_logger is not None:
                await http_logger.info(
                    "HTTP response",
                    meta={
                        **request_meta,
                        "status_code": response.status_code,
                        "duration_ms": _elapsed_ms(started),
                    },
                    correlation_id=cid,
                )
            response.headers[self.header_name] = cid
            return response
        finally:
            reset_correlation_id(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


__all__ = ["CorrelationIdMiddleware", "CORRELATION_HEADER", "REQUEST_ID_HEADER"]
