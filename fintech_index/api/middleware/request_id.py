"""
Request correlation: every request gets an X-Request-ID that shows up in its
log lines and on its response.
"""

import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from fintech_index.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000.0

# Client-supplied ids are echoed into logs and headers
_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def _accept_or_generate(incoming: str) -> str:
    if incoming and _SAFE_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Accepts a well-formed X-Request-ID from the client or generates one,
    exposes it on ``request.state`` and the logging context, and echoes it
    back. Requests slower than ``slow_ms`` are logged as warnings.
    """

    def __init__(self, app, slow_ms: float = SLOW_REQUEST_MS):
        super().__init__(app)
        self.slow_ms = slow_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = _accept_or_generate(request.headers.get(REQUEST_ID_HEADER, ""))
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)

            response.headers[REQUEST_ID_HEADER] = request_id

            fields = {
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": duration_ms,
            }
            if duration_ms > self.slow_ms:
                logger.warning("Slow request", extra=fields)
            else:
                logger.debug("Request completed", extra=fields)

            return response
        finally:
            request_id_var.reset(token)
