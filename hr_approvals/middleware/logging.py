import time
import logging
from uuid import uuid4
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("access")

HDR_REQUEST_ID = "X-Request-Id"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with the caller's request id (or a new one)"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(HDR_REQUEST_ID) or uuid4().hex
        start_time = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - start_time
        level = logging.ERROR if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} in {elapsed:.4f}s "
            f"(client {request.client.host if request.client else 'unknown'})"
        )

        response.headers[HDR_REQUEST_ID] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response
