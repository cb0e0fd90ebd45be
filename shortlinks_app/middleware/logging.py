"""Request logging middleware."""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request and response, tagged with a request id."""
    
    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortlinks_app.web")
    
    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        
        client_ip = request.client.host if request.client else "unknown"
        self.logger.info(
            "[%s] Request: %s %s from %s",
            request_id, request.method, request.url.path, client_ip,
        )
        
        response = await call_next(request)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            "[%s] Response: %s %s - Status: %d - Duration: %.2fms",
            request_id, request.method, request.url.path,
            response.status_code, duration_ms,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        
        return response
