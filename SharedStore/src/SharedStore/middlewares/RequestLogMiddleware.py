import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class RequestLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, logger_name: str = "requests"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = (time.perf_counter() - start) * 1000

        status = response.status_code
        emoji = "❌" if status >= 400 else "⚠️" if status >= 300 else "✅"
        self.logger.info(f"{emoji} [API] {request.method} {request.url.path} - {status} ({duration:.0f}ms)")
        return response
