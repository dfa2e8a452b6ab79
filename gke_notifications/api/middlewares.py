import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        logger.debug(f"Request started: {request.method} {request.url.path}")

        start_time = time.time()
        response = await call_next(request)

        end_time = time.time()
        logger.debug(
            f"Request finished: {request.method} {request.url.path} {response.status_code} in {end_time - start_time:.2f}s",
            extra={"status_code": response.status_code},
        )
        return response
