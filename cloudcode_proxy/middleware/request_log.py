"""
Request Logging Middleware Module
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Logs ``METHOD path`` for every incoming request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)
