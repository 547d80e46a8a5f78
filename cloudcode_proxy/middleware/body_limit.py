"""
Body Size Limit Middleware Module

Rejects requests whose declared body size exceeds REQUEST_BODY_LIMIT_MB.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from cloudcode_proxy.common.errors import AppError
from cloudcode_proxy.config import get_settings

logger = logging.getLogger(__name__)


class BodyLimitMiddleware(BaseHTTPMiddleware):
    """
    Body Size Limit Middleware

    Large multimodal requests (base64 images and documents) are accepted up
    to the configured limit; anything above it is answered with 413 before
    the body is read.
    """

    def __init__(self, app: ASGIApp, limit_mb: int | None = None) -> None:
        super().__init__(app)
        settings = get_settings()
        self.max_bytes = (limit_mb or settings.REQUEST_BODY_LIMIT_MB) * 1024 * 1024

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > self.max_bytes:
            logger.warning(
                "Request body too large: path=%s size=%s limit=%s",
                request.url.path,
                content_length,
                self.max_bytes,
            )
            error = AppError(
                f"Request body exceeds the {self.max_bytes // (1024 * 1024)}MB limit",
                error_type="invalid_request_error",
                status_code=413,
            )
            return JSONResponse(status_code=error.status_code, content=error.to_dict())

        return await call_next(request)
