"""
System Endpoints

Health reporting and manual credential refresh.
"""

import logging
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cloudcode_proxy.api.deps import MessagesServiceDep
from cloudcode_proxy.common.errors import AppError
from cloudcode_proxy.common.time import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check(messages_service: MessagesServiceDep) -> Any:
    """
    Health Check

    Reports whether a credential is available and which project it routes to.
    """
    try:
        return await messages_service.health()
    except AppError as e:
        logger.warning("Health check failed: %s", e.message)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "error": e.message, "timestamp": utc_now_iso()},
        )


@router.post("/refresh-token")
async def refresh_token(messages_service: MessagesServiceDep) -> Any:
    """Drop the cached project and force a credential refresh"""
    try:
        return await messages_service.refresh_token()
    except AppError as e:
        logger.warning("Token refresh failed: %s", e.message)
        return JSONResponse(status_code=500, content={"status": "error", "error": e.message})
