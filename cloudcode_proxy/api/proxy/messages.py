"""
Messages API Endpoint

Provides the Anthropic Messages compatible endpoint backed by Cloud Code.
"""

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError

from cloudcode_proxy.api.deps import MessagesServiceDep
from cloudcode_proxy.common.errors import InvalidRequestError
from cloudcode_proxy.domain.request import MessagesRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "Invalid request")


async def _parse_request(request: Request) -> MessagesRequest:
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidRequestError("Request body must be a valid JSON object") from e

    if not isinstance(body, dict) or not isinstance(body.get("messages"), list):
        raise InvalidRequestError("messages is required and must be an array")

    try:
        return MessagesRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(_validation_message(e)) from e


@router.post("/v1/messages")
async def messages(
    request: Request,
    messages_service: MessagesServiceDep,
) -> Any:
    """
    Messages endpoint

    Translates the request for Cloud Code and returns either a complete
    Messages response or, with ``stream: true``, a synthesized SSE stream.
    """
    messages_request = await _parse_request(request)

    logger.info(
        "Request for model: %s, stream: %s",
        messages_request.model or messages_service.default_model,
        messages_request.stream,
    )

    if messages_request.stream:
        return StreamingResponse(
            messages_service.stream_message(messages_request, request.is_disconnected),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    try:
        response = await messages_service.send_message(messages_request)
    except Exception as e:
        logger.error("Request failed: %s", e)
        raise await messages_service.handle_error(e) from e

    return JSONResponse(content=response)
