"""
Response Conversion (Cloud Code -> Messages)

Maps a complete ``generateContent`` response onto a Messages API response.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cloudcode_proxy.common.protocol.content import to_frontend_content
from cloudcode_proxy.common.utils import generate_message_id
from cloudcode_proxy.domain.message import ContentBlockType, FinishReason, StopReason


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def convert_stop_reason(finish_reason: Any, has_tool_calls: bool) -> str:
    """Convert a Cloud Code finishReason to a Messages stop_reason.

    STOP and MAX_TOKENS map directly; otherwise a function call in the
    candidate (or an explicit TOOL_USE) means ``tool_use``.
    """
    if finish_reason == FinishReason.STOP.value:
        return StopReason.END_TURN.value
    if finish_reason == FinishReason.MAX_TOKENS.value:
        return StopReason.MAX_TOKENS.value
    if finish_reason == FinishReason.TOOL_USE.value or has_tool_calls:
        return StopReason.TOOL_USE.value
    return StopReason.END_TURN.value


def convert_cloudcode_response(body: Any, model: str) -> dict[str, Any]:
    """
    Translate a Cloud Code response into a Messages API response

    Only the first candidate is used. The body may be the bare response or
    wrapped in ``{"response": {...}}``.

    Args:
        body: Parsed generateContent response
        model: Model name the client asked for (echoed back)

    Returns:
        dict: Messages API response with at least one content block
    """
    envelope = _as_mapping(body)
    response = _as_mapping(envelope.get("response") or envelope)

    candidates = response.get("candidates")
    first_candidate = _as_mapping(candidates[0]) if isinstance(candidates, list) and candidates else {}
    parts = _as_mapping(first_candidate.get("content")).get("parts")

    content = to_frontend_content(parts)
    has_tool_calls = any(block["type"] == ContentBlockType.TOOL_USE.value for block in content)
    if not content:
        content = [{"type": ContentBlockType.TEXT.value, "text": ""}]

    usage = _as_mapping(response.get("usageMetadata"))

    return {
        "id": generate_message_id(),
        "type": "message",
        "role": "assistant",
        "content": content,
        "model": model,
        "stop_reason": convert_stop_reason(first_candidate.get("finishReason"), has_tool_calls),
        "stop_sequence": None,
        "usage": {
            "input_tokens": _as_int(usage.get("promptTokenCount")),
            "output_tokens": _as_int(usage.get("candidatesTokenCount")),
        },
    }
