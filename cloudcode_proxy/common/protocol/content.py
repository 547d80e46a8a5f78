"""
Content Conversion (Messages <-> Cloud Code parts)

Maps one message's content between Messages API content blocks and the
Gemini-style ``parts`` list carried inside a Cloud Code request.

Key mappings:
- text -> {text}
- image/document -> {inlineData} (base64) or {fileData} (url)
- tool_use -> {functionCall}
- tool_result -> {functionResponse}
- thinking -> dropped for Claude models, {text, thought: true} otherwise
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from cloudcode_proxy.common.utils import generate_tool_use_id
from cloudcode_proxy.domain.message import ContentBlockType, Role

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
DEFAULT_DOCUMENT_MIME_TYPE = "application/pdf"


def is_claude_model(model: Any) -> bool:
    """Whether the requested model belongs to the Claude-compatible family"""
    return isinstance(model, str) and "claude" in model.lower()


def convert_role(role: Any) -> str:
    """Messages role -> Cloud Code role; unknown roles become ``user``"""
    if role == Role.ASSISTANT.value:
        return "model"
    return "user"


def _convert_media_block(block: Mapping[str, Any], default_mime_type: str) -> dict[str, Any] | None:
    """Convert an image or document block.

    Messages format:
        {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "..."}}
        {"type": "document", "source": {"type": "url", "url": "https://..."}}

    Cloud Code format:
        {"inlineData": {"mimeType": "image/png", "data": "..."}}
        {"fileData": {"mimeType": "application/pdf", "fileUri": "https://..."}}
    """
    source = block.get("source")
    if not isinstance(source, Mapping):
        return None

    source_type = source.get("type")
    if source_type == "base64":
        return {
            "inlineData": {
                "mimeType": source.get("media_type"),
                "data": source.get("data"),
            }
        }
    if source_type == "url":
        return {
            "fileData": {
                "mimeType": source.get("media_type") or default_mime_type,
                "fileUri": source.get("url"),
            }
        }

    logger.debug("Skipping %s block with unsupported source type: %s", block.get("type"), source_type)
    return None


def _tool_result_text(content: Any) -> Any:
    """Flatten tool_result content into the ``{result: ...}`` response object."""
    if isinstance(content, str):
        return {"result": content}
    if isinstance(content, list):
        texts = [
            item.get("text", "")
            for item in content
            if isinstance(item, Mapping) and item.get("type") == ContentBlockType.TEXT.value
        ]
        return {"result": "\n".join(texts)}
    return content


def _convert_block(block: Mapping[str, Any], claude_model: bool) -> dict[str, Any] | None:
    block_type = block.get("type")

    if block_type == ContentBlockType.TEXT.value:
        return {"text": block.get("text", "")}

    if block_type == ContentBlockType.IMAGE.value:
        return _convert_media_block(block, DEFAULT_IMAGE_MIME_TYPE)

    if block_type == ContentBlockType.DOCUMENT.value:
        return _convert_media_block(block, DEFAULT_DOCUMENT_MIME_TYPE)

    if block_type == ContentBlockType.TOOL_USE.value:
        function_call: dict[str, Any] = {
            "name": block.get("name"),
            "args": block.get("input") or {},
        }
        # Claude models correlate calls and results by id
        if claude_model and block.get("id"):
            function_call["id"] = block["id"]
        return {"functionCall": function_call}

    if block_type == ContentBlockType.TOOL_RESULT.value:
        tool_use_id = block.get("tool_use_id")
        function_response: dict[str, Any] = {
            "name": tool_use_id or "unknown",
            "response": _tool_result_text(block.get("content")),
        }
        if claude_model and tool_use_id:
            function_response["id"] = tool_use_id
        return {"functionResponse": function_response}

    if block_type == ContentBlockType.THINKING.value:
        # Claude models manage reasoning themselves; replaying it breaks signatures
        if claude_model:
            return None
        return {"text": block.get("thinking", ""), "thought": True}

    if block_type == ContentBlockType.REDACTED_THINKING.value:
        return None

    logger.debug("Dropping unknown content block type: %s", block_type)
    return None


def to_backend_parts(content: Any, claude_model: bool = False) -> list[dict[str, Any]]:
    """
    Convert message content to Cloud Code parts

    Args:
        content: A string or a list of content blocks
        claude_model: Whether the target model is in the Claude-compatible family

    Returns:
        Ordered parts; never empty (a single empty text part stands in for
        content that produced nothing, since the backend rejects empty parts).
    """
    if isinstance(content, str):
        return [{"text": content}]

    if not isinstance(content, list):
        return [{"text": "" if content is None else str(content)}]

    parts: list[dict[str, Any]] = []
    for block in content:
        if not isinstance(block, Mapping):
            continue
        part = _convert_block(block, claude_model)
        if part is not None:
            parts.append(part)

    return parts if parts else [{"text": ""}]


def to_frontend_content(parts: Any) -> list[dict[str, Any]]:
    """
    Convert Cloud Code parts to Messages content blocks

    Thought parts are never surfaced. Function calls without an id get a
    generated ``toolu_`` id.
    """
    blocks: list[dict[str, Any]] = []
    if not isinstance(parts, list):
        return blocks

    for part in parts:
        if not isinstance(part, Mapping):
            continue

        if "text" in part and part["text"] is not None:
            if part.get("thought") is True:
                continue
            blocks.append({"type": ContentBlockType.TEXT.value, "text": part["text"]})
            continue

        function_call = part.get("functionCall")
        if isinstance(function_call, Mapping):
            blocks.append(
                {
                    "type": ContentBlockType.TOOL_USE.value,
                    "id": function_call.get("id") or generate_tool_use_id(),
                    "name": function_call.get("name"),
                    "input": function_call.get("args") or {},
                }
            )

    return blocks
