"""
Request Building (Messages -> Cloud Code)

Assembles the Cloud Code ``generateContent`` envelope from a Messages API
request body.

Envelope:
    {
        "project": "<routing project>",
        "model": "<backend model>",
        "request": {
            "contents": [{"role": "user", "parts": [...]}],
            "systemInstruction": {"parts": [...]},
            "generationConfig": {...},
            "tools": [{"functionDeclarations": [...]}],
            "sessionId": "-1234..."
        },
        "userAgent": "antigravity",
        "requestId": "agent-<uuid>"
    }
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from cloudcode_proxy.common.constants import CLOUDCODE_USER_AGENT, MODEL_MAPPINGS
from cloudcode_proxy.common.protocol.content import convert_role, is_claude_model, to_backend_parts
from cloudcode_proxy.common.protocol.schema import sanitize_schema
from cloudcode_proxy.common.utils import generate_request_id, generate_session_id
from cloudcode_proxy.domain.message import ContentBlockType

logger = logging.getLogger(__name__)

MAX_TOOL_NAME_LENGTH = 64
_TOOL_NAME_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

# Messages field -> generationConfig field
_GENERATION_CONFIG_FIELDS = (
    ("max_tokens", "maxOutputTokens"),
    ("temperature", "temperature"),
    ("top_p", "topP"),
    ("top_k", "topK"),
)

Extractor = Callable[[Mapping[str, Any]], Any]


def map_model_name(model: str) -> str:
    """Frontend model name -> backend model name; unknown names pass through"""
    return MODEL_MAPPINGS.get(model, model)


def _nested(*path: str) -> Extractor:
    def extract(tool: Mapping[str, Any]) -> Any:
        value: Any = tool
        for key in path:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
        return value

    return extract


# Tool definitions arrive in several client dialects (Messages, OpenAI
# ``function`` wrappers, ``custom`` tools); each list is probed in order.
TOOL_NAME_EXTRACTORS: tuple[Extractor, ...] = (
    _nested("name"),
    _nested("function", "name"),
    _nested("custom", "name"),
)
TOOL_DESCRIPTION_EXTRACTORS: tuple[Extractor, ...] = (
    _nested("description"),
    _nested("function", "description"),
    _nested("custom", "description"),
)
TOOL_SCHEMA_EXTRACTORS: tuple[Extractor, ...] = (
    _nested("input_schema"),
    _nested("function", "input_schema"),
    _nested("function", "parameters"),
    _nested("custom", "input_schema"),
    _nested("parameters"),
)


def first_present(tool: Mapping[str, Any], extractors: Sequence[Extractor], default: Any) -> Any:
    """
    Probe a tool definition with candidate extractors

    Returns the first non-empty value produced by ``extractors`` (tried in
    order), or ``default`` when none yields one.
    """
    for extract in extractors:
        value = extract(tool)
        if value:
            return value
    return default


def sanitize_tool_name(name: Any, index: int) -> str:
    """Restrict a tool name to ``[A-Za-z0-9_-]`` and 64 characters"""
    sanitized = _TOOL_NAME_INVALID_CHARS.sub("_", str(name))[:MAX_TOOL_NAME_LENGTH]
    return sanitized or f"tool-{index}"


def convert_tool(tool: Mapping[str, Any], index: int) -> dict[str, Any]:
    """Convert one tool definition to a Cloud Code function declaration"""
    name = first_present(tool, TOOL_NAME_EXTRACTORS, f"tool-{index}")
    description = first_present(tool, TOOL_DESCRIPTION_EXTRACTORS, "")
    schema = first_present(tool, TOOL_SCHEMA_EXTRACTORS, {"type": "object"})
    return {
        "name": sanitize_tool_name(name, index),
        "description": description,
        "parameters": sanitize_schema(schema),
    }


def _convert_system(system: Any) -> list[dict[str, Any]]:
    if isinstance(system, str):
        return [{"text": system}] if system else []
    if isinstance(system, list):
        return [
            {"text": block.get("text", "")}
            for block in system
            if isinstance(block, Mapping) and block.get("type") == ContentBlockType.TEXT.value
        ]
    return []


def convert_messages_request(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Translate a Messages request body into the inner Cloud Code request

    Handles:
    - Top-level system parameter -> systemInstruction
    - Messages -> contents (role + parts)
    - Sampling parameters -> generationConfig (only fields that are set)
    - Tools -> functionDeclarations

    The ``thinking`` directive is never translated: enabling a thinking
    config breaks multi-turn signature validation for Claude models, which
    reason internally anyway.
    """
    claude_model = is_claude_model(payload.get("model"))

    request: dict[str, Any] = {
        "contents": [],
        "generationConfig": {},
    }

    system_parts = _convert_system(payload.get("system"))
    if system_parts:
        request["systemInstruction"] = {"parts": system_parts}

    messages = payload.get("messages")
    for message in messages if isinstance(messages, list) else []:
        if not isinstance(message, Mapping):
            continue
        request["contents"].append(
            {
                "role": convert_role(message.get("role")),
                "parts": to_backend_parts(message.get("content"), claude_model),
            }
        )

    generation_config = request["generationConfig"]
    for source_key, target_key in _GENERATION_CONFIG_FIELDS:
        value = payload.get(source_key)
        if value is not None:
            generation_config[target_key] = value

    stop_sequences = payload.get("stop_sequences")
    if stop_sequences:
        generation_config["stopSequences"] = list(stop_sequences)

    tools = payload.get("tools")
    if isinstance(tools, list) and tools:
        declarations = [
            convert_tool(tool if isinstance(tool, Mapping) else {}, index)
            for index, tool in enumerate(tools)
        ]
        request["tools"] = [{"functionDeclarations": declarations}]
        logger.debug("Tools in request: %s", json.dumps(request["tools"], ensure_ascii=False)[:500])

    return request


def build_cloudcode_request(payload: Mapping[str, Any], project_id: str) -> dict[str, Any]:
    """
    Build the full generateContent envelope

    Args:
        payload: Messages API request body
        project_id: Routing project resolved for the current credential

    Returns:
        dict: Envelope ready to be POSTed to any Cloud Code host
    """
    request = convert_messages_request(payload)
    request["sessionId"] = generate_session_id()

    return {
        "project": project_id,
        "model": map_model_name(str(payload.get("model") or "")),
        "request": request,
        "userAgent": CLOUDCODE_USER_AGENT,
        "requestId": generate_request_id(),
    }
