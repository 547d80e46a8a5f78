"""
Stream Synthesis

Cloud Code answers with one complete response, while streaming clients expect
the Messages API event sequence. This module replays a finished Messages
response as that sequence:

    event: message_start
    data: {"type":"message_start","message":{...}}

    event: content_block_start
    data: {"type":"content_block_start","index":0,"content_block":{"type":"text","text":""}}

    event: content_block_delta
    data: {"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"Hello"}}

    event: content_block_stop
    data: {"type":"content_block_stop","index":0}

    event: message_delta
    data: {"type":"message_delta","delta":{"stop_reason":"end_turn","stop_sequence":null},"usage":{"output_tokens":10}}

    event: message_stop
    data: {"type":"message_stop"}
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any

from cloudcode_proxy.domain.message import ContentBlockType, StreamEventType


def _usage(message: Mapping[str, Any]) -> Mapping[str, Any]:
    usage = message.get("usage")
    return usage if isinstance(usage, Mapping) else {}


def chunk_text(text: str, chunk_size: int) -> Iterator[str]:
    """Split text into consecutive pieces of at most ``chunk_size`` characters"""
    for start in range(0, len(text), chunk_size):
        yield text[start:start + chunk_size]


def synthesize_stream_events(message: Mapping[str, Any], chunk_size: int) -> Iterator[dict[str, Any]]:
    """
    Replay a complete Messages response as streaming events

    Text blocks are split into ``chunk_size`` character deltas; a tool_use
    block emits its whole input as one ``input_json_delta``. Block indices
    count from 0 across text and tool_use blocks in their original order.

    Args:
        message: Messages API response (as built by the response converter)
        chunk_size: Characters per text delta, must be positive

    Yields:
        dict: Event payloads in protocol order
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    usage = _usage(message)

    yield {
        "type": StreamEventType.MESSAGE_START.value,
        "message": {
            "id": message.get("id"),
            "type": "message",
            "role": "assistant",
            "content": [],
            "model": message.get("model"),
            "stop_reason": None,
            "stop_sequence": None,
            "usage": {"input_tokens": usage.get("input_tokens") or 0, "output_tokens": 0},
        },
    }

    index = 0
    for block in message.get("content") or []:
        if not isinstance(block, Mapping):
            continue
        block_type = block.get("type")

        if block_type == ContentBlockType.TEXT.value:
            yield {
                "type": StreamEventType.CONTENT_BLOCK_START.value,
                "index": index,
                "content_block": {"type": "text", "text": ""},
            }
            for chunk in chunk_text(block.get("text") or "", chunk_size):
                yield {
                    "type": StreamEventType.CONTENT_BLOCK_DELTA.value,
                    "index": index,
                    "delta": {"type": "text_delta", "text": chunk},
                }

        elif block_type == ContentBlockType.TOOL_USE.value:
            yield {
                "type": StreamEventType.CONTENT_BLOCK_START.value,
                "index": index,
                "content_block": {
                    "type": "tool_use",
                    "id": block.get("id"),
                    "name": block.get("name"),
                    "input": {},
                },
            }
            yield {
                "type": StreamEventType.CONTENT_BLOCK_DELTA.value,
                "index": index,
                "delta": {
                    "type": "input_json_delta",
                    "partial_json": json.dumps(block.get("input") or {}, ensure_ascii=False),
                },
            }

        else:
            continue

        yield {"type": StreamEventType.CONTENT_BLOCK_STOP.value, "index": index}
        index += 1

    yield {
        "type": StreamEventType.MESSAGE_DELTA.value,
        "delta": {
            "stop_reason": message.get("stop_reason"),
            "stop_sequence": message.get("stop_sequence"),
        },
        "usage": {"output_tokens": usage.get("output_tokens") or 0},
    }
    yield {"type": StreamEventType.MESSAGE_STOP.value}


def build_error_event(error_type: str, message: str) -> dict[str, Any]:
    """Terminal ``error`` event sent when a stream cannot be produced"""
    return {
        "type": StreamEventType.ERROR.value,
        "error": {"type": error_type, "message": message},
    }


def encode_sse_event(event: Mapping[str, Any]) -> bytes:
    """Format one event as an SSE frame (``event:`` line, ``data:`` line, blank line)"""
    json_str = json.dumps(event, ensure_ascii=False)
    return f"event: {event['type']}\ndata: {json_str}\n\n".encode("utf-8")
