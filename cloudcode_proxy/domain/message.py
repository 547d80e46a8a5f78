"""
Message Domain Types

Enumerations shared by the converters and the stream synthesizer.
"""

from enum import Enum


class Role(str, Enum):
    """Frontend conversation roles."""
    USER = "user"
    ASSISTANT = "assistant"


class ContentBlockType(str, Enum):
    """Frontend content block types."""
    TEXT = "text"
    IMAGE = "image"
    DOCUMENT = "document"
    TOOL_USE = "tool_use"
    TOOL_RESULT = "tool_result"
    THINKING = "thinking"
    REDACTED_THINKING = "redacted_thinking"


class StopReason(str, Enum):
    """Frontend stop reasons the proxy can report."""
    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    TOOL_USE = "tool_use"


class FinishReason(str, Enum):
    """Backend candidate finish reasons with a dedicated mapping."""
    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    TOOL_USE = "TOOL_USE"


class StreamEventType(str, Enum):
    """Types of streaming events."""
    MESSAGE_START = "message_start"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"
    ERROR = "error"
