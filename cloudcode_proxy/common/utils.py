"""
Utility Functions Module

Identifier generators for messages, tool calls and backend envelopes.
"""

import secrets
import uuid

# Upper bound (exclusive) for the numeric part of a backend session id
SESSION_ID_UPPER_BOUND = 9_000_000_000_000_000_000


def generate_message_id() -> str:
    """
    Generate a Messages API message id

    Example:
        >>> generate_message_id()
        'msg_0f8e2d4c6b1a39578a6d2c4e8f0b1d3e'
    """
    return f"msg_{secrets.token_hex(16)}"


def generate_tool_use_id() -> str:
    """
    Generate a tool_use id for a function call the backend left unnamed

    Example:
        >>> generate_tool_use_id()
        'toolu_4b1e9c0d2f7a8e3b5c6d1a0f'
    """
    return f"toolu_{secrets.token_hex(12)}"


def generate_request_id() -> str:
    """Per-request correlation id sent in the backend envelope"""
    return f"agent-{uuid.uuid4()}"


def generate_session_id() -> str:
    """Large random negative-looking session id expected by the backend"""
    return f"-{secrets.randbelow(SESSION_ID_UPPER_BOUND)}"
