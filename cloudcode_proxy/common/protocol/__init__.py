"""
Protocol Conversion Module

Translation between the Messages API and the Cloud Code backend protocol.
"""

from cloudcode_proxy.common.protocol.content import (
    convert_role,
    is_claude_model,
    to_backend_parts,
    to_frontend_content,
)
from cloudcode_proxy.common.protocol.request import (
    build_cloudcode_request,
    convert_messages_request,
    map_model_name,
)
from cloudcode_proxy.common.protocol.response import convert_cloudcode_response
from cloudcode_proxy.common.protocol.schema import sanitize_schema
from cloudcode_proxy.common.protocol.stream import (
    build_error_event,
    encode_sse_event,
    synthesize_stream_events,
)

__all__ = [
    "build_cloudcode_request",
    "build_error_event",
    "convert_cloudcode_response",
    "convert_messages_request",
    "convert_role",
    "encode_sse_event",
    "is_claude_model",
    "map_model_name",
    "sanitize_schema",
    "synthesize_stream_events",
    "to_backend_parts",
    "to_frontend_content",
]
