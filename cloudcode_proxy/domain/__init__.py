"""
Domain Model Module Initialization
"""

from cloudcode_proxy.domain.message import (
    ContentBlockType,
    FinishReason,
    Role,
    StopReason,
    StreamEventType,
)
from cloudcode_proxy.domain.model import ModelInfo, ModelListEntry, ModelListResponse
from cloudcode_proxy.domain.request import MessagesRequest

__all__ = [
    "ContentBlockType",
    "FinishReason",
    "Role",
    "StopReason",
    "StreamEventType",
    "ModelInfo",
    "ModelListEntry",
    "ModelListResponse",
    "MessagesRequest",
]
