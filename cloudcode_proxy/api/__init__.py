"""
API Router Module Initialization
"""

from cloudcode_proxy.api.deps import get_backend_client, get_messages_service

__all__ = [
    "get_backend_client",
    "get_messages_service",
]
