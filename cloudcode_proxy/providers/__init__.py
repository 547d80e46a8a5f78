"""
Backend client module initialization
"""

from cloudcode_proxy.providers.base import BackendClient, ProviderResponse
from cloudcode_proxy.providers.cloudcode_client import CloudCodeClient

__all__ = [
    "BackendClient",
    "ProviderResponse",
    "CloudCodeClient",
]
