"""
Proxy API Module Initialization
"""

from cloudcode_proxy.api.proxy.messages import router as messages_router
from cloudcode_proxy.api.proxy.models import router as models_router

__all__ = [
    "messages_router",
    "models_router",
]
