"""
Middleware Package

Contains application middleware components.
"""

from cloudcode_proxy.middleware.body_limit import BodyLimitMiddleware
from cloudcode_proxy.middleware.request_log import RequestLogMiddleware

__all__ = ["BodyLimitMiddleware", "RequestLogMiddleware"]
