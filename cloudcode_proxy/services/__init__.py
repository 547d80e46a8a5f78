"""
Service Layer Module Initialization
"""

from cloudcode_proxy.services.credentials import CachedTokenProvider, CredentialProvider
from cloudcode_proxy.services.dispatcher import AttemptRecord, DispatchResult, EndpointDispatcher
from cloudcode_proxy.services.messages_service import MessagesService
from cloudcode_proxy.services.project_resolver import ProjectCache, ProjectResolver

__all__ = [
    "AttemptRecord",
    "CachedTokenProvider",
    "CredentialProvider",
    "DispatchResult",
    "EndpointDispatcher",
    "MessagesService",
    "ProjectCache",
    "ProjectResolver",
]
