"""
API Dependency Injection Module

Provides the dependencies required by the FastAPI routes. Every collaborator
is a process-wide singleton so the project cache and the HTTP connection
pool are shared across requests.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from cloudcode_proxy.config import get_settings
from cloudcode_proxy.providers import BackendClient, CloudCodeClient
from cloudcode_proxy.services import (
    CachedTokenProvider,
    CredentialProvider,
    EndpointDispatcher,
    MessagesService,
    ProjectCache,
    ProjectResolver,
)


# ============ Global Singletons ============

@lru_cache()
def get_backend_client() -> BackendClient:
    """Get the shared Cloud Code client"""
    return CloudCodeClient()


@lru_cache()
def get_credential_provider() -> CredentialProvider:
    """Get the bearer token supplier"""
    settings = get_settings()
    return CachedTokenProvider(
        access_token=settings.ACCESS_TOKEN,
        token_file=settings.TOKEN_FILE,
        refresh_interval=settings.TOKEN_REFRESH_INTERVAL_SECONDS,
    )


@lru_cache()
def get_project_cache() -> ProjectCache:
    """Get the process-wide project cache"""
    return ProjectCache()


# ============ Service Dependencies ============

def get_project_resolver() -> ProjectResolver:
    """Get the project resolver"""
    settings = get_settings()
    return ProjectResolver(
        client=get_backend_client(),
        cache=get_project_cache(),
        endpoints=settings.CLOUDCODE_ENDPOINTS,
        default_project_id=settings.DEFAULT_PROJECT_ID,
    )


def get_dispatcher() -> EndpointDispatcher:
    """Get the endpoint dispatcher"""
    settings = get_settings()
    return EndpointDispatcher(
        client=get_backend_client(),
        resolver=get_project_resolver(),
        credentials=get_credential_provider(),
        endpoints=settings.CLOUDCODE_ENDPOINTS,
    )


def get_messages_service() -> MessagesService:
    """Get the messages service"""
    settings = get_settings()
    return MessagesService(
        credentials=get_credential_provider(),
        resolver=get_project_resolver(),
        dispatcher=get_dispatcher(),
        chunk_size=settings.STREAMING_CHUNK_SIZE,
        default_model=settings.DEFAULT_MODEL,
        default_max_tokens=settings.DEFAULT_MAX_TOKENS,
    )


# Dependency type aliases
MessagesServiceDep = Annotated[MessagesService, Depends(get_messages_service)]
