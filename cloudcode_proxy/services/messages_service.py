"""Messages Service Module

Serves one Messages API request against Cloud Code."""

import logging
from typing import Any, AsyncGenerator, Awaitable, Callable, Optional

from cloudcode_proxy.common.constants import AVAILABLE_MODELS
from cloudcode_proxy.common.errors import (
    AppError,
    AuthenticationError,
    CredentialUnavailableError,
    classify_error,
)
from cloudcode_proxy.common.protocol import (
    build_cloudcode_request,
    build_error_event,
    convert_cloudcode_response,
    encode_sse_event,
    synthesize_stream_events,
)
from cloudcode_proxy.common.sanitizer import token_prefix
from cloudcode_proxy.common.time import unix_now, utc_now_iso
from cloudcode_proxy.domain.model import ModelInfo, ModelListEntry, ModelListResponse
from cloudcode_proxy.domain.request import MessagesRequest
from cloudcode_proxy.services.credentials import CredentialProvider
from cloudcode_proxy.services.dispatcher import EndpointDispatcher
from cloudcode_proxy.services.project_resolver import ProjectResolver

logger = logging.getLogger(__name__)

TOKEN_REFRESHED_MESSAGE = "Token was expired and has been refreshed. Please retry your request."
TOKEN_REFRESH_FAILED_MESSAGE = "Could not refresh token. Make sure Antigravity is running."

DisconnectCheck = Callable[[], Awaitable[bool]]


class MessagesService:
    """
    Messages Service

    Handles the complete flow of a Messages request:
    1. Obtain the bearer token
    2. Resolve the routing project (refreshing the token once if that fails)
    3. Build the Cloud Code envelope
    4. Dispatch it across the hosts
    5. Convert the answer back (or replay it as SSE events)
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        resolver: ProjectResolver,
        dispatcher: EndpointDispatcher,
        chunk_size: int = 20,
        default_model: str = "claude-3-5-sonnet-20241022",
        default_max_tokens: int = 4096,
    ):
        """
        Initialize Service

        Args:
            credentials: Bearer token supplier
            resolver: Routing project resolver
            dispatcher: Host failover handler
            chunk_size: Characters per synthesized text delta
            default_model: Model used when the request names none
            default_max_tokens: Output limit used when the request sets none
        """
        self.credentials = credentials
        self.resolver = resolver
        self.dispatcher = dispatcher
        self.chunk_size = chunk_size
        self.default_model = default_model
        self.default_max_tokens = default_max_tokens

    async def _token_and_project(self) -> tuple[str, str]:
        token = await self.credentials.get_token()
        try:
            project = await self.resolver.resolve(token)
        except Exception as e:
            logger.warning("Project fetch failed, refreshing token: %s", e)
            self.resolver.invalidate()
            token = await self.credentials.force_refresh()
            project = await self.resolver.resolve(token)
        return token, project

    async def send_message(self, request: MessagesRequest) -> dict[str, Any]:
        """
        Serve a non-streaming request

        Args:
            request: Validated Messages request

        Returns:
            dict: Messages API response

        Raises:
            EndpointsExhaustedError: Every host failed
            CredentialUnavailableError: No token could be obtained
        """
        request = request.with_defaults(self.default_model, self.default_max_tokens)
        payload = request.to_payload()

        token, project = await self._token_and_project()
        envelope = build_cloudcode_request(payload, project)

        logger.info("Sending request for model: %s (requested %s)", envelope["model"], request.model)

        result = await self.dispatcher.send(envelope, token)
        return convert_cloudcode_response(result.body, request.model)

    async def stream_message(
        self,
        request: MessagesRequest,
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> AsyncGenerator[bytes, None]:
        """
        Serve a streaming request as SSE frames

        The complete response is fetched first and then replayed. A failure
        before any event is sent produces a single ``error`` event.

        Args:
            request: Validated Messages request
            is_disconnected: Returns True once the client has gone away

        Yields:
            bytes: Encoded SSE frames
        """
        try:
            message = await self.send_message(request)
        except Exception as e:
            error = await self.handle_error(e)
            logger.error("Stream error: %s (%s)", error.message, e)
            yield encode_sse_event(build_error_event(error.error_type, error.message))
            return

        logger.info("Simulating stream from full response: id=%s", message["id"])

        try:
            for event in synthesize_stream_events(message, self.chunk_size):
                if is_disconnected is not None and await is_disconnected():
                    logger.info("Client disconnected, stopping stream: id=%s", message["id"])
                    return
                yield encode_sse_event(event)
        except ValueError as e:
            error = await self.handle_error(e)
            logger.error("Stream replay failed: id=%s error=%s", message["id"], e)
            yield encode_sse_event(build_error_event(error.error_type, error.message))

    async def recover_authentication(self) -> str:
        """
        Drop the cached project and refresh the credential

        Returns:
            str: Message telling the client whether retrying will help
        """
        logger.info("Token might be expired, attempting refresh")
        self.resolver.invalidate()
        try:
            await self.credentials.force_refresh()
        except CredentialUnavailableError as e:
            logger.warning("Token refresh failed: %s", e)
            return TOKEN_REFRESH_FAILED_MESSAGE
        return TOKEN_REFRESHED_MESSAGE

    async def handle_error(self, exc: Exception) -> AppError:
        """
        Classify a failure and run auth recovery when it calls for it

        Args:
            exc: Failure raised while serving a request

        Returns:
            AppError: Error to report to the client
        """
        error = classify_error(exc)
        if error.error_type == "authentication_error":
            message = await self.recover_authentication()
            error = AuthenticationError(message, details=error.details)
        return error

    def list_models(self) -> dict[str, Any]:
        """Static model catalog in list form"""
        created = unix_now()
        models = [ModelInfo(**model) for model in AVAILABLE_MODELS]
        response = ModelListResponse(
            data=[
                ModelListEntry(id=model.id, created=created, description=model.description)
                for model in models
            ]
        )
        return response.model_dump()

    async def refresh_token(self) -> dict[str, Any]:
        """
        Force a credential refresh

        Raises:
            CredentialUnavailableError: No fresh token could be obtained
        """
        self.resolver.invalidate()
        token = await self.credentials.force_refresh()
        return {
            "status": "ok",
            "message": "Token refreshed successfully",
            "tokenPrefix": token_prefix(token),
        }

    async def health(self) -> dict[str, Any]:
        """
        Report credential and project status

        A project lookup failure is reported as ``unknown`` rather than as an
        unhealthy service.

        Raises:
            CredentialUnavailableError: No token could be obtained
        """
        token = await self.credentials.get_token()

        project: Optional[str] = None
        try:
            project = await self.resolver.resolve(token)
        except Exception as e:
            logger.debug("Project lookup failed during health check: %s", e)

        return {
            "status": "ok",
            "hasToken": bool(token),
            "tokenPrefix": token_prefix(token),
            "project": project or "unknown",
            "timestamp": utc_now_iso(),
        }
