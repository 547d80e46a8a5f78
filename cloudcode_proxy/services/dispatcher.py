"""
Endpoint Dispatcher Module

Sends a generateContent envelope to the Cloud Code hosts in priority order.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from cloudcode_proxy.common.errors import EndpointsExhaustedError
from cloudcode_proxy.common.time import utc_now
from cloudcode_proxy.providers.base import BackendClient, ProviderResponse
from cloudcode_proxy.services.credentials import CredentialProvider
from cloudcode_proxy.services.project_resolver import ProjectResolver

logger = logging.getLogger(__name__)


@dataclass
class AttemptRecord:
    """
    Attempt Record

    One generateContent call against one host.
    """

    endpoint: str
    response: ProviderResponse
    request_time: datetime
    attempt_index: int


@dataclass
class DispatchResult:
    """
    Dispatch Result Data Class

    Encapsulates the successful backend answer and how it was obtained.
    """

    # Raw backend body of the successful response
    body: Any
    # Host that answered
    endpoint: str
    # Token in use when the host answered (differs from the input after a refresh)
    token: str
    # Whether the credential was refreshed during this dispatch
    refreshed: bool = False
    # All attempts in order (including the successful one)
    attempts: list[AttemptRecord] = field(default_factory=list)


class EndpointDispatcher:
    """
    Host Failover Handler

    Implements the following logic:
    - Success: return the raw body immediately
    - 401 / UNAUTHENTICATED: invalidate the project, refresh the credential,
      re-resolve the project and retry the same host once (at most one
      refresh per dispatch)
    - 429, other 4xx, 5xx, transport error: move on to the next host
    - All hosts failed: raise EndpointsExhaustedError with the last failure
    """

    def __init__(
        self,
        client: BackendClient,
        resolver: ProjectResolver,
        credentials: CredentialProvider,
        endpoints: Sequence[str],
    ):
        self.client = client
        self.resolver = resolver
        self.credentials = credentials
        self.endpoints = list(endpoints)

    async def _refresh(self) -> tuple[str, str]:
        self.resolver.invalidate()
        token = await self.credentials.force_refresh()
        project = await self.resolver.resolve(token)
        return token, project

    async def send(self, payload: dict[str, Any], token: str) -> DispatchResult:
        """
        Dispatch a generateContent envelope

        Args:
            payload: Request envelope; ``project`` is rewritten after a refresh
            token: Bearer token to start with

        Returns:
            DispatchResult: The successful response

        Raises:
            EndpointsExhaustedError: Every host failed
            CredentialUnavailableError: The refresh could not produce a token
        """
        attempts: list[AttemptRecord] = []
        last_response: Optional[ProviderResponse] = None
        refreshed = False

        for endpoint in self.endpoints:
            while True:
                attempt_time = utc_now()
                response = await self.client.generate_content(endpoint, token, payload)
                last_response = response
                attempts.append(
                    AttemptRecord(
                        endpoint=endpoint,
                        response=response,
                        request_time=attempt_time,
                        attempt_index=len(attempts),
                    )
                )

                if response.is_success:
                    logger.info("Response received: endpoint=%s attempts=%s", endpoint, len(attempts))
                    return DispatchResult(
                        body=response.body,
                        endpoint=endpoint,
                        token=token,
                        refreshed=refreshed,
                        attempts=attempts,
                    )

                logger.warning(
                    "Endpoint request failed: endpoint=%s status_code=%s error=%s",
                    endpoint,
                    response.status_code,
                    response.error_detail[:500],
                )

                if response.is_auth_failure and not refreshed:
                    logger.info("Auth error, refreshing token: endpoint=%s", endpoint)
                    refreshed = True
                    token, project = await self._refresh()
                    payload["project"] = project
                    continue

                break

        raise EndpointsExhaustedError(
            last_response.error_detail if last_response is not None else None,
            details={"attempts": len(attempts)},
        )
