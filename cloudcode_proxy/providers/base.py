"""
Backend Client Base Class

Defines the interface the dispatcher and project resolver use to talk to a
Cloud Code host.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class ProviderResponse:
    """
    Provider Response Data Class

    Encapsulates response information from one backend host.
    """

    # HTTP status code
    status_code: int
    # Response headers
    headers: dict[str, str] = field(default_factory=dict)
    # Response body (parsed JSON when possible, otherwise text)
    body: Any = None
    # Error message
    error: Optional[str] = None
    # True when no HTTP response was received at all
    transport_error: bool = False

    @property
    def is_success(self) -> bool:
        """Whether the response is successful"""
        return 200 <= self.status_code < 300 and not self.transport_error

    @property
    def is_server_error(self) -> bool:
        """Whether it is a server error (status code >= 500)"""
        return self.status_code >= 500

    @property
    def is_auth_failure(self) -> bool:
        """Whether the host rejected the bearer credential"""
        if self.transport_error:
            return False
        return self.status_code == 401 or "UNAUTHENTICATED" in self.body_text

    @property
    def body_text(self) -> str:
        """Response body rendered as text"""
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        if isinstance(self.body, str):
            return self.body
        return json.dumps(self.body, ensure_ascii=False, separators=(",", ":"))

    @property
    def error_detail(self) -> str:
        """
        Human readable failure description

        Keeps the status code and the raw body so that the error classifier
        can find status names such as RESOURCE_EXHAUSTED in it.
        """
        if self.error:
            return self.error
        return f"{self.status_code} {self.body_text}".strip()


class BackendClient(ABC):
    """
    Cloud Code Backend Client Abstract Base Class

    One instance is shared by every request; ``base_url`` selects the host.
    """

    @abstractmethod
    async def load_code_assist(self, base_url: str, token: str) -> ProviderResponse:
        """
        Ask a host which routing project belongs to the credential

        Args:
            base_url: Host base URL
            token: Bearer token

        Returns:
            ProviderResponse: Host response
        """
        pass

    @abstractmethod
    async def generate_content(
        self,
        base_url: str,
        token: str,
        payload: dict[str, Any],
    ) -> ProviderResponse:
        """
        Send a generateContent envelope to a host

        Args:
            base_url: Host base URL
            token: Bearer token
            payload: Request envelope

        Returns:
            ProviderResponse: Host response
        """
        pass

    async def close(self) -> None:
        """Release pooled connections"""
        return None
