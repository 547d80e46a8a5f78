"""
Test Configuration Module
"""

from typing import Any, Optional

import pytest

from cloudcode_proxy.common.errors import CredentialUnavailableError
from cloudcode_proxy.providers.base import BackendClient, ProviderResponse
from cloudcode_proxy.services.credentials import CredentialProvider


class FakeBackendClient(BackendClient):
    """Backend client returning scripted responses, recording every call."""

    def __init__(
        self,
        generate_responses: Optional[list[ProviderResponse]] = None,
        load_responses: Optional[list[ProviderResponse]] = None,
    ):
        self.generate_responses = list(generate_responses or [])
        self.load_responses = list(load_responses or [])
        self.generate_calls: list[dict[str, Any]] = []
        self.load_calls: list[dict[str, Any]] = []

    async def load_code_assist(self, base_url: str, token: str) -> ProviderResponse:
        self.load_calls.append({"base_url": base_url, "token": token})
        if self.load_responses:
            return self.load_responses.pop(0)
        return ProviderResponse(status_code=500, body="no scripted response")

    async def generate_content(self, base_url: str, token: str, payload: dict[str, Any]) -> ProviderResponse:
        self.generate_calls.append(
            {"base_url": base_url, "token": token, "project": payload.get("project")}
        )
        if self.generate_responses:
            return self.generate_responses.pop(0)
        return ProviderResponse(status_code=500, body="no scripted response")


class FakeCredentialProvider(CredentialProvider):
    """Credential provider handing out ``token-0``, ``token-1``... on refresh."""

    def __init__(self, fail_get: bool = False, fail_refresh: bool = False):
        self.fail_get = fail_get
        self.fail_refresh = fail_refresh
        self.refresh_count = 0

    @property
    def current(self) -> str:
        return f"token-{self.refresh_count}"

    async def get_token(self) -> str:
        if self.fail_get:
            raise CredentialUnavailableError("No credential configured")
        return self.current

    async def force_refresh(self) -> str:
        if self.fail_refresh:
            raise CredentialUnavailableError("Refresh failed")
        self.refresh_count += 1
        return self.current


def backend_body(parts: list[dict[str, Any]], finish_reason: str = "STOP", wrapped: bool = True) -> dict[str, Any]:
    """Build a generateContent response body"""
    response = {
        "candidates": [{"content": {"role": "model", "parts": parts}, "finishReason": finish_reason}],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 7},
    }
    return {"response": response} if wrapped else response


@pytest.fixture
def endpoints() -> list[str]:
    return ["https://daily.test", "https://autopush.test", "https://prod.test"]


@pytest.fixture
def credentials() -> FakeCredentialProvider:
    return FakeCredentialProvider()
