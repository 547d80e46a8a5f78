"""
Endpoint Dispatcher Unit Tests
"""

import pytest

from cloudcode_proxy.common.errors import CredentialUnavailableError, EndpointsExhaustedError
from cloudcode_proxy.providers.base import ProviderResponse
from cloudcode_proxy.services.dispatcher import EndpointDispatcher
from cloudcode_proxy.services.project_resolver import ProjectCache, ProjectResolver

from conftest import FakeBackendClient, FakeCredentialProvider


OK_BODY = {"response": {"candidates": [{"content": {"parts": [{"text": "hi"}]}, "finishReason": "STOP"}]}}


class TestEndpointDispatcher:
    """Endpoint Dispatcher Tests"""

    def setup_method(self):
        self.endpoints = ["https://daily.test", "https://autopush.test", "https://prod.test"]
        self.credentials = FakeCredentialProvider()
        self.cache = ProjectCache("project-old")

    def _dispatcher(self, client: FakeBackendClient) -> EndpointDispatcher:
        resolver = ProjectResolver(client, self.cache, self.endpoints, "rising-fact-p41fc")
        return EndpointDispatcher(client, resolver, self.credentials, self.endpoints)

    @pytest.mark.asyncio
    async def test_success_on_first_host(self):
        client = FakeBackendClient([ProviderResponse(status_code=200, body=OK_BODY)])
        result = await self._dispatcher(client).send({"project": "project-old"}, "token-0")

        assert result.body == OK_BODY
        assert result.endpoint == "https://daily.test"
        assert result.refreshed is False
        assert len(result.attempts) == 1
        assert len(client.generate_calls) == 1

    @pytest.mark.asyncio
    async def test_rate_limits_fall_through_to_production(self):
        client = FakeBackendClient(
            [
                ProviderResponse(status_code=429, body={"error": {"status": "RESOURCE_EXHAUSTED"}}),
                ProviderResponse(status_code=429, body={"error": {"status": "RESOURCE_EXHAUSTED"}}),
                ProviderResponse(status_code=200, body=OK_BODY),
            ]
        )
        result = await self._dispatcher(client).send({"project": "project-old"}, "token-0")

        assert result.endpoint == "https://prod.test"
        assert [call["base_url"] for call in client.generate_calls] == self.endpoints
        assert [attempt.response.status_code for attempt in result.attempts] == [429, 429, 200]
        assert self.credentials.refresh_count == 0

    @pytest.mark.asyncio
    async def test_server_and_transport_errors_advance(self):
        client = FakeBackendClient(
            [
                ProviderResponse(status_code=502, error="Request error: connection refused", transport_error=True),
                ProviderResponse(status_code=503, body="unavailable"),
                ProviderResponse(status_code=200, body=OK_BODY),
            ]
        )
        result = await self._dispatcher(client).send({}, "token-0")
        assert result.endpoint == "https://prod.test"

    @pytest.mark.asyncio
    async def test_auth_failure_refreshes_and_retries_same_host(self):
        client = FakeBackendClient(
            generate_responses=[
                ProviderResponse(status_code=401, body={"error": {"status": "UNAUTHENTICATED"}}),
                ProviderResponse(status_code=200, body=OK_BODY),
            ],
            load_responses=[ProviderResponse(status_code=200, body={"cloudaicompanionProject": "project-new"})],
        )
        payload = {"project": "project-old"}
        result = await self._dispatcher(client).send(payload, "token-0")

        assert self.credentials.refresh_count == 1
        assert payload["project"] == "project-new"
        assert result.refreshed is True
        assert result.token == "token-1"
        assert [call["base_url"] for call in client.generate_calls] == ["https://daily.test", "https://daily.test"]
        assert client.generate_calls[1] == {
            "base_url": "https://daily.test",
            "token": "token-1",
            "project": "project-new",
        }
        assert self.cache.get() == "project-new"

    @pytest.mark.asyncio
    async def test_unauthenticated_body_triggers_refresh(self):
        client = FakeBackendClient(
            generate_responses=[
                ProviderResponse(status_code=400, body='{"error":{"status":"UNAUTHENTICATED"}}'),
                ProviderResponse(status_code=200, body=OK_BODY),
            ],
            load_responses=[ProviderResponse(status_code=200, body={"cloudaicompanionProject": {"id": "p2"}})],
        )
        result = await self._dispatcher(client).send({}, "token-0")
        assert result.refreshed is True
        assert self.credentials.refresh_count == 1

    @pytest.mark.asyncio
    async def test_at_most_one_refresh_per_dispatch(self):
        unauthorized = {"error": {"status": "UNAUTHENTICATED"}}
        client = FakeBackendClient(
            generate_responses=[ProviderResponse(status_code=401, body=unauthorized) for _ in range(4)],
            load_responses=[ProviderResponse(status_code=200, body={"cloudaicompanionProject": "p"})],
        )
        with pytest.raises(EndpointsExhaustedError) as exc_info:
            await self._dispatcher(client).send({}, "token-0")

        assert self.credentials.refresh_count == 1
        # first host twice (before and after the refresh), then one call per remaining host
        assert len(client.generate_calls) == 4
        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_all_hosts_failed_carries_last_error(self):
        client = FakeBackendClient(
            [
                ProviderResponse(status_code=500, body="internal"),
                ProviderResponse(status_code=500, body="internal"),
                ProviderResponse(status_code=429, body="RESOURCE_EXHAUSTED: quota will reset after 42s"),
            ]
        )
        with pytest.raises(EndpointsExhaustedError) as exc_info:
            await self._dispatcher(client).send({}, "token-0")

        assert "quota will reset after 42s" in exc_info.value.last_error
        assert str(exc_info.value).startswith("All endpoints failed")

    @pytest.mark.asyncio
    async def test_refresh_failure_propagates(self):
        self.credentials.fail_refresh = True
        client = FakeBackendClient([ProviderResponse(status_code=401, body="UNAUTHENTICATED")])

        with pytest.raises(CredentialUnavailableError):
            await self._dispatcher(client).send({}, "token-0")
        assert self.cache.get() is None
