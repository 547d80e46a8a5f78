"""
Project Resolver Unit Tests
"""

import pytest

from cloudcode_proxy.providers.base import ProviderResponse
from cloudcode_proxy.services.project_resolver import ProjectCache, ProjectResolver, extract_project_id

from conftest import FakeBackendClient


DEFAULT = "rising-fact-p41fc"


class TestExtractProjectId:
    def test_string_and_object_forms(self):
        assert extract_project_id({"cloudaicompanionProject": "proj-a"}) == "proj-a"
        assert extract_project_id({"cloudaicompanionProject": {"id": "proj-b"}}) == "proj-b"

    def test_missing_or_empty(self):
        assert extract_project_id({}) is None
        assert extract_project_id({"cloudaicompanionProject": ""}) is None
        assert extract_project_id({"cloudaicompanionProject": {"name": "x"}}) is None
        assert extract_project_id("not json") is None


class TestProjectResolver:
    """Project Resolver Tests"""

    @pytest.mark.asyncio
    async def test_first_host_with_project_wins(self, endpoints):
        client = FakeBackendClient(
            load_responses=[
                ProviderResponse(status_code=500, body="oops"),
                ProviderResponse(status_code=200, body={"cloudaicompanionProject": {"id": "proj-1"}}),
            ]
        )
        cache = ProjectCache()
        resolver = ProjectResolver(client, cache, endpoints, DEFAULT)

        assert await resolver.resolve("tok") == "proj-1"
        assert cache.get() == "proj-1"
        assert [call["base_url"] for call in client.load_calls] == endpoints[:2]

    @pytest.mark.asyncio
    async def test_cached_value_skips_discovery(self, endpoints):
        client = FakeBackendClient()
        resolver = ProjectResolver(client, ProjectCache("cached"), endpoints, DEFAULT)

        assert await resolver.resolve("tok") == "cached"
        assert client.load_calls == []

    @pytest.mark.asyncio
    async def test_default_project_is_cached(self, endpoints):
        client = FakeBackendClient(
            load_responses=[
                ProviderResponse(status_code=200, body={}),
                ProviderResponse(status_code=403, body="PERMISSION_DENIED"),
                ProviderResponse(status_code=502, error="Request error", transport_error=True),
            ]
        )
        resolver = ProjectResolver(client, ProjectCache(), endpoints, DEFAULT)

        assert await resolver.resolve("tok") == DEFAULT
        assert await resolver.resolve("tok") == DEFAULT
        assert len(client.load_calls) == 3

    @pytest.mark.asyncio
    async def test_invalidate_forces_rediscovery(self, endpoints):
        client = FakeBackendClient(
            load_responses=[
                ProviderResponse(status_code=200, body={"cloudaicompanionProject": "first"}),
                ProviderResponse(status_code=200, body={"cloudaicompanionProject": "second"}),
            ]
        )
        resolver = ProjectResolver(client, ProjectCache(), endpoints, DEFAULT)

        assert await resolver.resolve("tok") == "first"
        resolver.invalidate()
        assert await resolver.resolve("tok") == "second"

    def test_invalidate_on_empty_cache(self, endpoints):
        cache = ProjectCache()
        ProjectResolver(FakeBackendClient(), cache, endpoints, DEFAULT).invalidate()
        assert cache.get() is None
