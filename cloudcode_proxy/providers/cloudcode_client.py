"""
Cloud Code Backend Client

Implements the two private gateway calls used by the proxy:
``v1internal:loadCodeAssist`` (project discovery) and
``v1internal:generateContent`` (completion).
"""

import json
import logging
from typing import Any, Optional

import httpx

from cloudcode_proxy.common.constants import (
    CLIENT_METADATA,
    CLOUDCODE_HEADERS,
    GENERATE_CONTENT_PATH,
    LOAD_CODE_ASSIST_PATH,
)
from cloudcode_proxy.common.sanitizer import sanitize_headers
from cloudcode_proxy.config import get_settings
from cloudcode_proxy.providers.base import BackendClient, ProviderResponse

logger = logging.getLogger(__name__)


class CloudCodeClient(BackendClient):
    """Cloud Code gateway client over a shared httpx connection pool."""

    def __init__(self, timeout: Optional[int] = None):
        settings = get_settings()
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self) -> None:
        """Close HTTP Client"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _prepare_headers(token: str) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        headers.update(CLOUDCODE_HEADERS)
        return headers

    @staticmethod
    def _build_url(base_url: str, path: str) -> str:
        cleaned_base = base_url.rstrip("/")
        cleaned_path = path if path.startswith("/") else f"/{path}"
        return f"{cleaned_base}{cleaned_path}"

    async def _post(self, url: str, token: str, body: dict[str, Any]) -> ProviderResponse:
        prepared_headers = self._prepare_headers(token)

        logger.debug(
            "Cloud Code Request: url=%s headers=%s body=%s",
            url,
            sanitize_headers(prepared_headers),
            json.dumps(body, ensure_ascii=False)[:2000],
        )

        try:
            response = await self._get_client().post(url, headers=prepared_headers, json=body)
        except httpx.TimeoutException as e:
            return ProviderResponse(
                status_code=504,
                error=f"Request timeout: {str(e)}",
                transport_error=True,
            )
        except httpx.RequestError as e:
            return ProviderResponse(
                status_code=502,
                error=f"Request error: {str(e)}",
                transport_error=True,
            )

        response_body: Any = response.text
        try:
            response_body = response.json()
        except json.JSONDecodeError:
            pass

        logger.debug("Cloud Code Response: url=%s status=%s", url, response.status_code)

        return ProviderResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response_body,
        )

    async def load_code_assist(self, base_url: str, token: str) -> ProviderResponse:
        url = self._build_url(base_url, LOAD_CODE_ASSIST_PATH)
        return await self._post(url, token, {"metadata": dict(CLIENT_METADATA)})

    async def generate_content(
        self,
        base_url: str,
        token: str,
        payload: dict[str, Any],
    ) -> ProviderResponse:
        url = self._build_url(base_url, GENERATE_CONTENT_PATH)
        return await self._post(url, token, payload)
