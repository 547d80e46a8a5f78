"""
Credential Provider Module

Supplies the bearer token used against Cloud Code.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from cloudcode_proxy.common.errors import CredentialUnavailableError
from cloudcode_proxy.common.sanitizer import token_prefix

logger = logging.getLogger(__name__)


class CredentialProvider(ABC):
    """
    Credential Provider Abstract Base Class

    Implementations may raise CredentialUnavailableError from both methods.
    """

    @abstractmethod
    async def get_token(self) -> str:
        """Return a usable bearer token, possibly cached"""
        pass

    @abstractmethod
    async def force_refresh(self) -> str:
        """Discard any cached token and obtain a fresh one"""
        pass


class CachedTokenProvider(CredentialProvider):
    """
    Token provider backed by a static value or a token file

    A static ``access_token`` takes precedence. Otherwise ``token_file`` is
    read and the token is reused for ``refresh_interval`` seconds before the
    file is read again, so an external tool can rotate it on disk.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        token_file: Optional[str] = None,
        refresh_interval: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.access_token = access_token.strip() if access_token else None
        self.token_file = token_file
        self.refresh_interval = refresh_interval
        self._clock = clock
        self._token: Optional[str] = None
        self._loaded_at: Optional[float] = None
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        if self._token is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < self.refresh_interval

    def _read_source(self) -> str:
        if self.access_token:
            return self.access_token

        if not self.token_file:
            raise CredentialUnavailableError(
                "No credential configured. Set ACCESS_TOKEN or TOKEN_FILE."
            )

        path = Path(self.token_file).expanduser()
        try:
            token = path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise CredentialUnavailableError(f"Could not read token file {path}: {e}") from e

        if not token:
            raise CredentialUnavailableError(f"Token file {path} is empty")
        return token

    async def _load(self) -> str:
        token = await asyncio.to_thread(self._read_source)
        self._token = token
        self._loaded_at = self._clock()
        logger.debug("Loaded credential: %s", token_prefix(token))
        return token

    async def get_token(self) -> str:
        async with self._lock:
            if self._is_fresh():
                return self._token  # type: ignore[return-value]
            return await self._load()

    async def force_refresh(self) -> str:
        async with self._lock:
            self._token = None
            self._loaded_at = None
            token = await self._load()
        logger.info("Credential refreshed: %s", token_prefix(token))
        return token
