"""
Project Resolver Module

Discovers the routing project bound to the credential and caches it for the
lifetime of the process.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from cloudcode_proxy.providers.base import BackendClient

logger = logging.getLogger(__name__)


class ProjectCache:
    """
    Process-wide routing project holder

    Shared by reference between the resolver and the dispatcher. Last writer
    wins; no locking is needed on a single event loop.
    """

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def get(self) -> Optional[str]:
        return self.value

    def set(self, value: str) -> None:
        self.value = value

    def clear(self) -> None:
        self.value = None


def extract_project_id(body: Any) -> Optional[str]:
    """
    Read ``cloudaicompanionProject`` from a loadCodeAssist response

    The backend reports either a plain string or an object with an ``id``.
    """
    if not isinstance(body, Mapping):
        return None

    project = body.get("cloudaicompanionProject")
    if isinstance(project, str) and project:
        return project
    if isinstance(project, Mapping):
        project_id = project.get("id")
        if isinstance(project_id, str) and project_id:
            return project_id
    return None


class ProjectResolver:
    """
    Routing project discovery

    Hosts are asked in order; the first one that names a project wins. When
    none does, the default project is cached instead, so discovery runs at
    most once until the cache is invalidated.
    """

    def __init__(
        self,
        client: BackendClient,
        cache: ProjectCache,
        endpoints: Sequence[str],
        default_project_id: str,
    ):
        self.client = client
        self.cache = cache
        self.endpoints = list(endpoints)
        self.default_project_id = default_project_id

    async def resolve(self, token: str) -> str:
        """
        Return the routing project for ``token``

        Args:
            token: Bearer token

        Returns:
            str: Cached, discovered or default project id
        """
        cached = self.cache.get()
        if cached:
            return cached

        logger.info("Resolving project via loadCodeAssist")

        for endpoint in self.endpoints:
            response = await self.client.load_code_assist(endpoint, token)
            if not response.is_success:
                logger.info(
                    "loadCodeAssist failed: endpoint=%s status_code=%s error=%s",
                    endpoint,
                    response.status_code,
                    response.error,
                )
                continue

            project_id = extract_project_id(response.body)
            if project_id:
                logger.info("Resolved project: %s (endpoint=%s)", project_id, endpoint)
                self.cache.set(project_id)
                return project_id

            logger.info("No project in loadCodeAssist response: endpoint=%s", endpoint)

        logger.info("Using default project: %s", self.default_project_id)
        self.cache.set(self.default_project_id)
        return self.default_project_id

    def invalidate(self) -> None:
        """Forget the cached project"""
        self.cache.clear()
