"""readme.io REST API client."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from docsync.models.config import SyncConfig

logger = logging.getLogger(__name__)

_VERSION_HEADER = "x-readme-version"


class ReadmeClient:
    """Async client for the docs and categories endpoints.

    The API key is sent as the basic-auth user name, the documentation
    version as the ``x-readme-version`` header.
    """

    def __init__(self, config: SyncConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        config.require_remote()
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url.rstrip("/"),
            auth=(config.api_key, ""),
            headers={_VERSION_HEADER: config.docs_version},
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ReadmeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        logger.debug("Readme API: %s %s", method, url)
        resp = await self._client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp.json()

    async def list_category_docs(self, category: str) -> List[Dict[str, Any]]:
        """Return the doc tree of *category* (each doc may carry ``children``)."""
        return await self._request("GET", f"/categories/{category}/docs")

    async def get_doc(self, slug: str) -> Dict[str, Any]:
        return await self._request("GET", f"/docs/{slug}")

    async def update_doc(self, slug: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/docs/{slug}", json=payload)
