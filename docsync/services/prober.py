"""Network probe used to check that URL links resolve."""

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from docsync.exceptions import LinkResolutionError

logger = logging.getLogger(__name__)

TIMEOUT = 10  # seconds
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}

# Servers that refuse HEAD with these statuses are retried with GET
_HEAD_UNSUPPORTED = {405, 501}

_USER_AGENT = "docsync-link-checker"


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not an absolute http/https URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")


class UrlProber:
    """Check URLs with a single shared :class:`httpx.AsyncClient`.

    Use as an async context manager; calling the instance probes one URL and
    raises :class:`LinkResolutionError` when it does not answer with a
    success status.
    """

    def __init__(self, timeout: float = TIMEOUT, client: Optional[httpx.AsyncClient] = None):
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "UrlProber":
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
                timeout=self._timeout,
                headers={"User-Agent": _USER_AGENT},
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __call__(self, url: str) -> None:
        if self._client is None:
            raise RuntimeError("UrlProber must be used as an async context manager.")

        try:
            _validate_url(url)
            response = await self._client.head(url)
            if response.status_code in _HEAD_UNSUPPORTED:
                logger.debug("Prober: HEAD not supported by %s, retrying with GET", url)
                response = await self._client.get(url)
        except ValueError as exc:
            raise LinkResolutionError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise LinkResolutionError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise LinkResolutionError(f"HTTP {response.status_code}")
