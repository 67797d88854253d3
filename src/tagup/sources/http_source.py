"""DatasetSource downloading resources over HTTP with httpx.

Fails loudly: any transport error or non-2xx response becomes a
SourceError, which moves the service to "failed". There are no retries.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tagup.errors import SourceError
from tagup.sources.protocol import RESOURCES

logger = logging.getLogger(__name__)


class HttpSource:
    """Fetches resources from `<base_url>/<file name>`.

    A client passed in by the caller is used as-is and left open; otherwise
    a client is created per request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            base_url: URL of the dataset `dist/` folder.
            timeout: Per-request timeout in seconds.
            client: Optional shared client (e.g. one with a mock transport).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def url_for(self, name: str) -> str:
        if name not in RESOURCES:
            raise SourceError(name, "unknown resource")
        return f"{self._base_url}/{RESOURCES[name]}"

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        response = await client.get(url, timeout=self._timeout)
        response.raise_for_status()
        return response

    async def get(self, name: str) -> dict[str, Any]:
        url = self.url_for(name)
        logger.info(f"[HttpSource] Fetching {name} from {url}")
        try:
            if self._client is not None:
                response = await self._fetch(self._client, url)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    response = await self._fetch(client, url)
            return response.json()
        except httpx.HTTPStatusError as e:
            raise SourceError(name, f"HTTP {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise SourceError(name, f"request to {url} failed: {e}") from e
        except ValueError as e:
            raise SourceError(name, f"invalid JSON from {url}: {e}") from e
