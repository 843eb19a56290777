"""
HTTP client for fetching origin images.
"""

import logging
from typing import Optional

import httpx

from .errors import FetchError
from .http_messages import CachedResponse, InboundRequest

logger = logging.getLogger(__name__)

# The body is stored already decoded, so these no longer describe it.
_DROPPED_HEADERS = {"content-encoding", "content-length", "transfer-encoding", "connection"}


class OriginClient:
    def __init__(self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, request: InboundRequest) -> CachedResponse:
        """Fetch the origin image once; non-2xx and transport failures raise FetchError."""
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.request(request.method, request.url, headers=dict(request.headers))
                response.raise_for_status()
            except httpx.TimeoutException:
                raise FetchError(f"origin request timed out: {request.url}")
            except httpx.HTTPStatusError as e:
                raise FetchError(f"origin returned HTTP {e.response.status_code}: {request.url}")
            except httpx.RequestError as e:
                raise FetchError(f"could not fetch origin {request.url}: {e}")

        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in _DROPPED_HEADERS
        }
        logger.debug("[origin] fetched %s (%d bytes)", request.url, len(response.content))
        return CachedResponse(status=response.status_code, headers=headers, body=response.content)
