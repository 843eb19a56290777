"""
Framework-neutral request/response values used by the resize pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

# Headers copied onto the synthesized origin request.
FORWARDED_HEADERS = ("accept", "accept-language", "user-agent")


@dataclass(frozen=True)
class RequestKey:
    """Cache identity of a request: method, full URL and cache-relevant headers."""
    method: str
    url: str
    headers: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class InboundRequest:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None

    def cache_key(self, vary: Iterable[str]) -> RequestKey:
        pairs = []
        for name in sorted({name.lower() for name in vary}):
            value = self.header(name)
            if value is not None:
                pairs.append((name, value))
        return RequestKey(method=self.method.upper(), url=self.url, headers=tuple(pairs))

    def derive(self, url: str) -> "InboundRequest":
        """Build the origin-fetch request for `url`, inheriting method and forwarded headers."""
        headers = {}
        for name in FORWARDED_HEADERS:
            value = self.header(name)
            if value is not None:
                headers[name] = value
        return InboundRequest(method=self.method, url=url, headers=headers)


@dataclass(frozen=True)
class CachedResponse:
    status: int
    headers: Dict[str, str]
    body: bytes = b""

    @property
    def content_type(self) -> Optional[str]:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return None


def text_response(status: int, text: str) -> CachedResponse:
    return CachedResponse(
        status=status,
        headers={"content-type": "text/plain; charset=utf-8"},
        body=text.encode("utf-8"),
    )
