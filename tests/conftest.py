from io import BytesIO

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from image_edge.api.images import get_image_handler
from image_edge.core.handler import ImageHandler
from image_edge.core.origin_client import OriginClient
from image_edge.core.resolver import ImageResolver
from image_edge.core.response_cache import MemoryResponseCache
from image_edge.core.transformer import PillowTransformer
from image_edge.main import app


def make_image_bytes(width=200, height=100, color=(0, 128, 255, 255), fmt="PNG") -> bytes:
    image = Image.new("RGBA", (width, height), color)
    if fmt == "JPEG":
        image = image.convert("RGB")
    output = BytesIO()
    image.save(output, format=fmt)
    return output.getvalue()


class OriginStub:
    """Callable for httpx.MockTransport that serves one body and records requests."""

    def __init__(self, body: bytes, status_code: int = 200, content_type: str = "image/png"):
        self.body = body
        self.status_code = status_code
        self.content_type = content_type
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"content-type": self.content_type},
        )

    @property
    def fetch_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def origin():
    """Origin serving a 200x100 PNG"""
    return OriginStub(make_image_bytes())


@pytest.fixture
def cache():
    return MemoryResponseCache(max_entries=32, ttl_seconds=60)


@pytest.fixture
def handler(origin, cache):
    resolver = ImageResolver(
        cache=cache,
        origin_client=OriginClient(transport=httpx.MockTransport(origin)),
        transformer=PillowTransformer(),
    )
    return ImageHandler(cache=cache, resolver=resolver)


@pytest.fixture
def client(handler):
    """Test client wired to the in-memory cache and the stub origin"""
    app.dependency_overrides[get_image_handler] = lambda: handler
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
