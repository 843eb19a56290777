"""
Top-level dispatch for image requests.
"""

import logging
from typing import Iterable

from .http_messages import CachedResponse, InboundRequest, text_response
from .params import DEFAULT_QUALITY, parse_params
from .resize_metrics import record_resolution
from .origin_client import OriginClient
from .resolver import ImageResolver
from .response_cache import MemoryResponseCache, ResponseCache
from .transformer import PillowTransformer

logger = logging.getLogger(__name__)


class ImageHandler:
    def __init__(
        self,
        cache: ResponseCache,
        resolver: ImageResolver,
        cache_key_headers: Iterable[str] = ("accept",),
        default_quality: int = DEFAULT_QUALITY,
    ):
        self.cache = cache
        self.resolver = resolver
        self.cache_key_headers = tuple(cache_key_headers)
        self.default_quality = default_quality

    async def handle(self, request: InboundRequest) -> CachedResponse:
        if request.method.upper() != "GET":
            record_resolution("method_not_allowed")
            return text_response(405, "http method not allowed")

        cached = await self.cache.lookup(request.cache_key(self.cache_key_headers))
        if cached is not None:
            logger.debug("[handler] cache hit for %s", request.url)
            record_resolution("cache_hit")
            return cached

        params = parse_params(request.url, default_quality=self.default_quality)
        if not params.is_valid:
            record_resolution("invalid")
            return text_response(400, "\r\n".join(params.errors))

        return await self.resolver.resolve(request, params)


def build_image_handler(settings) -> ImageHandler:
    """Wire the default cache, origin client and transformer from settings."""
    cache = MemoryResponseCache(
        max_entries=settings.CACHE_MAX_ENTRIES,
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    resolver = ImageResolver(
        cache=cache,
        origin_client=OriginClient(timeout=settings.ORIGIN_TIMEOUT_SECONDS),
        transformer=PillowTransformer(max_pixels=settings.MAX_OUTPUT_PIXELS),
        cache_key_headers=settings.CACHE_KEY_HEADERS,
    )
    return ImageHandler(
        cache=cache,
        resolver=resolver,
        cache_key_headers=settings.CACHE_KEY_HEADERS,
        default_quality=settings.JPEG_QUALITY,
    )
