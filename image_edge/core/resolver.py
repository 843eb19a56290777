"""
Fetch/transform orchestration for validated image requests.

Two cache entries come out of a successful resolution: the transformed
image under the client's request, and the raw origin response under the
synthesized origin request. The second lets later requests with different
dimensions for the same origin skip the network fetch.
"""

import asyncio
import logging
from typing import Iterable, Optional

from .errors import TransformError
from .http_messages import CachedResponse, InboundRequest, text_response
from .origin_client import OriginClient
from .params import TransformParams
from .resize_metrics import record_resolution
from .response_cache import ResponseCache
from .transformer import ImageTransformer, media_type_for

logger = logging.getLogger(__name__)


class ImageResolver:
    def __init__(
        self,
        cache: ResponseCache,
        origin_client: OriginClient,
        transformer: ImageTransformer,
        cache_key_headers: Iterable[str] = ("accept",),
    ):
        self.cache = cache
        self.origin_client = origin_client
        self.transformer = transformer
        self.cache_key_headers = tuple(cache_key_headers)

    async def resolve(self, request: InboundRequest, params: TransformParams) -> CachedResponse:
        if not params.is_valid:
            raise ValueError("resolve() needs validated parameters")

        request_key = request.cache_key(self.cache_key_headers)
        origin_request = request.derive(params.origin)
        origin_key = origin_request.cache_key(self.cache_key_headers)

        origin_response, _ = await asyncio.gather(
            self.cache.lookup(origin_key),
            self.transformer.ensure_ready(),
        )

        try:
            fresh_origin: Optional[CachedResponse] = None
            if origin_response is None:
                origin_response = await self.origin_client.fetch(origin_request)
                fresh_origin = origin_response
                record_resolution("origin_fetch")
            else:
                logger.debug("[resolver] origin cache hit for %s", params.origin)
                record_resolution("origin_cache_hit")

            output = await asyncio.to_thread(self.transformer.transform, origin_response.body, params)
        except TransformError as e:
            logger.warning("[resolver] could not resolve %s: %s", request.url, e)
            record_resolution("failed")
            return text_response(200, str(e))
        except Exception as e:
            logger.exception("[resolver] unexpected failure resolving %s", request.url)
            record_resolution("failed")
            return text_response(200, f"could not process image: {e}")

        response = CachedResponse(
            status=200,
            headers={"content-type": media_type_for(params.format)},
            body=output,
        )
        await self.cache.store(request_key, response)
        if fresh_origin is not None:
            await self.cache.store(origin_key, fresh_origin)
        record_resolution("transformed")
        return response
