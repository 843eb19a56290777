"""
Image resize endpoint.

Any path ending in .jpg or .png is an image request; the extension picks
the output format and the query carries the origin URL and transform
parameters.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from ..core.config import settings
from ..core.handler import ImageHandler, build_image_handler
from ..core.http_messages import InboundRequest

router = APIRouter(tags=["images"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

_image_handler: Optional[ImageHandler] = None


def get_image_handler() -> ImageHandler:
    global _image_handler
    if _image_handler is None:
        _image_handler = build_image_handler(settings)
    return _image_handler


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def resize_image(request: Request, handler: ImageHandler = Depends(get_image_handler)):
    inbound = InboundRequest(
        method=request.method,
        url=str(request.url),
        headers=dict(request.headers),
    )
    result = await handler.handle(inbound)
    return Response(content=result.body, status_code=result.status, headers=result.headers)
