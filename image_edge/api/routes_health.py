from fastapi import APIRouter, Depends, status

from .. import __version__
from ..core.handler import ImageHandler
from ..core.resize_metrics import get_resolution_metrics
from .images import get_image_handler

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health() -> dict:
    return {"status": "ok"}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
async def detailed_health(handler: ImageHandler = Depends(get_image_handler)) -> dict:
    """Cache occupancy and how requests have been resolved so far."""
    stats = getattr(handler.cache, "stats", None)
    return {
        "status": "ok",
        "version": __version__,
        "cache": stats() if callable(stats) else None,
        "resolutions": get_resolution_metrics(),
    }
