"""
Pillow-backed transform primitive: decode, resize/crop onto a canvas, encode.
"""

import asyncio
import logging
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image

from .errors import TransformError
from .layout import plan_layout, resolve_mode
from .params import TransformParams

logger = logging.getLogger(__name__)

PIL_FORMATS = {"jpg": "JPEG", "png": "PNG"}
MEDIA_TYPES = {"jpg": "image/jpeg", "png": "image/png"}
JPEG_MATTE = (255, 255, 255)
# Largest canvas or resized image, in pixels, a single transform may allocate.
DEFAULT_MAX_PIXELS = 40_000_000


def media_type_for(fmt: str) -> str:
    return MEDIA_TYPES.get(fmt, f"image/{fmt}")


class ImageTransformer:
    """Interface of the transform primitive used by the resolver."""

    async def ensure_ready(self) -> None:
        """Load whatever the transform needs; safe to call on every request."""

    def transform(self, data: bytes, params: TransformParams) -> bytes:
        raise NotImplementedError


class PillowTransformer(ImageTransformer):
    def __init__(self, max_pixels: int = DEFAULT_MAX_PIXELS):
        self.max_pixels = max_pixels
        self._ready = False

    async def ensure_ready(self) -> None:
        if self._ready:
            return
        await asyncio.to_thread(Image.init)
        self._ready = True
        logger.info("[transformer] Pillow codecs registered")

    def transform(self, data: bytes, params: TransformParams) -> bytes:
        if not params.is_valid:
            raise TransformError("refusing to transform invalid parameters")
        pil_format = PIL_FORMATS.get(params.format)
        if pil_format is None:
            raise TransformError(f"unsupported output format {params.format}")

        mode = resolve_mode(params.mode, params.width, params.height)
        image = _load(data)
        try:
            layout = plan_layout(
                image.width,
                image.height,
                mode,
                dx=params.dx,
                dy=params.dy,
                scale=params.scale,
            ).to_pixels()
        except (OverflowError, ValueError, ZeroDivisionError) as e:
            raise TransformError(f"could not place image due to sizing errors: {e}")

        canvas_w, canvas_h = layout.canvas
        size_w, size_h = layout.size
        if min(canvas_w, canvas_h, size_w, size_h) < 1:
            raise TransformError("could not place image due to sizing errors")
        if max(canvas_w * canvas_h, size_w * size_h) > self.max_pixels:
            raise TransformError(f"output image too large (limit {self.max_pixels} pixels)")

        try:
            if params.bg is not None:
                image = _flatten(image, params.bg)
            resized = image.resize((size_w, size_h), Image.Resampling.BILINEAR)

            canvas = Image.new("RGBA", (canvas_w, canvas_h), (0, 0, 0, 0))
            canvas.paste(resized, layout.origin)

            matte = params.bg
            if matte is None and pil_format == "JPEG":
                matte = JPEG_MATTE
            if matte is not None:
                canvas = _flatten(canvas, matte)
        except (OverflowError, ValueError, MemoryError, Image.DecompressionBombError) as e:
            raise TransformError(f"could not render image: {e}")

        return _encode(canvas, pil_format, params.quality)


def _load(data: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(data))
        image.load()
        return image.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise TransformError(f"could not load image {e}")


def _flatten(image: Image.Image, colour: Tuple[int, int, int]) -> Image.Image:
    """Composite an RGBA image onto an opaque colour."""
    background = Image.new("RGBA", image.size, colour + (255,))
    background.alpha_composite(image)
    return background


def _encode(image: Image.Image, pil_format: str, quality: Optional[int]) -> bytes:
    output = BytesIO()
    try:
        if pil_format == "JPEG":
            image.convert("RGB").save(output, format="JPEG", quality=quality or 90)
        else:
            image.save(output, format=pil_format, optimize=True)
    except (OSError, ValueError) as e:
        raise TransformError(f"could not encode image {e}")
    return output.getvalue()
