"""
Geometry of a resize: canvas size, scaled image size and its placement.

Sizes are floats until `to_pixels()` rounds them. The placement offset
`(dx, dy)` slides the image inside the canvas: -1 aligns it to the
top/left edge, 0 centres it, 1 aligns it to the bottom/right edge.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .errors import TransformError

FILL = "fill"
FIT = "fit"
FIT_WIDTH = "fit_width"
FIT_HEIGHT = "fit_height"
LIMIT = "limit"


def round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def ratio(self) -> float:
        return self.height / self.width


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PixelLayout:
    canvas: tuple
    size: tuple
    origin: tuple


@dataclass(frozen=True)
class Layout:
    canvas: Size
    size: Size
    origin: Point

    def to_pixels(self) -> PixelLayout:
        return PixelLayout(
            canvas=(round_half_away(self.canvas.width), round_half_away(self.canvas.height)),
            size=(round_half_away(self.size.width), round_half_away(self.size.height)),
            origin=(round_half_away(self.origin.x), round_half_away(self.origin.y)),
        )


@dataclass(frozen=True)
class ResizeMode:
    kind: str
    width: int = 0
    height: int = 0


def resolve_mode(mode: str, width: Optional[int], height: Optional[int]) -> ResizeMode:
    """Map a request mode plus optional dimensions onto a concrete resize mode."""
    width = width if width and width > 0 else None
    height = height if height and height > 0 else None

    if mode == FIT:
        if width and height:
            return ResizeMode(FIT, width, height)
        if width:
            return ResizeMode(FIT_WIDTH, width=width)
        if height:
            return ResizeMode(FIT_HEIGHT, height=height)
        raise TransformError("mode needs width or height")
    if mode not in (FILL, LIMIT):
        raise TransformError("unknown mode")
    if not (width and height):
        raise TransformError("mode needs width and height")
    return ResizeMode(mode, width, height)


def canvas_size(input_size: Size, mode: ResizeMode) -> Size:
    ratio = input_size.ratio
    if mode.kind in (FILL, FIT):
        return Size(mode.width, mode.height)
    if mode.kind == FIT_WIDTH:
        return Size(mode.width, mode.width * ratio)
    if mode.kind == FIT_HEIGHT:
        return Size(mode.height / ratio, mode.height)
    if mode.kind == LIMIT:
        return Size(min(mode.height / ratio, mode.width), min(mode.width * ratio, mode.height))
    raise TransformError("unknown mode")


def output_size(input_size: Size, canvas: Size, mode: ResizeMode, scale: float = 1.0) -> Size:
    """Aspect-preserving size of the image: covers the canvas for fill, fits inside otherwise."""
    taller_canvas = canvas.ratio > input_size.ratio
    if mode.kind == FILL:
        match_height = taller_canvas
    else:
        match_height = not taller_canvas

    if match_height:
        factor = canvas.height / input_size.height
    else:
        factor = canvas.width / input_size.width

    return Size(input_size.width * factor * scale, input_size.height * factor * scale)


def output_origin(canvas: Size, size: Size, dx: float = 0.0, dy: float = 0.0) -> Point:
    offset_x = canvas.width / 2.0 - size.width / 2.0
    offset_y = canvas.height / 2.0 - size.height / 2.0
    return Point(offset_x + offset_x * dx, offset_y + offset_y * dy)


def plan_layout(
    input_width: int,
    input_height: int,
    mode: ResizeMode,
    dx: float = 0.0,
    dy: float = 0.0,
    scale: float = 1.0,
) -> Layout:
    if input_width <= 0 or input_height <= 0:
        raise TransformError("image has no pixels")
    input_size = Size(float(input_width), float(input_height))
    canvas = canvas_size(input_size, mode)
    size = output_size(input_size, canvas, mode, scale)
    return Layout(canvas=canvas, size=size, origin=output_origin(canvas, size, dx, dy))
