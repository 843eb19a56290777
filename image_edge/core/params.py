"""
Parse and validate the query of an image request.

Every check runs regardless of earlier failures so the caller gets the
complete list of problems in one response.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlsplit

VALID_FORMATS = ("jpg", "png")
VALID_MODES = ("fill", "fit", "limit")
DEFAULT_QUALITY = 90

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")
_HEX_COLOUR = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

Colour = Tuple[int, int, int]


@dataclass
class TransformParams:
    origin: str = ""
    format: str = ""
    width: int = 0
    height: int = 0
    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0
    mode: str = ""
    quality: int = DEFAULT_QUALITY
    bg: Optional[Colour] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def parse_int(value: str) -> float:
    """Leading-integer parse; returns NaN when no digits lead the string."""
    match = _INT_PREFIX.match(value)
    if not match:
        return math.nan
    try:
        return int(match.group(1))
    except ValueError:
        # more digits than int() accepts from a string
        return math.nan


def parse_float(value: str) -> float:
    """Leading-float parse; returns NaN when no number leads the string."""
    match = _FLOAT_PREFIX.match(value)
    if not match:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def parse_colour(value: str) -> Optional[Colour]:
    match = _HEX_COLOUR.fullmatch(value.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def url_extension(path: str) -> str:
    """Lower-cased extension of the last path segment, or "" when it has none."""
    segment = unquote(path).rsplit("/", 1)[-1]
    if "." not in segment:
        return ""
    return segment.rsplit(".", 1)[-1].lower()


def is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value.strip())
        host = parts.hostname
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(host)


def parse_params(url: str, default_quality: int = DEFAULT_QUALITY) -> TransformParams:
    """Build a TransformParams from a request URL, collecting every validation error."""
    parts = urlsplit(url)
    query = {key: values[0] for key, values in parse_qs(parts.query, keep_blank_values=True).items()}

    errors: List[str] = []
    params = TransformParams(quality=default_quality, errors=errors)

    params.format = url_extension(parts.path)
    if params.format not in VALID_FORMATS:
        errors.append(f"image .extension must be one of {', '.join(VALID_FORMATS)}")

    origin = query.get("origin")
    if origin is not None and is_absolute_url(origin):
        params.origin = origin.strip()
    else:
        errors.append("origin must be a valid image URL")

    for axis in ("width", "height"):
        if axis not in query:
            continue
        value = parse_int(query[axis])
        if not value >= 0:
            errors.append(f"{axis} must be a positive number")
            continue
        setattr(params, axis, int(value))

    if not (params.width or params.height):
        errors.append("width and/or height must be provided")

    for axis in ("dx", "dy"):
        if axis not in query:
            continue
        value = parse_float(query[axis])
        if not -1.0 <= value <= 1.0:
            errors.append(f"{axis} must be between -1.0 and 1.0 (default: 0)")
            continue
        setattr(params, axis, value)

    if "scale" in query:
        value = parse_float(query["scale"])
        if 0.0 < value <= 10.0:
            params.scale = value
        else:
            errors.append("scale must be a non-zero number up to 10 (default: 1)")

    if "mode" in query:
        params.mode = query["mode"].lower()
    if params.mode not in VALID_MODES:
        errors.append(f"mode must be one of {', '.join(VALID_MODES)}")

    if "quality" in query:
        value = parse_int(query["quality"])
        if 1 <= value <= 100:
            params.quality = int(value)
        else:
            errors.append(f"quality must be between 1 and 100 (default: {default_quality})")

    if "bg" in query:
        params.bg = parse_colour(query["bg"])
        if params.bg is None:
            errors.append("bg must be a hex colour like fff or 336699")

    return params
