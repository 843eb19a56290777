import asyncio
from io import BytesIO

import pytest
from PIL import Image

from conftest import make_image_bytes
from image_edge.core.errors import TransformError
from image_edge.core.params import TransformParams
from image_edge.core.transformer import PillowTransformer, media_type_for


def _params(**overrides) -> TransformParams:
    values = dict(origin="https://ex.com/a.png", format="png", width=100, mode="fit")
    values.update(overrides)
    return TransformParams(**values)


def _open(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image


@pytest.fixture
def transformer():
    return PillowTransformer()


def test_ensure_ready_is_idempotent(transformer):
    asyncio.run(transformer.ensure_ready())
    asyncio.run(transformer.ensure_ready())
    assert transformer._ready


def test_fit_width_png(transformer):
    output = transformer.transform(make_image_bytes(200, 100), _params())
    image = _open(output)
    assert image.format == "PNG"
    assert image.size == (100, 50)


def test_fill_crops_to_canvas(transformer):
    output = transformer.transform(make_image_bytes(300, 300), _params(width=60, height=10, mode="fill"))
    assert _open(output).size == (60, 10)


def test_fit_box_leaves_transparent_margin(transformer):
    output = transformer.transform(make_image_bytes(200, 100), _params(width=40, height=40))
    image = _open(output).convert("RGBA")
    assert image.size == (40, 40)
    assert image.getpixel((20, 0))[3] == 0
    assert image.getpixel((20, 20)) == (0, 128, 255, 255)


def test_background_fills_margin(transformer):
    output = transformer.transform(
        make_image_bytes(200, 100),
        _params(width=40, height=40, bg=(255, 0, 0)),
    )
    image = _open(output).convert("RGBA")
    assert image.getpixel((20, 0)) == (255, 0, 0, 255)


def test_jpeg_output(transformer):
    output = transformer.transform(make_image_bytes(200, 100), _params(format="jpg", quality=80))
    image = _open(output)
    assert image.format == "JPEG"
    assert image.size == (100, 50)


def test_jpeg_input_is_accepted(transformer):
    output = transformer.transform(make_image_bytes(50, 50, fmt="JPEG"), _params(width=0, height=25))
    assert _open(output).size == (25, 25)


def test_undecodable_bytes(transformer):
    with pytest.raises(TransformError, match="could not load image"):
        transformer.transform(b"definitely not an image", _params())


def test_fill_without_both_dimensions(transformer):
    with pytest.raises(TransformError, match="mode needs width and height"):
        transformer.transform(make_image_bytes(), _params(mode="fill"))


def test_size_rounding_to_zero(transformer):
    with pytest.raises(TransformError, match="sizing errors"):
        transformer.transform(make_image_bytes(1000, 10), _params(width=10))


def test_invalid_params_refused(transformer):
    with pytest.raises(TransformError):
        transformer.transform(make_image_bytes(), _params(errors=["mode must be one of fill, fit, limit"]))


def test_media_types():
    assert media_type_for("jpg") == "image/jpeg"
    assert media_type_for("png") == "image/png"


def test_pixel_limit_checked_before_allocation():
    transformer = PillowTransformer(max_pixels=10_000)
    with pytest.raises(TransformError, match="too large"):
        transformer.transform(make_image_bytes(), _params(width=200, height=200, mode="fill"))
    assert _open(transformer.transform(make_image_bytes(), _params(width=100))).size == (100, 50)


def test_scaled_image_counts_against_pixel_limit():
    transformer = PillowTransformer(max_pixels=10_000)
    with pytest.raises(TransformError, match="too large"):
        transformer.transform(make_image_bytes(), _params(width=50, height=50, mode="fill", scale=10))
