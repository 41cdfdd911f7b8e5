from __future__ import annotations

import io
from collections.abc import Callable

import pytest
from PIL import Image, ImageDraw

from icon_packer.codecs.png_chunks import embed_text


def _make_image(width: int, height: int | None = None, color=(200, 40, 40, 255)) -> Image.Image:
    height = width if height is None else height
    image = Image.new("RGBA", (width, height), color)
    if width > 4 and height > 4:
        # A second colour makes scaling and pixel comparisons meaningful.
        ImageDraw.Draw(image).rectangle((0, 0, width // 2, height // 2), fill=(20, 90, 220, 180))
    return image


def _png(image: Image.Image, text: str = "") -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return embed_text(buf.getvalue(), text)


@pytest.fixture
def make_image() -> Callable[..., Image.Image]:
    return _make_image


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    def _factory(width: int, height: int | None = None, *, text: str = "") -> bytes:
        return _png(_make_image(width, height), text)

    return _factory
