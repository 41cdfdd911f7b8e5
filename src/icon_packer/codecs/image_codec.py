"""Pillow-backed image codec: raw bytes <-> RGBA pixel buffers, and scaling."""

from __future__ import annotations

import io
from enum import Enum

from PIL import Image, UnidentifiedImageError

from icon_packer.errors import UnsupportedImageData


class ScaleAlgorithm(str, Enum):
    NEAREST = "nearest"
    BICUBIC = "bicubic"


_RESAMPLE: dict[ScaleAlgorithm, Image.Resampling] = {
    ScaleAlgorithm.NEAREST: Image.Resampling.NEAREST,
    ScaleAlgorithm.BICUBIC: Image.Resampling.BICUBIC,
}

# Numeric ids used by the legacy command-line tool.
_LEGACY_IDS: dict[str, ScaleAlgorithm] = {
    "1": ScaleAlgorithm.NEAREST,
    "2": ScaleAlgorithm.BICUBIC,
}


def parse_scale_algorithm(value: ScaleAlgorithm | str) -> ScaleAlgorithm:
    if isinstance(value, ScaleAlgorithm):
        return value
    key = value.strip().lower()
    if key in _LEGACY_IDS:
        return _LEGACY_IDS[key]
    return ScaleAlgorithm(key)


def decode_image(data: bytes) -> Image.Image:
    """Decode PNG/BMP/QOI (anything Pillow reads) into a loaded RGBA image."""

    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return im.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise UnsupportedImageData(f"cannot decode image data: {exc}") from exc


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def scale_image(image: Image.Image, size: int, algorithm: ScaleAlgorithm) -> Image.Image:
    if size <= 0:
        raise ValueError(f"scale target must be positive: {size}")
    return image.resize((size, size), resample=_RESAMPLE[algorithm])
