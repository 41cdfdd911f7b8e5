from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image

from icon_packer.codecs.image_codec import decode_image
from icon_packer.codecs.png_chunks import PNG_SIGNATURE, read_text
from icon_packer.errors import IconPackerError, MalformedPng, UnsquareImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedEntry:
    size: int
    pixels: Image.Image
    text: str = ""


def decode_png_entry(png: bytes, *, label: str) -> DecodedEntry:
    """Decode one container payload: PNG signature, pixels, then ``rIPt`` text."""

    if not png.startswith(PNG_SIGNATURE):
        raise MalformedPng(f"{label}: payload is not a PNG stream")
    pixels = decode_image(png)
    if pixels.width != pixels.height:
        raise UnsquareImage(f"{label}: image is not square ({pixels.width}x{pixels.height})")
    return DecodedEntry(size=pixels.width, pixels=pixels, text=read_text(png))


def decode_png_entry_or_skip(png: bytes, *, label: str) -> DecodedEntry | None:
    try:
        return decode_png_entry(png, label=label)
    except IconPackerError as exc:
        logger.warning("skipping icon entry: %s", exc.message)
        return None
