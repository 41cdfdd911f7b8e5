from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import PurePath

from icon_packer.codecs.entries import DecodedEntry
from icon_packer.codecs.icns import ICNS_MAGIC, decode_icns, encode_icns
from icon_packer.codecs.ico import ICO_MAGIC, decode_ico, encode_ico
from icon_packer.codecs.image_codec import decode_image
from icon_packer.codecs.png_chunks import PNG_SIGNATURE, read_text
from icon_packer.domain.pack import IconSlot

logger = logging.getLogger(__name__)


class ContainerKind(str, Enum):
    ICO = "ico"
    ICNS = "icns"
    RAW_IMAGE = "raw_image"


_EXTENSIONS: dict[str, ContainerKind] = {
    ".ico": ContainerKind.ICO,
    ".icns": ContainerKind.ICNS,
    ".png": ContainerKind.RAW_IMAGE,
    ".bmp": ContainerKind.RAW_IMAGE,
    ".qoi": ContainerKind.RAW_IMAGE,
}

MEDIA_TYPES: dict[ContainerKind, str] = {
    ContainerKind.ICO: "image/vnd.microsoft.icon",
    ContainerKind.ICNS: "image/icns",
}


def detect_container_kind(filename: str | None, data: bytes) -> ContainerKind:
    """Pick the codec once, from the extension first and the magic bytes second."""

    if filename:
        kind = _EXTENSIONS.get(PurePath(filename).suffix.lower())
        if kind is not None:
            return kind
    if data.startswith(ICO_MAGIC):
        return ContainerKind.ICO
    if data.startswith(ICNS_MAGIC):
        return ContainerKind.ICNS
    return ContainerKind.RAW_IMAGE


def _decode_raw_image(data: bytes) -> list[DecodedEntry]:
    pixels = decode_image(data)
    if pixels.width != pixels.height:
        logger.warning("image is not square as expected (%dx%d)", pixels.width, pixels.height)
        return []
    text = read_text(data) if data.startswith(PNG_SIGNATURE) else ""
    return [DecodedEntry(size=pixels.width, pixels=pixels, text=text)]


def decode_container(kind: ContainerKind, data: bytes) -> list[DecodedEntry]:
    if kind is ContainerKind.ICO:
        return decode_ico(data)
    if kind is ContainerKind.ICNS:
        return decode_icns(data)
    return _decode_raw_image(data)


def encode_container(
    kind: ContainerKind, slots: Iterable[IconSlot], *, embed_metadata: bool = True
) -> bytes:
    if kind is ContainerKind.ICO:
        return encode_ico(slots, embed_metadata=embed_metadata)
    if kind is ContainerKind.ICNS:
        return encode_icns(slots, embed_metadata=embed_metadata)
    raise ValueError(f"cannot export an icon pack as {kind.value}")
