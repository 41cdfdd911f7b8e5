"""Windows .ico container, PNG-payload variant.

Layout (little-endian):
  ICONDIR       reserved(2)=0 type(2)=1 count(2)
  ICONDIRENTRY  width(1) height(1) colors(1) reserved(1) planes(2) bpp(2)
                bytes_in_res(4) image_offset(4)        -- repeated `count` times
  payloads      concatenated PNG streams, in directory order
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable
from dataclasses import dataclass

from icon_packer.codecs.entries import DecodedEntry, decode_png_entry_or_skip
from icon_packer.codecs.image_codec import encode_png
from icon_packer.codecs.png_chunks import embed_text
from icon_packer.domain.pack import IconSlot
from icon_packer.errors import NothingToExport, TruncatedFile, UnsupportedImageType

logger = logging.getLogger(__name__)

ICO_MAGIC = b"\x00\x00\x01\x00"
ICO_MAX_SIZE = 256

_HEADER = struct.Struct("<HHH")
_DIR_ENTRY = struct.Struct("<BBBBHHII")


@dataclass(frozen=True)
class IcoDirEntry:
    width: int
    height: int
    color_count: int
    reserved: int
    planes: int
    bit_count: int
    bytes_in_res: int
    image_offset: int


def _width_height_byte(v: int) -> int:
    # ICO uses 1 byte for width/height; 0 means 256.
    if v == ICO_MAX_SIZE:
        return 0
    if not (1 <= v <= 255):
        raise ValueError(f"icon size out of range for ICO: {v}")
    return v


def read_directory(data: bytes) -> list[IcoDirEntry]:
    if len(data) < _HEADER.size:
        raise TruncatedFile(f"ICO header needs {_HEADER.size} bytes, got {len(data)}")
    reserved, image_type, count = _HEADER.unpack_from(data, 0)
    if reserved != 0 or image_type != 1:
        raise UnsupportedImageType(
            f"unsupported ICO image type {image_type} (reserved={reserved})"
        )

    dir_end = _HEADER.size + _DIR_ENTRY.size * count
    if dir_end > len(data):
        raise TruncatedFile(
            f"ICO declares {count} images but directory is truncated "
            f"({len(data)} of {dir_end} bytes)"
        )

    entries = [
        IcoDirEntry(*_DIR_ENTRY.unpack_from(data, _HEADER.size + i * _DIR_ENTRY.size))
        for i in range(count)
    ]
    for i, entry in enumerate(entries):
        if entry.image_offset + entry.bytes_in_res > len(data):
            raise TruncatedFile(
                f"ICO image {i} data ({entry.bytes_in_res} bytes at {entry.image_offset}) "
                "runs past end of file"
            )
    return entries


def decode_ico(data: bytes) -> list[DecodedEntry]:
    """Decode every PNG-backed image of an .ico file.

    Header/directory problems abort the whole decode; a bad individual image
    (not PNG, undecodable, not square) is logged and skipped.
    """

    out: list[DecodedEntry] = []
    for i, entry in enumerate(read_directory(data)):
        blob = data[entry.image_offset : entry.image_offset + entry.bytes_in_res]
        decoded = decode_png_entry_or_skip(blob, label=f"ICO image {i}")
        if decoded is not None:
            out.append(decoded)
    return out


def encode_ico(slots: Iterable[IconSlot], *, embed_metadata: bool = True) -> bytes:
    images: list[tuple[int, bytes]] = []
    for slot in slots:
        if not slot.valid:
            continue
        if slot.size > ICO_MAX_SIZE:
            logger.warning("skipping %dx%d slot: too large for ICO", slot.size, slot.size)
            continue
        blob = encode_png(slot.pixels)
        if embed_metadata and slot.text:
            blob = embed_text(blob, slot.text)
        images.append((slot.size, blob))

    if not images:
        raise NothingToExport("no valid icon images to export")

    count = len(images)
    header = _HEADER.pack(0, 1, count)
    entries: list[bytes] = []
    blobs: list[bytes] = []

    # ICONDIR (6 bytes) + N * ICONDIRENTRY (16 bytes each)
    offset = _HEADER.size + _DIR_ENTRY.size * count
    for size, blob in images:
        side = _width_height_byte(size)
        entry = _DIR_ENTRY.pack(
            side,
            side,
            0,  # color count
            0,  # reserved
            1,  # planes
            32,  # bit count
            len(blob),
            offset,
        )
        entries.append(entry)
        blobs.append(blob)
        offset += len(blob)

    return header + b"".join(entries) + b"".join(blobs)
