"""Apple .icns icon family, PNG-backed OSTypes only.

Layout (big-endian):
  header  magic(4)="icns" file_length(4)
  entries ostype(4) entry_length(4, includes these 8 bytes) data(entry_length - 8)
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable

from icon_packer.codecs.entries import DecodedEntry, decode_png_entry_or_skip
from icon_packer.codecs.image_codec import encode_png
from icon_packer.codecs.png_chunks import PNG_SIGNATURE, embed_text
from icon_packer.config import settings
from icon_packer.domain.pack import IconSlot
from icon_packer.errors import BadMagic, NothingToExport, TruncatedFile, UnmappedIcnsSize

logger = logging.getLogger(__name__)

ICNS_MAGIC = b"icns"

_HEADER = struct.Struct(">4sI")

# Canonical size -> OSType, the only types written.
ICNS_TYPES: dict[int, bytes] = {
    16: b"icp4",
    32: b"ic11",
    48: b"SB24",
    64: b"ic12",
    128: b"ic07",
    256: b"ic13",
    512: b"ic14",
    1024: b"ic10",
}

# Legacy and retina duplicates, recognised on read only.
ICNS_ALIASES: dict[bytes, int] = {
    b"ic04": 16,
    b"icsb": 18,
    b"sb24": 24,
    b"icp5": 32,
    b"ic05": 32,
    b"icsB": 36,
    b"icp6": 64,
    b"ic08": 256,
    b"ic09": 512,
}

_PNG_TYPES: frozenset[bytes] = frozenset(ICNS_TYPES.values()) | frozenset(ICNS_ALIASES)


def ostype_for_size(size: int) -> bytes:
    try:
        return ICNS_TYPES[size]
    except KeyError:
        raise UnmappedIcnsSize(f"no ICNS type for {size}x{size}") from None


def read_icns_chunks(data: bytes) -> list[tuple[bytes, bytes]]:
    if len(data) < _HEADER.size:
        raise TruncatedFile(f"ICNS header needs {_HEADER.size} bytes, got {len(data)}")
    magic, file_length = _HEADER.unpack_from(data, 0)
    if magic != ICNS_MAGIC:
        raise BadMagic(f"not an ICNS file (magic {magic!r})")

    end = min(file_length, len(data))
    if file_length > len(data):
        logger.warning("ICNS declares %d bytes but only %d are present", file_length, len(data))

    chunks: list[tuple[bytes, bytes]] = []
    offset = _HEADER.size
    while offset < end:
        if len(chunks) >= settings.icns_max_entries:
            logger.warning("ICNS entry limit (%d) reached; ignoring the rest", settings.icns_max_entries)
            break
        if offset + 8 > len(data):
            raise TruncatedFile(f"ICNS entry header at {offset} runs past end of file")
        ostype, length = _HEADER.unpack_from(data, offset)
        if length < 8 or offset + length > len(data):
            raise TruncatedFile(f"ICNS entry {ostype!r} has invalid length {length}")
        chunks.append((ostype, data[offset + 8 : offset + length]))
        offset += length
    return chunks


def decode_icns(data: bytes) -> list[DecodedEntry]:
    out: list[DecodedEntry] = []
    for ostype, payload in read_icns_chunks(data):
        if ostype not in _PNG_TYPES:
            logger.debug("skipping ICNS entry %r (%d bytes)", ostype, len(payload))
            continue
        if not payload.startswith(PNG_SIGNATURE):
            # JPEG 2000 / raw ARGB variants of the same OSTypes.
            logger.warning("skipping ICNS entry %r: payload is not PNG", ostype)
            continue
        tag = ostype.decode("latin-1")
        decoded = decode_png_entry_or_skip(payload, label=f"ICNS entry {tag!r}")
        if decoded is not None:
            out.append(decoded)
    return out


def encode_icns(slots: Iterable[IconSlot], *, embed_metadata: bool = True) -> bytes:
    parts: list[bytes] = []
    for slot in slots:
        if not slot.valid:
            continue
        try:
            ostype = ostype_for_size(slot.size)
        except UnmappedIcnsSize as exc:
            logger.warning("skipping slot: %s", exc.message)
            continue
        blob = encode_png(slot.pixels)
        if embed_metadata and slot.text:
            blob = embed_text(blob, slot.text)
        parts.append(_HEADER.pack(ostype, 8 + len(blob)) + blob)

    if not parts:
        raise NothingToExport("no valid icon images with an ICNS type to export")

    body = b"".join(parts)
    return _HEADER.pack(ICNS_MAGIC, _HEADER.size + len(body)) + body
