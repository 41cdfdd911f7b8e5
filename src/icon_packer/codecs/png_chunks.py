"""PNG chunk walker and the ``rIPt`` text metadata chunk.

A PNG stream is the 8-byte signature followed by chunks laid out as
``length(4, BE) type(4) data(length) crc(4, BE)``; the CRC covers type + data.
"""

from __future__ import annotations

import struct
import zlib
from collections.abc import Iterator

from icon_packer.errors import MalformedPng

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
METADATA_TAG = b"rIPt"
METADATA_MAX_BYTES = 39

_IEND = b"IEND"
_MAX_CHUNK_LENGTH = 0x7FFFFFFF


def _check_tag(tag: bytes) -> None:
    if len(tag) != 4 or not tag.isalpha() or not tag.isascii():
        raise ValueError(f"invalid PNG chunk type: {tag!r}")


def _iter_chunk_spans(png: bytes) -> Iterator[tuple[bytes, int, int]]:
    # Yields (type, data_start, data_end); the last yielded chunk is IEND.
    if not png.startswith(PNG_SIGNATURE):
        raise MalformedPng("not a PNG stream (signature mismatch)")

    offset = len(PNG_SIGNATURE)
    while True:
        if offset + 8 > len(png):
            raise MalformedPng("PNG stream ends without IEND chunk")
        length, ctype = struct.unpack(">I4s", png[offset : offset + 8])
        if length > _MAX_CHUNK_LENGTH:
            raise MalformedPng(f"chunk length out of range: {length}")
        data_start = offset + 8
        data_end = data_start + length
        if data_end + 4 > len(png):
            raise MalformedPng(f"chunk {ctype!r} runs past end of stream")
        yield ctype, data_start, data_end
        if ctype == _IEND:
            return
        offset = data_end + 4


def iter_chunks(png: bytes) -> Iterator[tuple[bytes, bytes]]:
    for ctype, start, end in _iter_chunk_spans(png):
        yield ctype, png[start:end]


def read_chunk(png: bytes, tag: bytes) -> bytes | None:
    """Return the payload of the first ``tag`` chunk, or None when absent."""

    _check_tag(tag)
    for ctype, start, end in _iter_chunk_spans(png):
        if ctype == tag:
            return png[start : min(end, start + METADATA_MAX_BYTES)]
    return None


def build_chunk(tag: bytes, payload: bytes) -> bytes:
    _check_tag(tag)
    crc = zlib.crc32(tag + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + tag + payload + struct.pack(">I", crc)


def write_chunk(png: bytes, tag: bytes, payload: bytes) -> bytes:
    """Return a copy of ``png`` with a ``tag`` chunk inserted before IEND."""

    iend_offset: int | None = None
    for ctype, start, _end in _iter_chunk_spans(png):
        if ctype == _IEND:
            iend_offset = start - 8
    if iend_offset is None:  # pragma: no cover - _iter_chunk_spans raises first
        raise MalformedPng("PNG stream ends without IEND chunk")

    return png[:iend_offset] + build_chunk(tag, payload) + png[iend_offset:]


def clamp_text(text: str) -> str:
    """Trim ``text`` to the metadata byte limit without splitting a character."""

    raw = text.encode("utf-8")
    if len(raw) <= METADATA_MAX_BYTES:
        return text
    return raw[:METADATA_MAX_BYTES].decode("utf-8", errors="ignore")


def read_text(png: bytes) -> str:
    payload = read_chunk(png, METADATA_TAG)
    if not payload:
        return ""
    return payload.decode("utf-8", errors="replace")


def embed_text(png: bytes, text: str) -> bytes:
    if not text:
        return png
    return write_chunk(png, METADATA_TAG, clamp_text(text).encode("utf-8"))
