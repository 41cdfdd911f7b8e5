from __future__ import annotations

import io
import struct
import zlib

import pytest
from PIL import Image

from icon_packer.codecs.png_chunks import (
    METADATA_TAG,
    PNG_SIGNATURE,
    embed_text,
    iter_chunks,
    read_chunk,
    read_text,
    write_chunk,
)
from icon_packer.errors import MalformedPng


def _chunk_types(png: bytes) -> list[bytes]:
    return [ctype for ctype, _ in iter_chunks(png)]


def test_write_chunk_inserts_before_iend(make_png):
    png = make_png(8)
    out = write_chunk(png, METADATA_TAG, b"hello")

    types = _chunk_types(out)
    assert types[-1] == b"IEND"
    assert types[-2] == METADATA_TAG
    assert len(out) == len(png) + 12 + 5
    # Input is untouched.
    assert METADATA_TAG not in _chunk_types(png)


def test_written_chunk_has_valid_length_and_crc(make_png):
    out = write_chunk(make_png(8), b"tEXt", b"Comment\x00x")
    idx = out.index(b"tEXt")
    (length,) = struct.unpack(">I", out[idx - 4 : idx])
    payload = out[idx + 4 : idx + 4 + length]
    (crc,) = struct.unpack(">I", out[idx + 4 + length : idx + 8 + length])
    assert payload == b"Comment\x00x"
    assert crc == zlib.crc32(b"tEXt" + payload) & 0xFFFFFFFF


def test_pillow_still_decodes_png_with_metadata_chunk(make_png):
    out = embed_text(make_png(16), "some text")
    with Image.open(io.BytesIO(out)) as im:
        im.load()
        assert im.size == (16, 16)


def test_read_chunk_absent_returns_none(make_png):
    png = make_png(8)
    assert read_chunk(png, METADATA_TAG) is None
    assert read_text(png) == ""


def test_read_chunk_truncates_long_payload(make_png):
    out = write_chunk(make_png(8), METADATA_TAG, b"x" * 100)
    assert read_chunk(out, METADATA_TAG) == b"x" * 39


def test_text_round_trip(make_png):
    out = embed_text(make_png(8), "héllo")
    assert read_text(out) == "héllo"


def test_embed_empty_text_is_identity(make_png):
    png = make_png(8)
    assert embed_text(png, "") is png


def test_embed_long_text_is_clamped(make_png):
    out = embed_text(make_png(8), "a" * 80)
    assert read_text(out) == "a" * 39


def test_bad_signature_is_malformed():
    with pytest.raises(MalformedPng):
        read_chunk(b"GIF89a....", METADATA_TAG)


def test_truncated_stream_is_malformed(make_png):
    png = make_png(8)
    with pytest.raises(MalformedPng):
        read_chunk(png[:-6], METADATA_TAG)
    with pytest.raises(MalformedPng):
        write_chunk(PNG_SIGNATURE, METADATA_TAG, b"x")


def test_invalid_tag_rejected(make_png):
    with pytest.raises(ValueError):
        write_chunk(make_png(8), b"r1Pt", b"x")
    with pytest.raises(ValueError):
        read_chunk(make_png(8), b"toolong")
