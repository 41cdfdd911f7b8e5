from __future__ import annotations

import pytest

from icon_packer.domain.pack import (
    PLACEHOLDER_BORDER,
    PLACEHOLDER_FILL,
    IconPack,
    assign_slot,
    clear_slot,
    create_custom_pack,
    create_pack,
    largest_valid_index,
    make_placeholder,
    slot_index_for_size,
    valid_count,
)
from icon_packer.domain.platforms import Platform, sizes_for
from icon_packer.errors import IndexOutOfRange


def test_create_pack_has_one_placeholder_slot_per_size():
    pack = create_pack(Platform.ANDROID)
    assert pack.platform is Platform.ANDROID
    assert [s.size for s in pack.slots] == list(sizes_for(Platform.ANDROID))
    for slot in pack.slots:
        assert slot.valid is False
        assert slot.text == ""
        assert slot.pixels.size == (slot.size, slot.size)
        assert slot.pixels.mode == "RGBA"
    assert valid_count(pack) == 0
    assert largest_valid_index(pack) is None


def test_create_pack_from_string_platform():
    assert create_pack("windows").platform is Platform.WINDOWS


def test_placeholder_has_inset_border():
    image = make_placeholder(16)
    assert image.getpixel((0, 0)) == PLACEHOLDER_BORDER
    assert image.getpixel((15, 15)) == PLACEHOLDER_BORDER
    assert image.getpixel((1, 1)) == PLACEHOLDER_FILL
    assert image.getpixel((14, 14)) == PLACEHOLDER_FILL


def test_tiny_placeholders_are_border_only():
    assert make_placeholder(1).getpixel((0, 0)) == PLACEHOLDER_BORDER
    assert set(make_placeholder(2).getdata()) == {PLACEHOLDER_BORDER}


def test_assign_then_clear_restores_fresh_placeholder(make_image):
    pack = create_pack(Platform.WINDOWS)
    fresh = pack.slots[2].pixels.tobytes()

    assign_slot(pack, 2, make_image(96), "hello")
    assert pack.slots[2].valid is True
    assert pack.slots[2].text == "hello"
    assert valid_count(pack) == 1

    clear_slot(pack, 2)
    slot = pack.slots[2]
    assert slot.valid is False
    assert slot.text == ""
    assert slot.pixels.tobytes() == fresh
    assert slot.size == 96


def test_clear_placeholder_is_noop():
    pack = create_pack(Platform.WINDOWS)
    before = pack.slots[0].pixels
    clear_slot(pack, 0)
    assert pack.slots[0].pixels is before


def test_assign_copies_the_buffer(make_image):
    pack = create_pack(Platform.WINDOWS)
    image = make_image(16)
    assign_slot(pack, 7, image)
    image.putpixel((10, 10), (0, 0, 0, 0))
    assert pack.slots[7].pixels.getpixel((10, 10)) != (0, 0, 0, 0)


def test_assign_converts_to_rgba(make_image):
    pack = create_pack(Platform.WINDOWS)
    assign_slot(pack, 7, make_image(16).convert("RGB"))
    assert pack.slots[7].pixels.mode == "RGBA"


def test_assign_rejects_wrong_size(make_image):
    pack = create_pack(Platform.WINDOWS)
    with pytest.raises(ValueError):
        assign_slot(pack, 0, make_image(128))


def test_assign_truncates_text_to_metadata_limit(make_image):
    pack = create_pack(Platform.WINDOWS)
    assign_slot(pack, 7, make_image(16), "é" * 30)
    assert len(pack.slots[7].text.encode("utf-8")) <= 39
    assert pack.slots[7].text == "é" * 19


@pytest.mark.parametrize("index", [-1, 8, 100])
def test_slot_index_out_of_range(index: int, make_image):
    pack = create_pack(Platform.WINDOWS)
    with pytest.raises(IndexOutOfRange):
        clear_slot(pack, index)
    with pytest.raises(IndexOutOfRange):
        assign_slot(pack, index, make_image(16))


def test_largest_valid_index_is_first_valid_in_template_order(make_image):
    pack = create_pack(Platform.WINDOWS)
    assign_slot(pack, 5, make_image(32))
    assign_slot(pack, 3, make_image(64))
    assert largest_valid_index(pack) == 3


def test_largest_valid_index_follows_declared_order_for_custom_packs(make_image):
    pack = create_custom_pack([16, 256])
    assign_slot(pack, 0, make_image(16))
    assign_slot(pack, 1, make_image(256))
    # First valid slot, not the biggest one.
    assert largest_valid_index(pack) == 0


def test_pack_slot_identity_is_fixed(make_image):
    pack = create_custom_pack([48, 24])
    assert isinstance(pack, IconPack)
    assert pack.platform is None
    assert len(pack) == 2
    assert slot_index_for_size(pack, 24) == 1
    assert slot_index_for_size(pack, 25) is None
    assign_slot(pack, 1, make_image(24))
    clear_slot(pack, 1)
    assert [s.size for s in pack.slots] == [48, 24]
