from __future__ import annotations

import pytest

from icon_packer.domain.platforms import (
    Platform,
    all_templates,
    custom_sizes,
    parse_platform,
    parse_sizes_csv,
    sizes_for,
)
from icon_packer.errors import UnknownPlatform


def test_windows_template_is_largest_first():
    assert sizes_for(Platform.WINDOWS) == (256, 128, 96, 64, 48, 32, 24, 16)


@pytest.mark.parametrize("platform", list(Platform))
def test_every_template_is_unique_and_in_range(platform: Platform):
    sizes = sizes_for(platform)
    assert 8 <= len(sizes) <= 10
    assert len(set(sizes)) == len(sizes)
    assert all(1 <= s <= 1024 for s in sizes)
    assert list(sizes) == sorted(sizes, reverse=True)


def test_sizes_for_accepts_names_and_legacy_ids():
    assert sizes_for("favicon") == sizes_for(Platform.FAVICON)
    assert sizes_for("IOS") == (180, 152, 120, 87, 80, 76, 58, 40, 29)
    assert parse_platform("3") is Platform.ANDROID
    assert parse_platform(" macos ") is Platform.MACOS


@pytest.mark.parametrize("value", ["linux", "", "0", "6"])
def test_unknown_platform_raises(value: str):
    with pytest.raises(UnknownPlatform):
        sizes_for(value)


def test_unknown_platform_is_a_value_error():
    with pytest.raises(ValueError):
        parse_platform(42)  # type: ignore[arg-type]


def test_all_templates_lists_each_platform_once():
    platforms = [p for p, _ in all_templates()]
    assert platforms == list(Platform)


def test_custom_sizes_keeps_caller_order():
    assert custom_sizes([32, 256, 16]) == (32, 256, 16)


@pytest.mark.parametrize("values", [[], [0], [1025], [32, 32]])
def test_custom_sizes_rejects_bad_input(values: list[int]):
    with pytest.raises(ValueError):
        custom_sizes(values)


def test_parse_sizes_csv():
    assert parse_sizes_csv("256, 64,48,32") == (256, 64, 48, 32)
    with pytest.raises(ValueError):
        parse_sizes_csv("64,big")
