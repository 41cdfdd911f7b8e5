from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from icon_packer.errors import UnknownPlatform

MIN_ICON_SIZE = 1
MAX_ICON_SIZE = 1024


class Platform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    FAVICON = "favicon"
    ANDROID = "android"
    IOS = "ios"


# Declared largest first: pack generation treats the first valid slot as the
# largest available source.
_TEMPLATES: dict[Platform, tuple[int, ...]] = {
    Platform.WINDOWS: (256, 128, 96, 64, 48, 32, 24, 16),
    Platform.MACOS: (1024, 512, 256, 128, 64, 48, 32, 16),
    Platform.FAVICON: (228, 152, 144, 120, 96, 72, 64, 32, 24, 16),
    Platform.ANDROID: (192, 144, 96, 72, 64, 48, 36, 32, 24, 16),
    Platform.IOS: (180, 152, 120, 87, 80, 76, 58, 40, 29),
}

# Numeric platform ids accepted by the legacy command-line tool.
_LEGACY_IDS: dict[str, Platform] = {
    "1": Platform.WINDOWS,
    "2": Platform.FAVICON,
    "3": Platform.ANDROID,
    "4": Platform.IOS,
    "5": Platform.MACOS,
}


def parse_platform(value: Platform | str) -> Platform:
    if isinstance(value, Platform):
        return value
    if not isinstance(value, str):
        raise UnknownPlatform(f"unknown platform: {value!r}")
    key = value.strip().lower()
    if key in _LEGACY_IDS:
        return _LEGACY_IDS[key]
    try:
        return Platform(key)
    except ValueError:
        raise UnknownPlatform(f"unknown platform: {value!r}") from None


def sizes_for(platform: Platform | str) -> tuple[int, ...]:
    """Return the fixed size template of ``platform``."""

    return _TEMPLATES[parse_platform(platform)]


def all_templates() -> list[tuple[Platform, tuple[int, ...]]]:
    return [(p, _TEMPLATES[p]) for p in Platform]


def custom_sizes(values: Iterable[int]) -> tuple[int, ...]:
    """Validate a caller-provided size list, keeping the given order."""

    sizes: list[int] = []
    for raw in values:
        size = int(raw)
        if not (MIN_ICON_SIZE <= size <= MAX_ICON_SIZE):
            raise ValueError(f"icon size out of range: {size}")
        if size in sizes:
            raise ValueError(f"duplicate icon size: {size}")
        sizes.append(size)
    if not sizes:
        raise ValueError("no icon sizes provided")
    return tuple(sizes)


def parse_sizes_csv(value: str) -> tuple[int, ...]:
    parts = [x.strip() for x in value.split(",") if x.strip()]
    if not all(p.isdigit() for p in parts):
        raise ValueError(f"icon sizes must be integers: {value!r}")
    return custom_sizes(int(p) for p in parts)
