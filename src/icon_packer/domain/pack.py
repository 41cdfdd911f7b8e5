from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from PIL import Image, ImageDraw

from icon_packer.codecs.png_chunks import clamp_text
from icon_packer.domain.platforms import Platform, custom_sizes, parse_platform, sizes_for
from icon_packer.errors import IndexOutOfRange

PLACEHOLDER_BORDER = (80, 80, 80, 255)
PLACEHOLDER_FILL = (130, 130, 130, 255)


def make_placeholder(size: int) -> Image.Image:
    """Solid square with a 1-pixel inset border; deterministic for a given size."""

    image = Image.new("RGBA", (size, size), PLACEHOLDER_BORDER)
    if size > 2:
        ImageDraw.Draw(image).rectangle((1, 1, size - 2, size - 2), fill=PLACEHOLDER_FILL)
    return image


@dataclass
class IconSlot:
    size: int
    valid: bool = False
    pixels: Image.Image = field(init=False)
    text: str = ""

    def __post_init__(self) -> None:
        self.pixels = make_placeholder(self.size)


@dataclass
class IconPack:
    """Fixed set of slots for one size template.

    Slot ``i`` always holds ``sizes[i]``; only validity, pixels and text change.
    """

    sizes: tuple[int, ...]
    platform: Platform | None = None
    slots: list[IconSlot] = field(init=False)

    def __post_init__(self) -> None:
        self.slots = [IconSlot(size=s) for s in self.sizes]

    def __len__(self) -> int:
        return len(self.slots)


def create_pack(platform: Platform | str) -> IconPack:
    resolved = parse_platform(platform)
    return IconPack(sizes=sizes_for(resolved), platform=resolved)


def create_custom_pack(sizes: Iterable[int]) -> IconPack:
    return IconPack(sizes=custom_sizes(sizes))


def _slot(pack: IconPack, index: int) -> IconSlot:
    if not (0 <= index < len(pack.slots)):
        raise IndexOutOfRange(
            f"slot index {index} out of range (pack has {len(pack.slots)} slots)"
        )
    return pack.slots[index]


def clear_slot(pack: IconPack, index: int) -> None:
    slot = _slot(pack, index)
    if not slot.valid:
        return
    slot.pixels = make_placeholder(slot.size)
    slot.valid = False
    slot.text = ""


def assign_slot(pack: IconPack, index: int, pixels: Image.Image, text: str = "") -> None:
    slot = _slot(pack, index)
    if pixels.size != (slot.size, slot.size):
        raise ValueError(
            f"image is {pixels.width}x{pixels.height}, slot {index} expects {slot.size}x{slot.size}"
        )
    # Always take an owned copy so callers can release their buffer.
    slot.pixels = pixels.convert("RGBA") if pixels.mode != "RGBA" else pixels.copy()
    slot.text = clamp_text(text or "")
    slot.valid = True


def valid_count(pack: IconPack) -> int:
    return sum(1 for s in pack.slots if s.valid)


def largest_valid_index(pack: IconPack) -> int | None:
    """Index of the first valid slot in template order.

    Templates are declared largest first, so this is the largest available
    image. It does not compare sizes: a custom template declared in another
    order yields its first valid slot.
    """

    for i, slot in enumerate(pack.slots):
        if slot.valid:
            return i
    return None


def slot_index_for_size(pack: IconPack, size: int) -> int | None:
    for i, slot in enumerate(pack.slots):
        if slot.size == size:
            return i
    return None
