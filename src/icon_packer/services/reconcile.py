from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final, Literal

from icon_packer.codecs.entries import DecodedEntry
from icon_packer.codecs.image_codec import ScaleAlgorithm, encode_png, scale_image
from icon_packer.codecs.png_chunks import embed_text
from icon_packer.domain.pack import (
    IconPack,
    assign_slot,
    largest_valid_index,
    slot_index_for_size,
)
from icon_packer.errors import IndexOutOfRange, NoSourceAvailable

logger = logging.getLogger(__name__)

ALL_INVALID: Final = "all"

Selection = Literal["all"] | int


@dataclass(frozen=True)
class ReconcileResult:
    assigned: int
    duplicates: int
    unmatched: int


def reconcile(pack: IconPack, entries: Iterable[DecodedEntry]) -> ReconcileResult:
    """Place decoded images into the slots of matching size.

    First loaded wins: an entry for a slot that is already valid is dropped.
    """

    assigned = duplicates = unmatched = 0
    for entry in entries:
        index = slot_index_for_size(pack, entry.size)
        if index is None:
            logger.warning(
                "image size not supported by pack (%dx%d)", entry.size, entry.size
            )
            unmatched += 1
            continue
        if pack.slots[index].valid:
            logger.warning(
                "slot %dx%d already loaded; discarding duplicate", entry.size, entry.size
            )
            duplicates += 1
            continue
        assign_slot(pack, index, entry.pixels, entry.text)
        assigned += 1
    return ReconcileResult(assigned=assigned, duplicates=duplicates, unmatched=unmatched)


def generate_missing(
    pack: IconPack,
    selection: Selection = ALL_INVALID,
    algorithm: ScaleAlgorithm = ScaleAlgorithm.BICUBIC,
) -> list[int]:
    """Fill invalid slots by scaling the first valid slot; returns generated indices."""

    if selection == ALL_INVALID:
        targets = list(range(len(pack.slots)))
    elif (
        isinstance(selection, int)
        and not isinstance(selection, bool)
        and 0 <= selection < len(pack.slots)
    ):
        targets = [selection]
    else:
        raise IndexOutOfRange(f"slot index {selection!r} out of range")

    source_index = largest_valid_index(pack)
    if source_index is None:
        raise NoSourceAvailable("no valid image available to generate from")
    source = pack.slots[source_index].pixels

    generated: list[int] = []
    for i in targets:
        slot = pack.slots[i]
        if slot.valid:
            continue
        # Generated images never inherit the source text.
        assign_slot(pack, i, scale_image(source, slot.size, algorithm), "")
        generated.append(i)

    if generated:
        logger.info(
            "generated %d slot(s) from %dx%d using %s",
            len(generated),
            pack.slots[source_index].size,
            pack.slots[source_index].size,
            algorithm.value,
        )
    return generated


def build_pack(
    pack: IconPack,
    sources: Iterable[Iterable[DecodedEntry]],
    algorithm: ScaleAlgorithm = ScaleAlgorithm.BICUBIC,
) -> IconPack:
    """Load every source in order, then generate whatever is still missing."""

    for entries in sources:
        reconcile(pack, entries)
    generate_missing(pack, ALL_INVALID, algorithm)
    return pack


def extract_pngs(
    pack: IconPack, sizes: Iterable[int] | None = None, *, embed_metadata: bool = True
) -> dict[str, bytes]:
    """PNG files for valid slots (all, or only the requested sizes), keyed by file name."""

    wanted = None if sizes is None else set(sizes)
    out: dict[str, bytes] = {}
    for slot in pack.slots:
        if not slot.valid:
            continue
        if wanted is not None and slot.size not in wanted:
            continue
        blob = encode_png(slot.pixels)
        if embed_metadata and slot.text:
            blob = embed_text(blob, slot.text)
        out[f"icon_{slot.size}x{slot.size}.png"] = blob
    return out
