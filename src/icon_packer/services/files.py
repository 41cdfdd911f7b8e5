from __future__ import annotations

import logging
from pathlib import Path

from icon_packer.codecs.containers import ContainerKind, decode_container, detect_container_kind
from icon_packer.codecs.entries import DecodedEntry
from icon_packer.config import settings
from icon_packer.domain.pack import IconPack
from icon_packer.errors import InputTooLarge
from icon_packer.services.reconcile import ReconcileResult, reconcile

logger = logging.getLogger(__name__)


def check_input_size(size: int, *, label: str) -> None:
    limit = int(settings.max_input_bytes)
    if size > limit:
        raise InputTooLarge(f"{label} is {size} bytes; limit is {limit}")


def read_icon_file(path: str | Path, kind: ContainerKind | None = None) -> list[DecodedEntry]:
    path = Path(path)
    check_input_size(path.stat().st_size, label=str(path))
    data = path.read_bytes()
    if kind is None:
        kind = detect_container_kind(path.name, data)
    entries = decode_container(kind, data)
    logger.info("loaded %d image(s) from %s (%s)", len(entries), path, kind.value)
    return entries


def write_icon_file(path: str | Path, data: bytes) -> None:
    """Write an already complete buffer; readers never see a partial file."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    _ = tmp_path.write_bytes(data)
    _ = tmp_path.replace(path)


def load_into_pack(pack: IconPack, path: str | Path) -> ReconcileResult:
    return reconcile(pack, read_icon_file(path))
