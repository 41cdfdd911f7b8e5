"""Icon pack/extract endpoints."""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import PurePath
from typing import Annotated, Literal

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from icon_packer.codecs.containers import (
    MEDIA_TYPES,
    ContainerKind,
    decode_container,
    detect_container_kind,
    encode_container,
)
from icon_packer.codecs.entries import DecodedEntry
from icon_packer.codecs.image_codec import ScaleAlgorithm, parse_scale_algorithm
from icon_packer.config import settings
from icon_packer.domain.pack import IconPack, create_custom_pack, create_pack
from icon_packer.domain.platforms import MAX_ICON_SIZE, all_templates, parse_sizes_csv
from icon_packer.errors import InputTooLarge, NothingToExport
from icon_packer.schemas import DecodedEntryOut, InspectResult, PlatformTemplateOut
from icon_packer.services.reconcile import build_pack, extract_pngs, reconcile

router = APIRouter(tags=["icons"])

logger = logging.getLogger(__name__)


async def _read_upload_file_limited(*, file: UploadFile, max_bytes: int) -> bytes:
    # Read the file in chunks and hard-stop once size exceeds max_bytes.
    buf = bytearray()
    chunk_size = 1024 * 1024
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise InputTooLarge(f"{file.filename or 'upload'} exceeds {max_bytes} bytes")
    return bytes(buf)


async def _decode_upload(file: UploadFile) -> tuple[ContainerKind, list[DecodedEntry]]:
    data = await _read_upload_file_limited(file=file, max_bytes=int(settings.max_input_bytes))
    kind = detect_container_kind(file.filename, data)
    entries = await run_in_threadpool(decode_container, kind, data)
    return kind, entries


def _parse_sizes_or_400(value: str) -> tuple[int, ...]:
    try:
        return parse_sizes_csv(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def _parse_scale_or_400(value: str | None) -> ScaleAlgorithm:
    try:
        return parse_scale_algorithm(value or settings.default_scale_algorithm)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"unknown scale algorithm: {value!r}"
        ) from exc


def _download_name(filename: str | None, kind: ContainerKind) -> str:
    stem = PurePath(filename).stem if filename else "icon"
    return f"{stem or 'icon'}.{kind.value}"


@router.get("/platforms", response_model=list[PlatformTemplateOut])
async def list_platforms() -> list[PlatformTemplateOut]:
    return [
        PlatformTemplateOut(platform=platform.value, sizes=list(sizes))
        for platform, sizes in all_templates()
    ]


@router.post("/icons/inspect", response_model=InspectResult)
async def inspect_icon_file(file: Annotated[UploadFile, File()]) -> InspectResult:
    kind, entries = await _decode_upload(file)
    return InspectResult(
        filename=file.filename,
        container=kind.value,
        entries=[DecodedEntryOut(size=e.size, text=e.text) for e in entries],
    )


@router.post("/icons/pack")
async def pack_icons(
    files: Annotated[list[UploadFile], File()],
    platform: Annotated[str | None, Form()] = None,
    sizes: Annotated[str | None, Form()] = None,
    output: Annotated[Literal["ico", "icns"], Form(alias="format")] = "ico",
    scale: Annotated[str | None, Form()] = None,
    embed_text: Annotated[bool | None, Form()] = None,
) -> Response:
    algorithm = _parse_scale_or_400(scale)
    if sizes:
        pack: IconPack = create_custom_pack(_parse_sizes_or_400(sizes))
    else:
        pack = create_pack(platform or settings.default_platform)

    sources: list[list[DecodedEntry]] = []
    for upload in files:
        _kind, entries = await _decode_upload(upload)
        sources.append(entries)

    kind = ContainerKind(output)
    embed = settings.embed_text_default if embed_text is None else embed_text

    def _build() -> bytes:
        build_pack(pack, sources, algorithm)
        return encode_container(kind, pack.slots, embed_metadata=embed)

    data = await run_in_threadpool(_build)
    filename = _download_name(files[0].filename if files else None, kind)
    logger.info("packed %d slot(s) into %s (%d bytes)", len(pack.slots), filename, len(data))
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=data, media_type=MEDIA_TYPES[kind], headers=headers)


@router.post("/icons/extract")
async def extract_icons(
    file: Annotated[UploadFile, File()],
    sizes: Annotated[str | None, Form()] = None,
) -> Response:
    _kind, entries = await _decode_upload(file)

    # Extraction keeps every square size the file holds, in file order.
    seen: list[int] = []
    for entry in entries:
        if entry.size <= MAX_ICON_SIZE and entry.size not in seen:
            seen.append(entry.size)
    if not seen:
        raise NothingToExport("no extractable images found")
    pack = create_custom_pack(seen)
    await run_in_threadpool(reconcile, pack, entries)

    wanted = _parse_sizes_or_400(sizes) if sizes else None
    pngs = await run_in_threadpool(extract_pngs, pack, wanted)

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, blob in pngs.items():
            zf.writestr(name, blob)

    stem = PurePath(file.filename).stem if file.filename else "icons"
    headers = {"Content-Disposition": f'attachment; filename="{stem or "icons"}.zip"'}
    return Response(content=buf.getvalue(), media_type="application/zip", headers=headers)
