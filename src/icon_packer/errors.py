"""Error taxonomy shared by the codecs, the pack engine and the HTTP layer.

Every error carries a stable ``code`` (used as the ``error`` field of
``ErrorResponse``) and the HTTP status the API maps it to.
"""

from __future__ import annotations

from typing import ClassVar


class IconPackerError(Exception):
    code: ClassVar[str] = "icon_packer_error"
    status_code: ClassVar[int] = 400

    def __init__(self, message: str, *, details: object | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.details: object | None = details


class MalformedPng(IconPackerError):
    code = "malformed_png"


class BadMagic(IconPackerError):
    code = "bad_magic"


class TruncatedFile(IconPackerError):
    code = "truncated_file"


class UnsupportedImageType(IconPackerError):
    code = "unsupported_image_type"


class UnsupportedImageData(IconPackerError):
    code = "unsupported_image_data"
    status_code = 415


class UnsquareImage(IconPackerError):
    code = "unsquare_image"


class UnknownPlatform(IconPackerError, ValueError):
    code = "unknown_platform"


class IndexOutOfRange(IconPackerError, IndexError):
    code = "index_out_of_range"
    status_code = 404


class NothingToExport(IconPackerError):
    code = "nothing_to_export"
    status_code = 422


class NoSourceAvailable(IconPackerError):
    code = "no_source_available"
    status_code = 422


class UnmappedIcnsSize(IconPackerError):
    code = "unmapped_icns_size"
    status_code = 422


class InputTooLarge(IconPackerError):
    code = "payload_too_large"
    status_code = 413
