from __future__ import annotations

from typing import ClassVar, final

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_SCALE_ALGORITHMS = {"nearest", "bicubic"}
_PLATFORMS = {"windows", "macos", "favicon", "android", "ios"}


@final
class Settings(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )
    app_name: str = "Icon Packer"
    api_prefix: str = "/api/v1"

    log_level: str = "INFO"

    # Inputs are read fully into memory; reject anything larger before decoding.
    max_input_bytes: int = 16 * 1024 * 1024

    # Upper bound on ICNS entries walked per file (guards corrupt length fields).
    icns_max_entries: int = 64

    # Defaults used when a caller does not choose explicitly.
    embed_text_default: bool = True
    default_scale_algorithm: str = "bicubic"
    default_platform: str = "windows"

    @model_validator(mode="after")
    def _validate_limits(self) -> "Settings":  # pyright: ignore[reportUnusedFunction]
        errors: list[str] = []

        if self.max_input_bytes <= 0:
            errors.append("MAX_INPUT_BYTES must be positive")
        if self.icns_max_entries <= 0:
            errors.append("ICNS_MAX_ENTRIES must be positive")

        scale = self.default_scale_algorithm.strip().lower()
        if scale not in _SCALE_ALGORITHMS:
            errors.append(f"DEFAULT_SCALE_ALGORITHM must be one of {sorted(_SCALE_ALGORITHMS)}")

        platform = self.default_platform.strip().lower()
        if platform not in _PLATFORMS:
            errors.append(f"DEFAULT_PLATFORM must be one of {sorted(_PLATFORMS)}")

        if errors:
            raise ValueError("Invalid settings: " + "; ".join(errors))
        return self


settings = Settings()
