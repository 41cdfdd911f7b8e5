from __future__ import annotations

import pytest

from icon_packer.config import Settings


def test_settings_defaults_are_valid():
    s = Settings.model_validate({})
    assert s.max_input_bytes > 0
    assert s.icns_max_entries == 64
    assert s.embed_text_default is True


def test_settings_reject_bad_limits_and_defaults():
    with pytest.raises(Exception) as excinfo:
        Settings.model_validate(
            {
                "max_input_bytes": 0,
                "icns_max_entries": -1,
                "default_scale_algorithm": "lanczos",
                "default_platform": "amiga",
            }
        )

    msg = str(excinfo.value)
    assert "MAX_INPUT_BYTES" in msg
    assert "ICNS_MAX_ENTRIES" in msg
    assert "DEFAULT_SCALE_ALGORITHM" in msg
    assert "DEFAULT_PLATFORM" in msg


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DEFAULT_PLATFORM", "macos")
    monkeypatch.setenv("EMBED_TEXT_DEFAULT", "false")
    s = Settings()
    assert s.default_platform == "macos"
    assert s.embed_text_default is False


def test_settings_ignore_unused_environment_variable(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    s = Settings()
    assert "environment" not in Settings.model_fields
    assert not hasattr(s, "environment")
