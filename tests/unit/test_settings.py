"""
Test suite for settings loading.

System role: Verification of defaults and environment overrides
"""

import pytest
from pydantic import ValidationError

from docchat.configs import IngestionSettings, Settings, UploadSettings
from docchat.configs.upload import MAX_UPLOAD_BYTES


def test_upload_defaults() -> None:
    settings = UploadSettings()

    assert settings.max_bytes == MAX_UPLOAD_BYTES == 50 * 1024 * 1024
    assert settings.token_ttl_seconds == 3600


def test_environment_should_override_prefixed_fields(monkeypatch) -> None:
    monkeypatch.setenv("UPLOAD_MAX_BYTES", "2048")
    monkeypatch.setenv("INGESTION_CHUNK_MAX_CHARS", "900")

    assert UploadSettings().max_bytes == 2048
    assert IngestionSettings().chunk_max_chars == 900


def test_log_level_should_be_normalized() -> None:
    assert Settings(log_level=" debug ").log_level == "DEBUG"


def test_unknown_log_level_should_be_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
