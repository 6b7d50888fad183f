"""Tests for client configuration loading."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from trip_journal_client.config import (
    JournalClientConfig,
    ListFailurePolicy,
    MediaUploadMode,
    load_config,
)
from trip_journal_client.errors import ConfigLoadError


class TestJournalClientConfig:
    """Tests for JournalClientConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = JournalClientConfig()
        assert config.base_url == "http://localhost:8000/"
        assert config.request_timeout == 30.0
        assert config.resource_timeout == 60.0
        assert config.media_upload_mode is MediaUploadMode.URL
        assert config.trips_failure_policy is ListFailurePolicy.FALLBACK_EMPTY
        assert not config.enforce_expiration

    def test_rejects_request_timeout_above_total(self) -> None:
        with pytest.raises(ValueError):
            JournalClientConfig(request_timeout=90.0)

    def test_rejects_non_positive_validity(self) -> None:
        with pytest.raises(ValueError):
            JournalClientConfig(token_validity=timedelta(0))


class TestLoadConfig:
    """Tests for load_config()."""

    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "client.yaml"
        path.write_text(
            "base_url: https://journal.example.com/\n"
            "media_path: medias\n"
            "request_timeout: 10\n"
            "resource_timeout: 20\n"
            "token_validity_seconds: 600\n"
            "media_upload_mode: base64\n"
            "trips_failure_policy: propagate\n"
            "enforce_expiration: true\n"
        )

        config = load_config(path)

        assert config == JournalClientConfig(
            base_url="https://journal.example.com/",
            media_path="medias",
            request_timeout=10.0,
            resource_timeout=20.0,
            token_validity=timedelta(minutes=10),
            media_upload_mode=MediaUploadMode.BASE64,
            trips_failure_policy=ListFailurePolicy.PROPAGATE,
            enforce_expiration=True,
        )

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "client.yaml"
        path.write_text("")
        assert load_config(path) == JournalClientConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="File not found"):
            load_config(tmp_path / "absent.yaml")

    def test_unknown_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "client.yaml"
        path.write_text("media_upload_mode: ftp\n")
        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "client.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "client.yaml"
        path.write_text("base_url: [unclosed\n")
        with pytest.raises(ConfigLoadError):
            load_config(path)
