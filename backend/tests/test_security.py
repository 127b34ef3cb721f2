"""Tests for path validation gates and PII stripping."""

import os
from unittest.mock import patch

import pytest

from security import (
    ALLOWED_EXTENSIONS,
    MAX_IMAGE_SIZE,
    strip_pii,
    validate_image_path,
    validate_output_path,
)

pytestmark = pytest.mark.smoke


class TestInputPath:
    def test_png_accepted(self, tmp_path):
        f = tmp_path / "in.png"
        f.write_bytes(b"\x00" * 16)
        assert validate_image_path(str(f)) == []

    @pytest.mark.parametrize("ext", sorted(ALLOWED_EXTENSIONS))
    def test_all_allowed_extensions(self, tmp_path, ext):
        f = tmp_path / f"in{ext.upper()}"
        f.write_bytes(b"\x00")
        assert validate_image_path(str(f)) == []

    def test_exe_rejected(self, tmp_path):
        f = tmp_path / "in.exe"
        f.write_bytes(b"\x00")
        assert any("not allowed" in e for e in validate_image_path(str(f)))

    def test_missing_rejected(self, tmp_path):
        errors = validate_image_path(str(tmp_path / "missing.png"))
        assert any("not found" in e.lower() for e in errors)

    def test_directory_rejected(self, tmp_path):
        d = tmp_path / "dir.png"
        d.mkdir()
        assert any("regular file" in e for e in validate_image_path(str(d)))

    def test_oversized_rejected(self, tmp_path):
        f = tmp_path / "big.png"
        f.write_bytes(b"\x00")
        with patch("security.MAX_IMAGE_SIZE", 0):
            errors = validate_image_path(str(f))
        assert any("too large" in e for e in errors)
        assert MAX_IMAGE_SIZE > 0


class TestOutputPath:
    def test_valid(self, tmp_path):
        assert validate_output_path(str(tmp_path / "out.png")) == []

    def test_missing_parent(self, tmp_path):
        errors = validate_output_path(str(tmp_path / "nope" / "out.png"))
        assert any("does not exist" in e for e in errors)

    def test_bad_extension(self, tmp_path):
        errors = validate_output_path(str(tmp_path / "out.mp4"))
        assert any("not allowed" in e for e in errors)

    def test_system_dir_blocked(self):
        errors = validate_output_path("/etc/out.png")
        assert any("system directory" in e for e in errors)


class TestStripPii:
    def test_home_path_replaced(self):
        home = os.path.expanduser("~")
        event = {"message": f"failed reading {home}/photos/cat.png"}
        cleaned = strip_pii(event, {})
        assert home not in cleaned["message"]

    def test_user_paths_redacted(self):
        event = {"message": "at /home/alice/img.png and /Users/bob/x.png"}
        cleaned = strip_pii(event, {})
        assert "alice" not in cleaned["message"]
        assert "bob" not in cleaned["message"]

    def test_sensitive_keys_scrubbed(self):
        event = {
            "extra": {"api_token": "abc", "frame_index": 3},
            "contexts": {"effect": {"sentry_dsn": "https://x", "param_keys": ["sharpness"]}},
        }
        cleaned = strip_pii(event, {})
        assert cleaned["extra"]["api_token"] == "<REDACTED>"
        assert cleaned["extra"]["frame_index"] == 3
        assert cleaned["contexts"]["effect"]["sentry_dsn"] == "<REDACTED>"
        assert cleaned["contexts"]["effect"]["param_keys"] == ["sharpness"]
