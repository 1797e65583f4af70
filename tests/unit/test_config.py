"""Tests for EditorConfig validation."""

from __future__ import annotations

import pytest

from richmark.config import DEFAULT_IMAGE_MIMES, EditorConfig


class TestDefaults:
    def test_defaults(self):
        config = EditorConfig()
        assert config.debounce_seconds == 0.5
        assert config.image_alt == "image"
        assert config.image_allowed_mimes is None
        assert config.image_max_size_bytes == 10 * 1024 * 1024
        assert config.image_max_concurrent == 4
        assert config.upload_url == ""
        assert config.upload_headers == {}
        assert config.metrics is None
        assert not config.debug_dump_html
        assert not config.debug_dump_markdown

    def test_upload_headers_not_shared(self):
        a, b = EditorConfig(), EditorConfig()
        a.upload_headers["X"] = "1"
        assert b.upload_headers == {}

    def test_default_mimes_are_images(self):
        assert all(m.startswith("image/") for m in DEFAULT_IMAGE_MIMES)


class TestUploadUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://uploads.example.com/images",
            "http://localhost:4000/upload",
            "http://127.0.0.1/upload",
        ],
    )
    def test_accepted(self, url):
        assert EditorConfig(upload_url=url).upload_url == url

    def test_plain_http_remote_rejected(self):
        with pytest.raises(ValueError, match="insecure HTTP"):
            EditorConfig(upload_url="http://uploads.example.com/images")

    def test_other_scheme_rejected(self):
        with pytest.raises(ValueError, match="http\\(s\\)"):
            EditorConfig(upload_url="ftp://example.com/x")


class TestNumericBounds:
    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"debounce_seconds": -0.1}, "debounce_seconds"),
            ({"image_max_size_bytes": 0}, "image_max_size_bytes"),
            ({"image_max_concurrent": 0}, "image_max_concurrent"),
            ({"upload_timeout_seconds": 0}, "upload_timeout_seconds"),
        ],
    )
    def test_rejected(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            EditorConfig(**kwargs)

    def test_zero_debounce_allowed(self):
        assert EditorConfig(debounce_seconds=0).debounce_seconds == 0


class TestImageOptions:
    @pytest.mark.parametrize("alt", ["", "a]b", "two\nlines"])
    def test_bad_alt(self, alt):
        with pytest.raises(ValueError, match="image_alt"):
            EditorConfig(image_alt=alt)

    def test_non_image_mime_rejected(self):
        with pytest.raises(ValueError, match="image_allowed_mimes"):
            EditorConfig(image_allowed_mimes=["image/png", "application/pdf"])
