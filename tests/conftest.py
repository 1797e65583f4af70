"""Shared test fixtures for the richmark test suite."""

from __future__ import annotations

from typing import Any

import pytest

from richmark.config import EditorConfig
from richmark.converter.html_to_md import MarkdownSerializer
from richmark.converter.md_to_html import MarkdownRenderer


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [c["name"] for c in self.increments]


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
def config() -> EditorConfig:
    """Default test configuration with a short debounce."""
    return EditorConfig(debounce_seconds=0.01)


@pytest.fixture
def renderer(config: EditorConfig) -> MarkdownRenderer:
    return MarkdownRenderer(config)


@pytest.fixture
def serializer(config: EditorConfig) -> MarkdownSerializer:
    return MarkdownSerializer(config)


@pytest.fixture
def png_bytes() -> bytes:
    """Smallest byte string that sniffs as PNG."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
