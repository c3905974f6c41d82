"""Pytest configuration and shared fixtures for svg-typewriter tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
import pytest

from svg_typewriter.api import TypingSvgRenderer
from svg_typewriter.config import Config, FontConfig
from svg_typewriter.fonts import NullFontResolver
from svg_typewriter.models import (
    CursorStyle,
    DeletionBehavior,
    RenderSettings,
    TextLine,
)


@pytest.fixture
def offline_config() -> Config:
    """Configuration with web font embedding disabled."""
    return Config(fonts=FontConfig(enabled=False))


@pytest.fixture
def renderer(offline_config: Config) -> TypingSvgRenderer:
    """Renderer that never touches the network."""
    return TypingSvgRenderer(config=offline_config, font_resolver=NullFontResolver())


@pytest.fixture
def make_settings() -> Callable[..., RenderSettings]:
    """Build RenderSettings from line texts, with predictable layout flags.

    Centering is off so positions start at the fixed margins.
    """

    def _make(
        *texts: str,
        behavior: DeletionBehavior = DeletionBehavior.BACKSPACE,
        cursor: CursorStyle = CursorStyle.STRAIGHT,
        repeat: bool = False,
        pause_ms: float = 1000.0,
        typing_speed: float = 0.5,
        deletion_speed: float = 0.5,
        **overrides,
    ) -> RenderSettings:
        lines = tuple(
            TextLine(text, typing_speed=typing_speed, deletion_speed=deletion_speed)
            for text in texts
        )
        values = {
            "lines": lines,
            "repeat": repeat,
            "pause_ms": pause_ms,
            "deletion_behavior": behavior,
            "cursor_style": cursor,
            "horizontal_center": False,
            "vertical_center": False,
        }
        values.update(overrides)
        return RenderSettings(**values)

    return _make


@pytest.fixture
def parse_svg() -> Callable[[str], Element]:
    """Parse an SVG string safely and return the root element."""

    def _parse(svg: str) -> Element:
        return ET.fromstring(svg)

    return _parse


@pytest.fixture
def lines_json_file(tmp_path: Path) -> Path:
    """A JSON lines file with two differently styled lines."""
    path = tmp_path / "lines.json"
    path.write_text(
        '[{"text": "Hello", "font": "Fira Code", "fontSize": 24},'
        ' {"text": "World", "color": "#ff0000", "typingSpeed": 0.25}]',
        encoding="utf-8",
    )
    return path


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "network: marks tests that need network access")

