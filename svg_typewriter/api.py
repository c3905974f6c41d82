"""High-level API for svg-typewriter.

Example:
    >>> from svg_typewriter import TypingSvgRenderer
    >>> from svg_typewriter.fonts import NullFontResolver
    >>> renderer = TypingSvgRenderer(font_resolver=NullFontResolver())
    >>> result = renderer.render_query("text=Hello;World&repeat=false")
    >>> result.svg.startswith("<svg")
    True
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from svg_typewriter.config import Config
from svg_typewriter.cursor import CursorShape, shape_for
from svg_typewriter.exceptions import ParameterError
from svg_typewriter.fonts import (
    FontResolver,
    GoogleFontsResolver,
    NullFontResolver,
    collect_font_css,
)
from svg_typewriter.layout import compute_layout
from svg_typewriter.models import RenderSettings, TextLine
from svg_typewriter.params import resolve_params
from svg_typewriter.svg import serialize
from svg_typewriter.timeline import compile_timeline

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"
NO_CACHE = "no-cache, no-store, must-revalidate"


@dataclass
class RenderResult:
    """Result of one render."""

    svg: str
    cycle_duration: float
    glyph_count: int
    fonts_embedded: bool
    output_path: Path | None = None


@dataclass
class SvgResponse:
    """HTTP-shaped response: status, headers and body."""

    status: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)


def cursor_shape(settings: RenderSettings) -> CursorShape | None:
    """Cursor rect sized and coloured after the first text line."""
    line = settings.lines[0] if settings.lines else TextLine("")
    return shape_for(settings.cursor_style, line.color, line.font_size)


class TypingSvgRenderer:
    """Render typing-effect SVG documents.

    Args:
        config: Configuration; loaded with ``Config.load()`` when not given.
        font_resolver: Where embedded fonts come from. Defaults to Google
            Fonts when font embedding is enabled, nothing otherwise.
    """

    def __init__(
        self,
        config: Config | None = None,
        font_resolver: FontResolver | None = None,
    ) -> None:
        self.config = config or Config.load()
        if font_resolver is None:
            if self.config.fonts.enabled:
                font_resolver = GoogleFontsResolver(self.config.fonts)
            else:
                font_resolver = NullFontResolver()
        self.font_resolver = font_resolver

    def render(self, settings: RenderSettings) -> RenderResult:
        """Render ``settings`` to an SVG document."""
        font_css = collect_font_css(
            settings.lines, self.font_resolver, self.config.fonts.max_workers
        )
        layout = compute_layout(settings)
        timeline = compile_timeline(layout, settings)
        svg = serialize(layout, timeline, cursor_shape(settings), settings, font_css)

        glyph_count = sum(block.glyph_count for block in layout.blocks)
        logger.debug(
            "Rendered %d lines, %d glyphs, cycle %.3fs",
            len(layout.blocks),
            glyph_count,
            timeline.cycle_duration,
        )
        return RenderResult(
            svg=svg,
            cycle_duration=timeline.cycle_duration,
            glyph_count=glyph_count,
            fonts_embedded=bool(font_css),
        )

    def render_query(self, query: Mapping[str, str] | str) -> RenderResult:
        """Resolve request parameters and render them.

        Raises:
            ParameterError: If the parameters are invalid.
        """
        return self.render(resolve_params(query, self.config.defaults))

    def render_file(self, settings: RenderSettings, output_path: Path | str) -> RenderResult:
        """Render ``settings`` and write the SVG to ``output_path``."""
        output_path = Path(output_path)
        result = self.render(settings)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.svg, encoding="utf-8")
        result.output_path = output_path
        return result


def _error_response(status: int, message: str) -> SvgResponse:
    return SvgResponse(
        status=status,
        body=json.dumps({"error": message}),
        headers={"Content-Type": "application/json"},
    )


def handle_request(
    query: Mapping[str, str] | str,
    renderer: TypingSvgRenderer | None = None,
) -> SvgResponse:
    """Answer an SVG request.

    Invalid parameters give a 400 with the error message; any other
    failure gives a 500 with a generic message.
    """
    try:
        renderer = renderer or TypingSvgRenderer()
        result = renderer.render_query(query)
    except ParameterError as e:
        logger.info("Rejected request: %s", e)
        return _error_response(400, e.message)
    except Exception:
        logger.exception("Render failed")
        return _error_response(500, "An unknown error occurred")

    return SvgResponse(
        status=200,
        body=result.svg,
        headers={"Content-Type": SVG_CONTENT_TYPE, "Cache-Control": NO_CACHE},
    )
