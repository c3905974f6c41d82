"""Layout engine.

Places every grapheme of every text line on the canvas. Rows are laid out
with estimated advance widths; blocks (one per text line) are either
stacked into one centred block (``stay``) or each placed at the same
position because they replace one another over time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from svg_typewriter.metrics import estimate_width, resolve_spacing, split_graphemes
from svg_typewriter.models import DeletionBehavior, RenderSettings, TextLine

LEFT_MARGIN = 15.0
TOP_MARGIN = 10.0


@dataclass(frozen=True)
class GlyphPlacement:
    """Position of one grapheme.

    ``x_before`` is where the glyph is drawn, ``x_after`` where the cursor
    goes once it is typed. ``y`` is the row's vertical centre.
    """

    grapheme: str
    x_before: float
    x_after: float
    y: float
    advance: float


@dataclass(frozen=True)
class RowLayout:
    glyphs: tuple[GlyphPlacement, ...]
    start_x: float
    y: float
    width: float


@dataclass(frozen=True)
class BlockLayout:
    """All rows of one text line."""

    line: TextLine
    rows: tuple[RowLayout, ...]
    x_offset: float
    y_offset: float
    width: float
    height: float
    spacing: float

    @property
    def glyphs(self) -> list[GlyphPlacement]:
        """Glyphs in typing order, across rows."""
        return [glyph for row in self.rows for glyph in row.glyphs]

    @property
    def glyph_count(self) -> int:
        return sum(len(row.glyphs) for row in self.rows)


@dataclass(frozen=True)
class Layout:
    blocks: tuple[BlockLayout, ...]
    origin_x: float
    origin_y: float
    total_width: float
    total_height: float


class _StackState(NamedTuple):
    blocks: tuple[BlockLayout, ...]
    accumulated_height: float


def row_width(graphemes: list[str], line: TextLine, font_ratio: float) -> float:
    """Width of a row: advances plus spacing between, not after, graphemes."""
    if not graphemes:
        return 0.0
    spacing = resolve_spacing(line.letter_spacing, line.font_size)
    advances = sum(estimate_width(g, line.font_size, font_ratio) for g in graphemes)
    return advances + spacing * (len(graphemes) - 1)


def measure_block(line: TextLine, font_ratio: float) -> tuple[float, float]:
    """Return ``(width, height)`` of a text line's block."""
    widths = [row_width(split_graphemes(row), line, font_ratio) for row in line.rows]
    return max(widths, default=0.0), len(widths) * line.row_height


def _layout_rows(
    line: TextLine,
    settings: RenderSettings,
    x_offset: float,
    y_offset: float,
) -> tuple[RowLayout, ...]:
    spacing = resolve_spacing(line.letter_spacing, line.font_size)
    row_height = line.row_height
    rows = []
    for index, text in enumerate(line.rows):
        graphemes = split_graphemes(text)
        width = row_width(graphemes, line, settings.font_ratio)
        if settings.horizontal_center:
            start_x = settings.width / 2 - width / 2
        else:
            start_x = x_offset
        y = y_offset + index * row_height + row_height / 2

        glyphs = []
        cursor = 0.0
        for position, grapheme in enumerate(graphemes):
            advance = estimate_width(grapheme, line.font_size, settings.font_ratio)
            step = advance if position == len(graphemes) - 1 else advance + spacing
            glyphs.append(
                GlyphPlacement(
                    grapheme=grapheme,
                    x_before=start_x + cursor,
                    x_after=start_x + cursor + step,
                    y=y,
                    advance=advance,
                )
            )
            cursor += step
        rows.append(RowLayout(tuple(glyphs), start_x, y, width))
    return tuple(rows)


def _block(
    line: TextLine,
    settings: RenderSettings,
    x_offset: float,
    y_offset: float,
) -> BlockLayout:
    width, height = measure_block(line, settings.font_ratio)
    return BlockLayout(
        line=line,
        rows=_layout_rows(line, settings, x_offset, y_offset),
        x_offset=x_offset,
        y_offset=y_offset,
        width=width,
        height=height,
        spacing=resolve_spacing(line.letter_spacing, line.font_size),
    )


def compute_layout(settings: RenderSettings) -> Layout:
    """Lay out every text line of ``settings``.

    Args:
        settings: Resolved render settings.

    Returns:
        Layout with one block per text line, in input order.
    """
    stacked = settings.deletion_behavior is DeletionBehavior.STAY
    sizes = [measure_block(line, settings.font_ratio) for line in settings.lines]
    total_width = max((w for w, _ in sizes), default=0.0)
    if stacked:
        total_height = sum(h for _, h in sizes)
    else:
        total_height = max((h for _, h in sizes), default=0.0)

    origin_y = (
        (settings.height - total_height) / 2 if settings.vertical_center else TOP_MARGIN
    )
    origin_x = (
        (settings.width - total_width) / 2 if settings.horizontal_center else LEFT_MARGIN
    )

    state = _StackState(blocks=(), accumulated_height=0.0)
    for line, (width, height) in zip(settings.lines, sizes):
        if stacked:
            x_offset = (
                (settings.width - width) / 2 if settings.horizontal_center else origin_x
            )
            y_offset = origin_y + state.accumulated_height
        else:
            x_offset = (
                (settings.width - width) / 2
                if settings.horizontal_center
                else LEFT_MARGIN
            )
            y_offset = (
                (settings.height - height) / 2
                if settings.vertical_center
                else TOP_MARGIN
            )
        block = _block(line, settings, x_offset, y_offset)
        state = _StackState(
            blocks=state.blocks + (block,),
            accumulated_height=state.accumulated_height + (height if stacked else 0.0),
        )

    return Layout(
        blocks=state.blocks,
        origin_x=origin_x,
        origin_y=origin_y,
        total_width=total_width,
        total_height=total_height,
    )
