"""Cursor shapes.

The cursor is a single rect. Its size and the vertical offset from the
text's middle baseline depend on the style; ``blank`` draws nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

from svg_typewriter.models import CursorStyle

STRAIGHT_WIDTH = 2.5
UNDERLINE_HEIGHT = 3.0

# Horizontal nudge so the cursor sits after the glyph instead of on it
CURSOR_X_NUDGE = 0.12


@dataclass(frozen=True)
class CursorShape:
    """Rect geometry for a cursor, relative to its animated position."""

    width: float
    height: float
    color: str


def cursor_y_offset(style: CursorStyle, font_size: float) -> float:
    """Offset from the row's vertical centre to the top of the cursor rect."""
    if style is CursorStyle.UNDERLINE:
        return font_size * 0.45
    if style is CursorStyle.BLOCK:
        return -font_size * 0.85
    if style is CursorStyle.BLANK:
        return 0.0
    return -font_size * 0.75


def cursor_x_offset(font_size: float) -> float:
    return font_size * CURSOR_X_NUDGE


def shape_for(style: CursorStyle, color: str, font_size: float) -> CursorShape | None:
    """Return the rect for ``style``, or None when no cursor is drawn."""
    if style is CursorStyle.UNDERLINE:
        return CursorShape(font_size * 0.6, UNDERLINE_HEIGHT, color)
    if style is CursorStyle.BLOCK:
        return CursorShape(font_size * 0.6, font_size * 1.2, color)
    if style is CursorStyle.BLANK:
        return None
    return CursorShape(STRAIGHT_WIDTH, font_size * 1.2, color)
