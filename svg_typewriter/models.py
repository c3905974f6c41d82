"""Input data model for a typing-effect render.

Everything here is immutable: one ``RenderSettings`` describes one render
and is never modified after the request parameters are resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CursorStyle(str, Enum):
    """Shape drawn for the typing cursor."""

    STRAIGHT = "straight"
    UNDERLINE = "underline"
    BLOCK = "block"
    BLANK = "blank"

    @classmethod
    def parse(cls, value: str | None) -> CursorStyle:
        """Return the matching style, falling back to ``STRAIGHT``."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.STRAIGHT


class DeletionBehavior(str, Enum):
    """What happens to a line once it has been typed and the pause is over."""

    STAY = "stay"
    BACKSPACE = "backspace"
    CLEAR = "clear"

    @classmethod
    def parse(cls, value: str | None) -> DeletionBehavior | None:
        """Return the matching behaviour, or None if ``value`` is not one."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return None


LetterSpacing = float | str

ROW_HEIGHT_FACTOR = 1.3


@dataclass(frozen=True)
class TextLine:
    """One logical line of animated text.

    ``content`` may contain ``\\n`` to break the line into several visual
    rows that are typed one after the other.
    """

    content: str
    font_family: str = "Courier Prime"
    color: str = "#000000"
    font_size: float = 28.0
    letter_spacing: LetterSpacing = "0.1em"
    typing_speed: float = 0.5
    deletion_speed: float = 0.5
    font_weight: str = "400"

    @property
    def rows(self) -> list[str]:
        return self.content.split("\n")

    @property
    def row_height(self) -> float:
        return self.font_size * ROW_HEIGHT_FACTOR

    @property
    def letter_spacing_css(self) -> str:
        """Letter spacing as a CSS value; plain numbers are em."""
        if isinstance(self.letter_spacing, (int, float)):
            return f"{self.letter_spacing:g}em"
        return str(self.letter_spacing)


@dataclass(frozen=True)
class RenderSettings:
    """Resolved configuration for a single render."""

    lines: tuple[TextLine, ...] = field(default_factory=tuple)
    width: float = 450.0
    height: float = 150.0
    pause_ms: float = 1000.0
    repeat: bool = True
    background_color: str = "#ffffff"
    background_opacity: float = 1.0
    horizontal_center: bool = True
    vertical_center: bool = True
    border: bool = True
    cursor_style: CursorStyle = CursorStyle.STRAIGHT
    deletion_behavior: DeletionBehavior = DeletionBehavior.BACKSPACE
    font_ratio: float = 0.6

    @property
    def pause(self) -> float:
        """Pause after each line, in seconds."""
        return self.pause_ms / 1000.0
