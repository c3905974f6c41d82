"""Heuristic text metrics.

There is no font shaping here. Advance widths are estimated per grapheme
from a character class, and letter spacing is converted from CSS lengths
to pixels.
"""

from __future__ import annotations

import regex

from svg_typewriter.models import LetterSpacing

# Root font size used to resolve ``rem``
ROOT_FONT_SIZE = 16.0

# Smallest advance, as a fraction of the font size
MIN_ADVANCE_RATIO = 0.25

_GRAPHEME = regex.compile(r"\X")
_EMOJI = regex.compile(r"\p{Emoji_Presentation}|\p{Extended_Pictographic}")

# Checked in order, first match wins. Several classes overlap (``M`` is
# uppercase and very wide), so the order decides the factor.
_CLASS_FACTORS: tuple[tuple[regex.Pattern[str], float], ...] = (
    (regex.compile(r"[A-Z]"), 1.0),
    (regex.compile(r"[0-9]"), 0.9),
    (regex.compile(r"[-_=+*~^]"), 0.7),
    (regex.compile(r"[MW]"), 1.35),
    (regex.compile(r"[O@#%&<>]"), 1.1),
    (regex.compile(r"[ilI,.;!:'\"`|/()\[\]{}?]"), 1.0),
)
_DEFAULT_FACTOR = 1.0

_LENGTH = regex.compile(r"^([+-]?\d*\.?\d+)(em|rem|px|%)?$")


def split_graphemes(text: str) -> list[str]:
    """Split text into extended grapheme clusters."""
    return _GRAPHEME.findall(text)


def is_emoji(grapheme: str) -> bool:
    return _EMOJI.search(grapheme) is not None


def class_factor(grapheme: str) -> float:
    """Width factor of the first character class ``grapheme`` falls in."""
    for pattern, factor in _CLASS_FACTORS:
        if pattern.search(grapheme):
            return factor
    return _DEFAULT_FACTOR


def estimate_width(grapheme: str, font_size: float, font_ratio: float) -> float:
    """Estimate the advance width of one grapheme in pixels.

    Emoji are treated as square glyphs of ``font_size``. Everything else
    is ``font_size * font_ratio`` scaled by its class factor, never less
    than a quarter of the font size.

    Args:
        grapheme: A single grapheme cluster.
        font_size: Font size in pixels.
        font_ratio: Average advance of the font relative to its size.

    Returns:
        Estimated advance width in pixels.
    """
    if is_emoji(grapheme):
        return font_size
    multiplier = font_ratio * class_factor(grapheme)
    return max(font_size * multiplier, font_size * MIN_ADVANCE_RATIO)


def resolve_spacing(value: LetterSpacing, font_size: float) -> float:
    """Convert a letter-spacing value to pixels.

    Plain numbers are em. Strings may carry an ``em``, ``rem``, ``px`` or
    ``%`` unit (em when missing). ``normal``, ``inherit`` and anything that
    does not parse resolve to 0.

    Args:
        value: Number or CSS length string.
        font_size: Font size in pixels, used for em and percent.

    Returns:
        Spacing in pixels added after every grapheme but the last of a row.
    """
    if isinstance(value, (int, float)):
        return float(value) * font_size

    match = _LENGTH.match(str(value).strip().lower())
    if match is None:
        return 0.0

    number = float(match.group(1))
    unit = match.group(2) or "em"
    if unit == "rem":
        return number * ROOT_FONT_SIZE
    if unit == "px":
        return number
    if unit == "%":
        return number / 100.0 * font_size
    return number * font_size
