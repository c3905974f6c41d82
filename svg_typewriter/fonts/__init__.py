"""Font embedding for svg-typewriter.

This subpackage provides:
- The FontResolver interface and a no-op resolver for offline renders
- A Google Fonts client that inlines font files as data URIs
- Parallel resolution of every family used by a render
"""

from svg_typewriter.fonts.google import GoogleFontsResolver
from svg_typewriter.fonts.resolver import (
    FontResolver,
    NullFontResolver,
    collect_font_css,
    unique_characters,
)

__all__ = [
    "FontResolver",
    "GoogleFontsResolver",
    "NullFontResolver",
    "collect_font_css",
    "unique_characters",
]
