"""svg-typewriter: Animated typing-effect SVG generator.

This library renders text as if it were being typed, with:
- Per-line font, colour, size, spacing and speed
- Straight, underline, block or hidden cursors
- Stay, backspace or clear deletion behaviour, optionally looping
- Pure SMIL animation (no script), optionally with embedded web fonts

Example:
    >>> from svg_typewriter import TypingSvgRenderer
    >>> from svg_typewriter.fonts import NullFontResolver
    >>> renderer = TypingSvgRenderer(font_resolver=NullFontResolver())
    >>> renderer.render_query("text=Hello;World").svg[:4]
    '<svg'
"""

from svg_typewriter.api import (
    RenderResult,
    SvgResponse,
    TypingSvgRenderer,
    handle_request,
)
from svg_typewriter.config import Config
from svg_typewriter.exceptions import (
    ConfigError,
    FontFetchError,
    InvalidLinesError,
    InvalidNumericError,
    ParameterError,
    TypewriterError,
)
from svg_typewriter.models import (
    CursorStyle,
    DeletionBehavior,
    RenderSettings,
    TextLine,
)
from svg_typewriter.params import resolve_params

__version__ = "0.3.0"

__all__ = [
    # Main API
    "TypingSvgRenderer",
    "RenderResult",
    "SvgResponse",
    "handle_request",
    "resolve_params",
    "Config",
    # Models
    "TextLine",
    "RenderSettings",
    "CursorStyle",
    "DeletionBehavior",
    # Exceptions
    "TypewriterError",
    "ParameterError",
    "InvalidLinesError",
    "InvalidNumericError",
    "FontFetchError",
    "ConfigError",
    # Metadata
    "__version__",
]
