"""SVG output for svg-typewriter.

This subpackage provides:
- Document tree construction from a layout and a timeline
- Deterministic serialization with compact number formatting
"""

from svg_typewriter.svg.serializer import (
    animate_element,
    build_document,
    format_begin,
    format_number,
    serialize,
)

__all__ = [
    "animate_element",
    "build_document",
    "format_begin",
    "format_number",
    "serialize",
]
