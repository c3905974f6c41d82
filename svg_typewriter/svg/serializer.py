"""SVG document builder.

Builds an ``xml.etree.ElementTree`` tree from a layout, a timeline and a
cursor shape, then serializes it. Element and attribute order are fixed
so the same input always produces the same bytes.
"""

from __future__ import annotations

from xml.etree.ElementTree import Element, SubElement, tostring

from svg_typewriter.cursor import CursorShape
from svg_typewriter.layout import BlockLayout, Layout
from svg_typewriter.models import RenderSettings, TextLine
from svg_typewriter.timeline import (
    CYCLE_ANCHOR,
    MIN_CYCLE_DURATION,
    BeginTime,
    EventValue,
    LineSchedule,
    Timeline,
    TimedEvent,
)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
CLIP_ID = "master-clip"
TEXT_CLASS = "text-common"
GENERIC_FONT_FALLBACK = "monospace"

BASE_CSS = f""".{TEXT_CLASS} {{
  dominant-baseline: middle;
  text-rendering: optimizeLegibility;
  shape-rendering: geometricPrecision;
}}"""


def format_number(value: float) -> str:
    """Round to 3 decimals and drop trailing zeros (``1.500`` -> ``1.5``)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_seconds(value: float) -> str:
    return f"{format_number(value)}s"


def format_begin(begin: BeginTime) -> str:
    """Render a begin time, e.g. ``2.5s`` or ``cycle.begin + 2.5s``."""
    if not begin.anchored:
        return format_seconds(begin.offset)
    if format_number(begin.offset) == "0":
        return f"{CYCLE_ANCHOR}.begin"
    return f"{CYCLE_ANCHOR}.begin + {format_seconds(begin.offset)}"


def _format_value(value: EventValue) -> str:
    if isinstance(value, str):
        return value
    return format_number(value)


def animate_element(event: TimedEvent) -> Element:
    """Build the ``<animate>`` element for one timed event."""
    attrs = {"attributeName": event.attribute}
    if event.values:
        attrs["values"] = ";".join(_format_value(v) for v in event.values)
    else:
        if event.from_value is not None:
            attrs["from"] = _format_value(event.from_value)
        if event.to_value is not None:
            attrs["to"] = _format_value(event.to_value)
    if event.key_times:
        attrs["keyTimes"] = ";".join(format_number(t) for t in event.key_times)
    attrs["dur"] = format_seconds(event.duration)
    if event.discrete:
        attrs["calcMode"] = "discrete"
    attrs["begin"] = format_begin(event.begin)
    if event.freeze:
        attrs["fill"] = "freeze"
    if event.indefinite:
        attrs["repeatCount"] = "indefinite"
    return Element("animate", attrs)


def font_stack(family: str) -> str:
    """CSS font-family list ending in the generic fallback."""
    return f"'{family}',{GENERIC_FONT_FALLBACK}"


def _text_style(line: TextLine) -> str:
    return (
        f"font-family:{font_stack(line.font_family)};"
        f"font-size:{format_number(line.font_size)}px;"
        f"fill:{line.color};"
        f"letter-spacing:{line.letter_spacing_css};"
    )


def _text_elements(block: BlockLayout, schedule: LineSchedule) -> list[Element]:
    elements = []
    style = _text_style(block.line)
    for row, glyphs in zip(block.rows, schedule.rows):
        if not glyphs:
            continue
        text = Element(
            "text",
            {"class": TEXT_CLASS, "y": format_number(row.y), XML_SPACE: "preserve"},
        )
        text.set("style", style)
        for glyph in glyphs:
            tspan = SubElement(
                text,
                "tspan",
                {"x": format_number(glyph.placement.x_before), "opacity": "0"},
            )
            tspan.text = glyph.placement.grapheme
            for event in glyph.events:
                tspan.append(animate_element(event))
        elements.append(text)
    return elements


def _cursor_element(cursor: CursorShape, timeline: Timeline) -> Element:
    attrs = {}
    if timeline.cursor_start is not None:
        x, y = timeline.cursor_start
        attrs["x"] = format_number(x)
        attrs["y"] = format_number(y)
    attrs.update(
        {
            "width": format_number(cursor.width),
            "height": format_number(cursor.height),
            "fill": cursor.color,
            "visibility": "hidden",
        }
    )
    rect = Element("rect", attrs)
    for event in timeline.cursor_events:
        rect.append(animate_element(event))
    return rect


def build_document(
    layout: Layout,
    timeline: Timeline,
    cursor: CursorShape | None,
    settings: RenderSettings,
    font_css: str = "",
) -> Element:
    """Build the SVG document tree.

    Args:
        layout: Glyph placements.
        timeline: Compiled animation schedule for ``layout``.
        cursor: Cursor rect, or None for no cursor.
        settings: Render settings (canvas, background, repeat).
        font_css: ``@font-face`` rules to embed, may be empty.

    Returns:
        The root ``<svg>`` element.
    """
    width = format_number(settings.width)
    height = format_number(settings.height)
    root = Element(
        "svg",
        {
            "width": width,
            "height": height,
            "viewBox": f"0 0 {width} {height}",
            "xmlns": SVG_NAMESPACE,
        },
    )

    background = {
        "x": "0.5",
        "y": "0.5",
        "width": format_number(settings.width - 1),
        "height": format_number(settings.height - 1),
        "fill": settings.background_color,
    }
    if settings.background_opacity < 1:
        background["fill-opacity"] = format_number(settings.background_opacity)
    background.update(
        {
            "stroke": "#000" if settings.border else "none",
            "stroke-width": "1",
            "rx": "4",
        }
    )
    SubElement(root, "rect", background)

    defs = SubElement(root, "defs")
    if timeline.repeat:
        SubElement(
            defs,
            "animate",
            {
                "id": CYCLE_ANCHOR,
                "begin": f"0s;{CYCLE_ANCHOR}.end",
                "dur": format_seconds(max(timeline.cycle_duration, MIN_CYCLE_DURATION)),
            },
        )
    clip = SubElement(defs, "clipPath", {"id": CLIP_ID})
    SubElement(clip, "rect", {"x": "0", "y": "0", "width": width, "height": height})
    style = SubElement(defs, "style", {"type": "text/css"})
    style.text = "\n".join(part for part in (font_css.strip(), BASE_CSS) if part)

    group = SubElement(root, "g", {"clip-path": f"url(#{CLIP_ID})"})
    for block, schedule in zip(layout.blocks, timeline.lines):
        group.extend(_text_elements(block, schedule))
    if cursor is not None:
        group.append(_cursor_element(cursor, timeline))

    return root


def serialize(
    layout: Layout,
    timeline: Timeline,
    cursor: CursorShape | None,
    settings: RenderSettings,
    font_css: str = "",
) -> str:
    """Render the complete SVG document as a string."""
    root = build_document(layout, timeline, cursor, settings, font_css)
    return tostring(root, encoding="unicode")
