"""Request parameter resolver.

Turns flat query parameters into ``RenderSettings``. Two input shapes are
accepted:

- ``lines``: a JSON array of per-line objects (``text``, ``font``,
  ``color``, ``fontSize``, ``letterSpacing``, ``typingSpeed``,
  ``deleteSpeed``, ``fontWeight``);
- ``text``: one string with lines joined by ``;``, styled by the flat
  ``font``, ``color``, ``fontSize``... parameters.

All validation happens here, before any layout work.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

from svg_typewriter.config import Defaults
from svg_typewriter.exceptions import InvalidLinesError, InvalidNumericError
from svg_typewriter.models import (
    CursorStyle,
    DeletionBehavior,
    LetterSpacing,
    RenderSettings,
    TextLine,
)

LINE_SEPARATOR = ";"

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_query(query: str) -> dict[str, str]:
    """Parse a query string, keeping the first value of repeated keys."""
    params: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)
    return params


def _get(query: Mapping[str, str], name: str) -> str | None:
    """Return a parameter, treating an empty value as missing."""
    value = query.get(name)
    return value if value else None


def _flag(query: Mapping[str, str], name: str, default: bool) -> bool:
    value = query.get(name)
    if value is None:
        return default
    return value == "true"


def _int_param(query: Mapping[str, str], name: str, default: int) -> int:
    raw = _get(query, name)
    if raw is None:
        return default
    match = _INT_PREFIX.match(raw)
    if match is None:
        raise InvalidNumericError(name, raw)
    try:
        return int(match.group(1))
    except ValueError as e:
        # Longer than the interpreter's int string limit
        raise InvalidNumericError(name, raw) from e


def _float_param(query: Mapping[str, str], name: str, default: float) -> float:
    raw = _get(query, name)
    if raw is None:
        return default
    match = _FLOAT_PREFIX.match(raw)
    if match is None:
        raise InvalidNumericError(name, raw)
    return float(match.group(1))


def _require(name: str, value: float, minimum: float = 0.0, strict: bool = True) -> float:
    """Raise unless ``value`` is finite and above (or at) ``minimum``."""
    try:
        finite = math.isfinite(value)
    except OverflowError as e:
        raise InvalidNumericError(name, value) from e
    if not finite or value < minimum or (strict and value == minimum):
        raise InvalidNumericError(name, value)
    return value


def parse_letter_spacing(raw: str) -> LetterSpacing:
    """Keep a plain number as a number (em), anything else as CSS text."""
    try:
        number = float(raw)
    except ValueError:
        return raw
    return number if math.isfinite(number) else raw


def resolve_deletion_behavior(
    query: Mapping[str, str], default: DeletionBehavior
) -> DeletionBehavior:
    """Pick the deletion behaviour, honouring the legacy ``deleteAfter`` flag."""
    behavior = DeletionBehavior.parse(query.get("deletionBehavior"))
    if behavior is not None:
        return behavior
    delete_after = query.get("deleteAfter")
    if delete_after is not None:
        return DeletionBehavior.BACKSPACE if delete_after == "true" else DeletionBehavior.STAY
    return default


def _number(item: Mapping[str, Any], key: str, default: float) -> float:
    value = item.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} must be a number")
    try:
        number = float(value)
    except OverflowError as e:
        raise ValueError(f"{key} is out of range") from e
    if not math.isfinite(number):
        raise ValueError(f"{key} must be finite")
    return number


def _line_from_object(item: Mapping[str, Any], defaults: Defaults) -> TextLine:
    font_size = _number(item, "fontSize", defaults.font_size)
    typing_speed = _number(item, "typingSpeed", defaults.typing_speed)
    delete_speed = _number(item, "deleteSpeed", defaults.delete_speed)
    if font_size <= 0:
        raise ValueError("fontSize must be positive")
    if typing_speed < 0 or delete_speed < 0:
        raise ValueError("speeds must not be negative")

    letter_spacing = item.get("letterSpacing", defaults.letter_spacing)
    if isinstance(letter_spacing, bool) or not isinstance(
        letter_spacing, (int, float, str)
    ):
        raise ValueError("letterSpacing must be a number or a string")

    return TextLine(
        content=str(item.get("text", "")),
        font_family=str(item.get("font", defaults.font)),
        color=str(item.get("color", defaults.color)),
        font_size=font_size,
        letter_spacing=letter_spacing,
        typing_speed=typing_speed,
        deletion_speed=delete_speed,
        font_weight=str(item.get("fontWeight", defaults.font_weight)),
    )


def parse_lines(raw: str, defaults: Defaults) -> tuple[TextLine, ...]:
    """Decode the JSON ``lines`` parameter.

    Raises:
        InvalidLinesError: If ``raw`` is not a non-empty JSON array of
            line objects with valid values.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise InvalidLinesError({"error": str(e)}) from e

    if not isinstance(data, list) or not data:
        raise InvalidLinesError({"error": "expected a non-empty array"})

    lines = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidLinesError({"line": position, "error": "expected an object"})
        try:
            lines.append(_line_from_object(item, defaults))
        except ValueError as e:
            raise InvalidLinesError({"line": position, "error": str(e)}) from e
    return tuple(lines)


def _legacy_lines(query: Mapping[str, str], defaults: Defaults) -> tuple[TextLine, ...]:
    """Split ``text`` on ``;`` and apply the flat style parameters to each."""
    font_size = _require("fontSize", _int_param(query, "fontSize", defaults.font_size))
    typing_speed = _require(
        "typingSpeed",
        _float_param(query, "typingSpeed", defaults.typing_speed),
        strict=False,
    )
    delete_speed = _require(
        "deleteSpeed",
        _float_param(query, "deleteSpeed", typing_speed),
        strict=False,
    )
    letter_spacing = parse_letter_spacing(
        _get(query, "letterSpacing") or defaults.letter_spacing
    )
    text = _get(query, "text") or defaults.text

    return tuple(
        TextLine(
            content=segment,
            font_family=_get(query, "font") or defaults.font,
            color=_get(query, "color") or defaults.color,
            font_size=font_size,
            letter_spacing=letter_spacing,
            typing_speed=typing_speed,
            deletion_speed=delete_speed,
            font_weight=_get(query, "fontWeight") or defaults.font_weight,
        )
        for segment in text.split(LINE_SEPARATOR)
    )


def resolve_params(
    query: Mapping[str, str] | str, defaults: Defaults | None = None
) -> RenderSettings:
    """Build render settings from request parameters.

    Args:
        query: Parameter mapping, or a raw query string.
        defaults: Values for missing parameters.

    Returns:
        Validated render settings.

    Raises:
        InvalidLinesError: If ``lines`` is given but malformed.
        InvalidNumericError: If a numeric parameter is not a number or is
            out of range.
    """
    if isinstance(query, str):
        query = parse_query(query)
    defaults = defaults or Defaults()

    width = _require("width", _int_param(query, "width", defaults.width))
    height = _require("height", _int_param(query, "height", defaults.height))
    pause = _require("pause", _int_param(query, "pause", defaults.pause), strict=False)
    font_ratio = _require(
        "fontRatio", _float_param(query, "fontRatio", defaults.font_ratio)
    )
    background_opacity = _require(
        "backgroundOpacity",
        _float_param(query, "backgroundOpacity", defaults.background_opacity),
        strict=False,
    )

    raw_lines = _get(query, "lines")
    if raw_lines is not None:
        lines = parse_lines(raw_lines, defaults)
    else:
        lines = _legacy_lines(query, defaults)

    default_behavior = DeletionBehavior.parse(defaults.deletion_behavior)
    return RenderSettings(
        lines=lines,
        width=width,
        height=height,
        pause_ms=pause,
        repeat=_flag(query, "repeat", defaults.repeat),
        background_color=_get(query, "backgroundColor") or defaults.background_color,
        background_opacity=min(background_opacity, 1.0),
        horizontal_center=_flag(query, "center", defaults.center),
        vertical_center=_flag(query, "vCenter", defaults.v_center),
        border=_flag(query, "border", defaults.border),
        cursor_style=CursorStyle.parse(_get(query, "cursorStyle") or defaults.cursor_style),
        deletion_behavior=resolve_deletion_behavior(
            query, default_behavior or DeletionBehavior.BACKSPACE
        ),
        font_ratio=font_ratio,
    )
