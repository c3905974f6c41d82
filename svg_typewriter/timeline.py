"""Timeline compiler.

Turns a layout into a schedule of declarative animation events: when
each glyph appears and disappears, where the cursor is at every moment,
when the cursor is visible, and how long one full cycle lasts.

Times are seconds. When the render repeats, every begin time is relative
to the ``cycle`` anchor, which restarts itself at the end of each cycle;
otherwise begin times are absolute offsets from document start.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from svg_typewriter.cursor import cursor_x_offset, cursor_y_offset
from svg_typewriter.layout import BlockLayout, GlyphPlacement, Layout
from svg_typewriter.models import CursorStyle, DeletionBehavior, RenderSettings

CYCLE_ANCHOR = "cycle"

# Nominal durations of instantaneous changes
FADE_DURATION = 0.01
CLEAR_DURATION = 0.01
JUMP_DURATION = 0.01

# Shortest duration written for the repeating cycle anchor
MIN_CYCLE_DURATION = 0.01

# Small offsets that order events scheduled at the same instant
TIE_EPSILON = 0.001
VISIBILITY_DELAY = 0.002

BLINK_PERIOD = 0.7
IDLE_BLINK_PERIOD = 1.4

EventValue = float | str


@dataclass(frozen=True)
class BeginTime:
    """Begin of an event, absolute or relative to the cycle anchor."""

    offset: float
    anchored: bool = False


@dataclass(frozen=True)
class TimedEvent:
    """One ``<animate>`` directive.

    Either ``values`` (a keyframe list) or ``from_value``/``to_value`` is
    set. ``freeze`` keeps the final value after the event ends.
    """

    attribute: str
    begin: BeginTime
    duration: float
    from_value: EventValue | None = None
    to_value: EventValue | None = None
    values: tuple[EventValue, ...] = ()
    key_times: tuple[float, ...] = ()
    discrete: bool = False
    freeze: bool = False
    indefinite: bool = False


@dataclass(frozen=True)
class GlyphTimeline:
    placement: GlyphPlacement
    typed_at: float
    deleted_at: float | None
    events: tuple[TimedEvent, ...]


@dataclass(frozen=True)
class LineSchedule:
    """Schedule of one text line, with glyph timelines grouped by row."""

    block: BlockLayout
    start: float
    typing_duration: float
    pause: float
    deletion_duration: float
    rows: tuple[tuple[GlyphTimeline, ...], ...]

    @property
    def glyphs(self) -> list[GlyphTimeline]:
        return [glyph for row in self.rows for glyph in row]

    @property
    def delete_start(self) -> float:
        return self.start + self.typing_duration + self.pause

    @property
    def end(self) -> float:
        return self.delete_start + self.deletion_duration


@dataclass(frozen=True)
class Timeline:
    lines: tuple[LineSchedule, ...]
    cursor_events: tuple[TimedEvent, ...]
    cursor_start: tuple[float, float] | None
    cycle_duration: float
    typing_horizon: float
    repeat: bool

    @property
    def glyph_event_count(self) -> int:
        return sum(len(g.events) for line in self.lines for g in line.glyphs)


class _SchedulerState(NamedTuple):
    cycle_offset: float
    lines: tuple[LineSchedule, ...]
    cursor_events: tuple[TimedEvent, ...]


def deletion_duration(
    behavior: DeletionBehavior, glyph_count: int, deletion_speed: float
) -> float:
    """Time a line spends being removed after its pause."""
    if behavior is DeletionBehavior.BACKSPACE:
        return glyph_count * deletion_speed
    if behavior is DeletionBehavior.CLEAR:
        return CLEAR_DURATION
    return 0.0


def typing_horizon(layout: Layout, pause: float) -> float:
    """Time after which every line has been typed, pauses included."""
    return sum(
        block.glyph_count * block.line.typing_speed + pause for block in layout.blocks
    )


def _glyph_events(
    settings: RenderSettings,
    typed_at: float,
    deleted_at: float | None,
) -> tuple[TimedEvent, ...]:
    anchored = settings.repeat
    behavior = settings.deletion_behavior

    if settings.repeat and behavior is DeletionBehavior.STAY:
        events = [
            TimedEvent("opacity", BeginTime(0.0, True), 0.0, to_value=0, freeze=True),
            TimedEvent(
                "opacity",
                BeginTime(typed_at + TIE_EPSILON, True),
                FADE_DURATION,
                values=(0, 1),
                freeze=True,
            ),
        ]
    else:
        events = [
            TimedEvent(
                "opacity",
                BeginTime(typed_at, anchored),
                FADE_DURATION,
                from_value=0,
                to_value=1,
                freeze=True,
            )
        ]

    if deleted_at is not None:
        if behavior is DeletionBehavior.STAY:
            events.append(
                TimedEvent(
                    "opacity",
                    BeginTime(deleted_at, True),
                    FADE_DURATION,
                    to_value=0,
                    freeze=True,
                )
            )
        else:
            events.append(
                TimedEvent(
                    "opacity",
                    BeginTime(deleted_at, anchored),
                    FADE_DURATION,
                    from_value=1,
                    to_value=0,
                    freeze=True,
                )
            )
    return tuple(events)


def _schedule_glyphs(
    block: BlockLayout,
    settings: RenderSettings,
    start: float,
    horizon: float,
) -> tuple[tuple[GlyphTimeline, ...], ...]:
    line = block.line
    behavior = settings.deletion_behavior
    count = block.glyph_count
    delete_start = start + count * line.typing_speed + settings.pause

    rows = []
    index = 0
    for row in block.rows:
        timelines = []
        for placement in row.glyphs:
            typed_at = start + index * line.typing_speed
            if behavior is DeletionBehavior.BACKSPACE:
                # Last typed, first deleted
                deleted_at = delete_start + (count - 1 - index) * line.deletion_speed
            elif behavior is DeletionBehavior.CLEAR:
                deleted_at = delete_start
            elif settings.repeat:
                deleted_at = horizon
            else:
                deleted_at = None
            timelines.append(
                GlyphTimeline(
                    placement=placement,
                    typed_at=typed_at,
                    deleted_at=deleted_at,
                    events=_glyph_events(settings, typed_at, deleted_at),
                )
            )
            index += 1
        rows.append(tuple(timelines))
    return tuple(rows)


def _position_events(
    xs: list[float],
    ys: list[float],
    begin: BeginTime,
    duration: float,
) -> list[TimedEvent]:
    return [
        TimedEvent(
            "x", begin, duration, values=tuple(xs), discrete=True, freeze=True
        ),
        TimedEvent(
            "y", begin, duration, values=tuple(ys), discrete=True, freeze=True
        ),
    ]


def _jump_events(
    x: float, y: float, begin: BeginTime, freeze: bool = True
) -> list[TimedEvent]:
    return [
        TimedEvent("x", begin, JUMP_DURATION, to_value=x, freeze=freeze),
        TimedEvent("y", begin, JUMP_DURATION, to_value=y, freeze=freeze),
    ]


def _line_start_position(
    block: BlockLayout, style: CursorStyle
) -> tuple[float, float]:
    """Cursor position before the first glyph of ``block`` is typed."""
    font_size = block.line.font_size
    first_row = block.rows[0]
    return (
        first_row.start_x + cursor_x_offset(font_size),
        first_row.y + cursor_y_offset(style, font_size),
    )


def _cursor_motion(
    index: int,
    schedule: LineSchedule,
    layout: Layout,
    settings: RenderSettings,
) -> list[TimedEvent]:
    block = schedule.block
    line = block.line
    behavior = settings.deletion_behavior
    style = settings.cursor_style
    anchored = settings.repeat
    dx = cursor_x_offset(line.font_size)
    dy = cursor_y_offset(style, line.font_size)
    glyphs = block.glyphs

    events: list[TimedEvent] = []
    if glyphs:
        events += _position_events(
            [g.x_after + dx for g in glyphs],
            [g.y + dy for g in glyphs],
            BeginTime(schedule.start, anchored),
            schedule.typing_duration,
        )

    if behavior is DeletionBehavior.BACKSPACE and glyphs:
        deleting = list(reversed(glyphs))
        events += _position_events(
            [g.x_before + dx for g in deleting],
            [g.y + dy for g in deleting],
            BeginTime(schedule.delete_start, anchored),
            schedule.deletion_duration,
        )
    elif behavior is DeletionBehavior.CLEAR and glyphs:
        events += _jump_events(
            glyphs[0].x_before + dx,
            glyphs[0].y + dy,
            BeginTime(schedule.delete_start, anchored),
        )

    is_last = index == len(layout.blocks) - 1
    if not is_last or (settings.repeat and behavior is not DeletionBehavior.STAY):
        target = layout.blocks[(index + 1) % len(layout.blocks)]
        x, y = _line_start_position(target, style)
        events += _jump_events(
            x, y, BeginTime(schedule.end, anchored), freeze=not settings.repeat
        )
    return events


def _cursor_visibility(
    settings: RenderSettings, cycle: float, horizon: float
) -> list[TimedEvent]:
    stay = settings.deletion_behavior is DeletionBehavior.STAY

    if settings.repeat:
        reveal = BeginTime(VISIBILITY_DELAY, True)
        if stay:
            events = [
                TimedEvent(
                    "visibility",
                    reveal,
                    FADE_DURATION,
                    from_value="hidden",
                    to_value="visible",
                    freeze=True,
                ),
                TimedEvent(
                    "visibility",
                    BeginTime(horizon, True),
                    FADE_DURATION,
                    to_value="hidden",
                    freeze=True,
                ),
            ]
        else:
            events = [
                TimedEvent(
                    "visibility",
                    reveal,
                    cycle,
                    values=("hidden", "visible", "hidden"),
                    key_times=(0.0, 0.001, 1.0),
                )
            ]
        blink = TimedEvent(
            "opacity", reveal, BLINK_PERIOD, values=(1, 0), indefinite=True
        )
        return events + [blink]

    events = [
        TimedEvent(
            "visibility",
            BeginTime(0.0),
            FADE_DURATION,
            from_value="hidden",
            to_value="visible",
            freeze=True,
        )
    ]
    if stay:
        # Typing is over; keep blinking where the cursor stopped
        blink = TimedEvent(
            "opacity",
            BeginTime(cycle),
            IDLE_BLINK_PERIOD,
            values=(1, 0, 1),
            indefinite=True,
        )
    else:
        events.append(
            TimedEvent(
                "visibility",
                BeginTime(cycle),
                FADE_DURATION,
                to_value="hidden",
                freeze=True,
            )
        )
        blink = TimedEvent(
            "opacity", BeginTime(0.0), BLINK_PERIOD, values=(1, 0), indefinite=True
        )
    return events + [blink]


def _schedule_line(
    state: _SchedulerState,
    index: int,
    layout: Layout,
    settings: RenderSettings,
    horizon: float,
) -> _SchedulerState:
    block = layout.blocks[index]
    line = block.line
    count = block.glyph_count
    start = state.cycle_offset

    schedule = LineSchedule(
        block=block,
        start=start,
        typing_duration=count * line.typing_speed,
        pause=settings.pause,
        deletion_duration=deletion_duration(
            settings.deletion_behavior, count, line.deletion_speed
        ),
        rows=_schedule_glyphs(block, settings, start, horizon),
    )

    cursor_events = state.cursor_events
    if settings.cursor_style is not CursorStyle.BLANK:
        cursor_events += tuple(_cursor_motion(index, schedule, layout, settings))

    return _SchedulerState(
        cycle_offset=schedule.end,
        lines=state.lines + (schedule,),
        cursor_events=cursor_events,
    )


def compile_timeline(layout: Layout, settings: RenderSettings) -> Timeline:
    """Schedule every animation event of a render.

    Lines run one after the other; each one is typed, held for the pause,
    then removed according to the deletion behaviour. The running cycle
    offset is threaded through the lines in order.

    Args:
        layout: Layout computed from ``settings``.
        settings: Resolved render settings.

    Returns:
        The complete timeline, including cursor events unless the cursor
        style is ``blank``.
    """
    horizon = typing_horizon(layout, settings.pause)

    state = _SchedulerState(cycle_offset=0.0, lines=(), cursor_events=())
    for index in range(len(layout.blocks)):
        state = _schedule_line(state, index, layout, settings, horizon)

    cycle = state.cycle_offset
    cursor_events = state.cursor_events
    cursor_start = None
    if settings.cursor_style is not CursorStyle.BLANK:
        cursor_events += tuple(_cursor_visibility(settings, cycle, horizon))
        if layout.blocks:
            cursor_start = _line_start_position(layout.blocks[0], settings.cursor_style)

    return Timeline(
        lines=state.lines,
        cursor_events=cursor_events,
        cursor_start=cursor_start,
        cycle_duration=cycle,
        typing_horizon=horizon,
        repeat=settings.repeat,
    )
