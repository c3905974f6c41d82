"""Unit tests for svg_typewriter.timeline.

Tests cover the three deletion behaviours, cycle duration arithmetic,
repeat anchoring, cursor motion and visibility, and the boundary cases
(empty lines, blank cursor).
"""

import pytest

from svg_typewriter.layout import compute_layout
from svg_typewriter.models import CursorStyle, DeletionBehavior
from svg_typewriter.timeline import (
    CLEAR_DURATION,
    TIE_EPSILON,
    BeginTime,
    compile_timeline,
    deletion_duration,
)


def _compile(settings):
    return compile_timeline(compute_layout(settings), settings)


def _cursor(timeline, attribute):
    return [e for e in timeline.cursor_events if e.attribute == attribute]


class TestBackspace:
    """Type, pause, delete last-in-first-out."""

    def test_two_glyph_scenario(self, make_settings) -> None:
        """'Hi' at 0.5s/char with a 1s pause: typed at 0 and 0.5, deleted at 2.0 and 2.5."""
        timeline = _compile(make_settings("Hi"))
        h, i = timeline.lines[0].glyphs

        assert h.typed_at == 0
        assert i.typed_at == pytest.approx(0.5)
        assert i.deleted_at == pytest.approx(2.0)
        assert h.deleted_at == pytest.approx(2.5)
        assert timeline.cycle_duration == pytest.approx(3.0)

    def test_glyph_events_fade_in_then_out(self, make_settings) -> None:
        timeline = _compile(make_settings("Hi"))
        typed, deleted = timeline.lines[0].glyphs[0].events

        assert (typed.attribute, typed.from_value, typed.to_value) == ("opacity", 0, 1)
        assert typed.begin == BeginTime(0.0, False)
        assert typed.freeze
        assert (deleted.from_value, deleted.to_value) == (1, 0)
        assert deleted.begin == BeginTime(2.5, False)

    def test_deletion_order_is_reverse_typing_order(self, make_settings) -> None:
        timeline = _compile(make_settings("abcdef", deletion_speed=0.2))
        glyphs = timeline.lines[0].glyphs
        k = len(glyphs)

        by_deletion = sorted(range(k), key=lambda idx: glyphs[idx].deleted_at)
        assert by_deletion == [k - 1 - i for i in range(k)]

        times = [glyphs[k - 1 - i].deleted_at for i in range(k)]
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_deletion_spans_rows(self, make_settings) -> None:
        timeline = _compile(make_settings("ab\ncd"))
        glyphs = timeline.lines[0].glyphs
        assert [g.placement.grapheme for g in sorted(glyphs, key=lambda g: g.deleted_at)] == [
            "d",
            "c",
            "b",
            "a",
        ]

    def test_deletion_duration_uses_deletion_speed(self, make_settings) -> None:
        timeline = _compile(make_settings("abcd", deletion_speed=0.1))
        assert timeline.lines[0].deletion_duration == pytest.approx(0.4)
        assert timeline.cycle_duration == pytest.approx(2.0 + 1.0 + 0.4)

    def test_cursor_steps_forward_then_back(self, make_settings) -> None:
        timeline = _compile(make_settings("Hi"))
        layout = compute_layout(make_settings("Hi"))
        h, i = layout.blocks[0].glyphs
        nudge = 28 * 0.12

        typing_x, deleting_x = _cursor(timeline, "x")[:2]
        assert typing_x.discrete
        assert typing_x.values == pytest.approx((h.x_after + nudge, i.x_after + nudge))
        assert typing_x.duration == pytest.approx(1.0)
        assert deleting_x.values == pytest.approx((i.x_before + nudge, h.x_before + nudge))
        assert deleting_x.begin == BeginTime(2.0, False)

    def test_cursor_y_uses_style_offset(self, make_settings) -> None:
        settings = make_settings("Hi", cursor=CursorStyle.UNDERLINE)
        timeline = _compile(settings)
        row_y = compute_layout(settings).blocks[0].rows[0].y

        typing_y = _cursor(timeline, "y")[0]
        assert typing_y.values[0] == pytest.approx(row_y + 28 * 0.45)


class TestClear:
    """Type, pause, everything disappears at once."""

    def test_all_glyphs_hide_together(self, make_settings) -> None:
        timeline = _compile(make_settings("abc", behavior=DeletionBehavior.CLEAR))
        for glyph in timeline.lines[0].glyphs:
            assert glyph.deleted_at == pytest.approx(2.5)

    def test_cycle_includes_nominal_clear(self, make_settings) -> None:
        timeline = _compile(make_settings("abc", "de", behavior=DeletionBehavior.CLEAR))
        first, second = timeline.lines

        assert first.deletion_duration == CLEAR_DURATION
        assert second.start == pytest.approx(1.5 + 1.0 + 0.01)
        assert timeline.cycle_duration == pytest.approx(2.51 + 1.0 + 1.0 + 0.01)

    def test_cursor_jumps_back_to_line_start(self, make_settings) -> None:
        settings = make_settings("abc", behavior=DeletionBehavior.CLEAR)
        timeline = _compile(settings)
        first = compute_layout(settings).blocks[0].glyphs[0]

        jump = _cursor(timeline, "x")[1]
        assert jump.to_value == pytest.approx(first.x_before + 28 * 0.12)
        assert jump.begin == BeginTime(2.5, False)
        assert jump.duration == pytest.approx(0.01)


class TestStay:
    """Text accumulates and is never deleted."""

    def test_no_deletion_events_without_repeat(self, make_settings) -> None:
        timeline = _compile(make_settings("A", "B", behavior=DeletionBehavior.STAY))
        for line in timeline.lines:
            assert line.deletion_duration == 0
            for glyph in line.glyphs:
                assert glyph.deleted_at is None
                assert len(glyph.events) == 1

    def test_cursor_stays_visible_and_blinks_slowly(self, make_settings) -> None:
        timeline = _compile(make_settings("A", "B", behavior=DeletionBehavior.STAY))
        visibility = _cursor(timeline, "visibility")
        blink = _cursor(timeline, "opacity")

        assert len(visibility) == 1
        assert visibility[0].to_value == "visible"
        assert blink[0].duration == pytest.approx(1.4)
        assert blink[0].begin == BeginTime(timeline.cycle_duration, False)
        assert blink[0].indefinite

    def test_repeat_resets_then_shows_with_epsilon(self, make_settings) -> None:
        settings = make_settings("ab", behavior=DeletionBehavior.STAY, repeat=True)
        timeline = _compile(settings)
        reset, show, hide = timeline.lines[0].glyphs[1].events

        assert reset.begin == BeginTime(0.0, True)
        assert reset.duration == 0
        assert reset.to_value == 0
        assert show.begin.offset == pytest.approx(0.5 + TIE_EPSILON)
        assert show.values == (0, 1)
        assert hide.begin == BeginTime(pytest.approx(timeline.typing_horizon), True)

    def test_repeat_hides_everything_at_typing_horizon(self, make_settings) -> None:
        settings = make_settings("ab", "cde", behavior=DeletionBehavior.STAY, repeat=True)
        timeline = _compile(settings)

        assert timeline.typing_horizon == pytest.approx(1.0 + 1.0 + 1.5 + 1.0)
        for line in timeline.lines:
            for glyph in line.glyphs:
                assert glyph.deleted_at == pytest.approx(4.5)

        cursor_hide = _cursor(timeline, "visibility")[1]
        assert cursor_hide.to_value == "hidden"
        assert cursor_hide.begin == BeginTime(pytest.approx(4.5), True)

    def test_cursor_moves_to_next_line_start(self, make_settings) -> None:
        settings = make_settings("A", "B", behavior=DeletionBehavior.STAY)
        timeline = _compile(settings)
        second = compute_layout(settings).blocks[1].rows[0]

        jumps = [e for e in _cursor(timeline, "y") if e.to_value is not None]
        assert len(jumps) == 1
        assert jumps[0].to_value == pytest.approx(second.y - 28 * 0.75)
        assert jumps[0].begin == BeginTime(1.5, False)


class TestCycle:
    """Cycle duration and anchoring."""

    @pytest.mark.parametrize("behavior", list(DeletionBehavior))
    def test_cycle_at_least_sum_of_pauses(self, make_settings, behavior) -> None:
        timeline = _compile(
            make_settings("", "x", "yz", behavior=behavior, typing_speed=0, deletion_speed=0)
        )
        assert timeline.cycle_duration >= 3 * 1.0

    def test_empty_line_keeps_its_pause(self, make_settings) -> None:
        timeline = _compile(make_settings("", "ab"))
        empty, text = timeline.lines

        assert empty.glyphs == []
        assert empty.end == pytest.approx(1.0)
        assert text.start == pytest.approx(1.0)
        assert text.glyphs[0].typed_at == pytest.approx(1.0)

    def test_empty_line_emits_no_cursor_motion(self, make_settings) -> None:
        timeline = _compile(make_settings(""))
        assert not [e for e in timeline.cursor_events if e.discrete]

    def test_repeat_anchors_every_begin(self, make_settings) -> None:
        timeline = _compile(make_settings("ab", "c", repeat=True))
        for line in timeline.lines:
            for glyph in line.glyphs:
                assert all(e.begin.anchored for e in glyph.events)
        assert all(e.begin.anchored for e in timeline.cursor_events)

    def test_repeat_wraps_cursor_to_first_line(self, make_settings) -> None:
        settings = make_settings("ab", "c", repeat=True)
        timeline = _compile(settings)
        first = compute_layout(settings).blocks[0].rows[0]

        last_jump = [e for e in _cursor(timeline, "x") if e.to_value is not None][-1]
        assert last_jump.to_value == pytest.approx(first.start_x + 28 * 0.12)
        assert last_jump.begin.offset == pytest.approx(timeline.cycle_duration)
        assert not last_jump.freeze

    def test_repeat_visibility_keyframes_span_cycle(self, make_settings) -> None:
        timeline = _compile(make_settings("ab", repeat=True))
        visibility = _cursor(timeline, "visibility")

        assert len(visibility) == 1
        assert visibility[0].values == ("hidden", "visible", "hidden")
        assert visibility[0].duration == pytest.approx(timeline.cycle_duration)

    def test_non_repeat_cursor_hides_at_cycle_end(self, make_settings) -> None:
        timeline = _compile(make_settings("ab"))
        show, hide = _cursor(timeline, "visibility")
        assert show.begin == BeginTime(0.0, False)
        assert hide.begin == BeginTime(pytest.approx(timeline.cycle_duration), False)

    def test_deletion_duration_helper(self) -> None:
        assert deletion_duration(DeletionBehavior.STAY, 5, 0.3) == 0
        assert deletion_duration(DeletionBehavior.CLEAR, 5, 0.3) == CLEAR_DURATION
        assert deletion_duration(DeletionBehavior.BACKSPACE, 5, 0.3) == pytest.approx(1.5)


class TestBlankCursor:
    """A blank cursor produces no cursor events at all."""

    @pytest.mark.parametrize("behavior", list(DeletionBehavior))
    @pytest.mark.parametrize("repeat", [True, False])
    def test_no_cursor_events(self, make_settings, behavior, repeat) -> None:
        settings = make_settings(
            "ab", "c", behavior=behavior, repeat=repeat, cursor=CursorStyle.BLANK
        )
        timeline = _compile(settings)

        assert timeline.cursor_events == ()
        assert timeline.cursor_start is None
        assert timeline.glyph_event_count > 0
