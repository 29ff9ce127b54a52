"""
Tests for the focus session controller: ticking, pause semantics, automatic
mode transitions and configuration errors.
"""
import os
import sys

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['TICK_INTERVAL_SECONDS'] = '3600'

# Add the backend directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import unittest
from datetime import datetime
from unittest.mock import ANY, Mock

from focusroom.focus import (
    FocusConfig,
    FocusSessionController,
    InvalidConfiguration,
    TimerMode,
)


def short_config(**overrides):
    values = dict(
        focus_duration=5,
        short_break_duration=3,
        long_break_duration=10,
        long_break_interval=2,
        auto_start_breaks=True,
        auto_start_pomodoros=True,
    )
    values.update(overrides)
    return FocusConfig(**values)


class TestTimerBasics(unittest.TestCase):

    def setUp(self):
        self.controller = FocusSessionController(short_config(focus_duration=90))

    def test_initial_state(self):
        session = self.controller.session
        self.assertEqual(session.mode, TimerMode.FOCUS)
        self.assertEqual(session.duration_seconds, 90)
        self.assertEqual(session.remaining_seconds, 90)
        self.assertFalse(session.is_running)
        self.assertEqual(session.completed_focus_count, 0)
        self.assertEqual(session.remaining_display, "01:30")

    def test_tick_while_paused_is_a_no_op(self):
        for _ in range(10):
            self.assertIsNone(self.controller.tick())
        self.assertEqual(self.controller.session.remaining_seconds, 90)

    def test_start_is_idempotent_and_keeps_remaining(self):
        self.controller.start()
        self.controller.tick()
        self.controller.start()
        self.assertTrue(self.controller.is_running)
        self.assertEqual(self.controller.session.remaining_seconds, 89)

    def test_pause_keeps_remaining(self):
        self.controller.start()
        for _ in range(30):
            self.controller.tick()
        self.controller.pause()
        self.controller.pause()
        self.controller.tick()
        self.assertFalse(self.controller.is_running)
        self.assertEqual(self.controller.session.remaining_seconds, 60)
        self.assertAlmostEqual(self.controller.session.progress_percent, 100 / 3)

    def test_reset_rewinds_without_touching_count(self):
        controller = FocusSessionController(short_config())
        controller.start()
        for _ in range(5):
            controller.tick()
        self.assertEqual(controller.session.completed_focus_count, 1)
        controller.tick()

        controller.reset()
        session = controller.session
        self.assertEqual(session.mode, TimerMode.SHORT_BREAK)
        self.assertEqual(session.remaining_seconds, 3)
        self.assertFalse(session.is_running)
        self.assertEqual(session.completed_focus_count, 1)

    def test_session_is_a_copy(self):
        snapshot = self.controller.session
        snapshot.remaining_seconds = 1
        self.assertEqual(self.controller.session.remaining_seconds, 90)


class TestCountdown(unittest.TestCase):

    def test_ticks_reach_exactly_zero(self):
        for duration in (1, 2, 7, 60):
            sink = Mock()
            controller = FocusSessionController(
                short_config(focus_duration=duration, auto_start_breaks=False), sink=sink
            )
            controller.start()
            for _ in range(duration - 1):
                controller.tick()
            self.assertEqual(controller.session.remaining_seconds, 1)
            transition = controller.tick()
            self.assertIsNotNone(transition)
            sink.record_completed_session.assert_called_once_with(
                TimerMode.FOCUS, duration, ANY
            )

    def test_remaining_never_negative(self):
        controller = FocusSessionController(short_config(focus_duration=3))
        seen = []
        controller.on_tick = lambda session: seen.append(session.remaining_seconds)
        controller.start()
        for _ in range(3):
            controller.tick()
        self.assertEqual(seen, [2, 1, 0])


class TestTransitions(unittest.TestCase):

    def test_end_to_end_mode_sequence(self):
        controller = FocusSessionController(short_config())
        modes = [controller.mode]
        controller.on_transition = lambda t: modes.append(t.current)

        controller.start()
        for _ in range(5):
            controller.tick()
        self.assertEqual(controller.session.completed_focus_count, 1)
        self.assertEqual(controller.mode, TimerMode.SHORT_BREAK)
        for _ in range(3):
            controller.tick()
        for _ in range(5):
            controller.tick()
        self.assertEqual(controller.session.completed_focus_count, 2)
        self.assertEqual(controller.mode, TimerMode.LONG_BREAK)
        for _ in range(10):
            controller.tick()

        self.assertEqual(
            modes,
            [
                TimerMode.FOCUS,
                TimerMode.SHORT_BREAK,
                TimerMode.FOCUS,
                TimerMode.LONG_BREAK,
                TimerMode.FOCUS,
            ],
        )

    def test_long_break_every_fourth_focus_by_default(self):
        config = FocusConfig(focus_duration=2, short_break_duration=1, long_break_duration=1)
        controller = FocusSessionController(config)
        controller.start()
        breaks = []
        for _ in range(12):
            for _ in range(2):
                controller.tick()
            breaks.append(controller.mode)
            controller.tick()
            self.assertEqual(controller.mode, TimerMode.FOCUS)

        long_breaks = [i + 1 for i, mode in enumerate(breaks) if mode == TimerMode.LONG_BREAK]
        self.assertEqual(long_breaks, [4, 8, 12])
        self.assertEqual(breaks.count(TimerMode.SHORT_BREAK), 9)

    def test_auto_start_flags(self):
        controller = FocusSessionController(
            short_config(auto_start_breaks=False, auto_start_pomodoros=True)
        )
        controller.start()
        for _ in range(5):
            controller.tick()
        self.assertEqual(controller.mode, TimerMode.SHORT_BREAK)
        self.assertFalse(controller.is_running)
        controller.tick()
        self.assertEqual(controller.session.remaining_seconds, 3)

        controller.start()
        for _ in range(3):
            controller.tick()
        self.assertEqual(controller.mode, TimerMode.FOCUS)
        self.assertTrue(controller.is_running)

    def test_manual_mode_change_never_counts(self):
        controller = FocusSessionController(short_config())
        controller.start()
        controller.tick()
        for mode in (TimerMode.SHORT_BREAK, TimerMode.FOCUS, TimerMode.LONG_BREAK, TimerMode.FOCUS):
            transition = controller.set_mode(mode)
            self.assertFalse(transition.automatic)
            session = controller.session
            self.assertEqual(session.mode, mode)
            self.assertEqual(session.remaining_seconds, session.duration_seconds)
            self.assertFalse(session.is_running)
            self.assertEqual(session.completed_focus_count, 0)

    def test_countdown_override_replaces_focus_duration(self):
        controller = FocusSessionController(short_config(countdown_minutes=2))
        self.assertEqual(controller.session.duration_seconds, 120)
        controller.set_mode(TimerMode.SHORT_BREAK)
        self.assertEqual(controller.session.duration_seconds, 3)

    def test_sink_failure_does_not_stop_the_timer(self):
        sink = Mock()
        sink.record_completed_session.side_effect = RuntimeError("store down")
        completed_at = datetime(2026, 1, 5, 9, 30)
        controller = FocusSessionController(short_config(), sink=sink, clock=lambda: completed_at)
        controller.start()
        for _ in range(5):
            controller.tick()
        sink.record_completed_session.assert_called_once_with(TimerMode.FOCUS, 5, completed_at)
        self.assertEqual(controller.mode, TimerMode.SHORT_BREAK)
        self.assertTrue(controller.is_running)


class TestConfiguration(unittest.TestCase):

    def test_rejects_non_positive_focus_duration(self):
        for bad in (0, -5):
            with self.assertRaises(InvalidConfiguration):
                FocusSessionController(short_config(focus_duration=bad))

    def test_rejects_bad_long_break_interval(self):
        with self.assertRaises(InvalidConfiguration):
            FocusSessionController(short_config(long_break_interval=0))

    def test_set_mode_rejects_before_mutating(self):
        controller = FocusSessionController(short_config(short_break_duration=0))
        controller.start()
        controller.tick()
        with self.assertRaises(InvalidConfiguration):
            controller.set_mode(TimerMode.SHORT_BREAK)
        session = controller.session
        self.assertEqual(session.mode, TimerMode.FOCUS)
        self.assertEqual(session.remaining_seconds, 4)
        self.assertTrue(session.is_running)

    def test_invalid_break_stops_automatic_transition(self):
        sink = Mock()
        controller = FocusSessionController(short_config(focus_duration=2, short_break_duration=0), sink=sink)
        controller.start()
        controller.tick()
        with self.assertRaises(InvalidConfiguration):
            controller.tick()
        self.assertEqual(controller.mode, TimerMode.FOCUS)
        self.assertEqual(controller.session.completed_focus_count, 0)
        sink.record_completed_session.assert_not_called()

    def test_reconfigure_while_paused_applies_now(self):
        controller = FocusSessionController(short_config())
        controller.reconfigure(short_config(focus_duration=8))
        self.assertEqual(controller.session.remaining_seconds, 8)

    def test_reconfigure_while_running_applies_at_next_mode(self):
        controller = FocusSessionController(short_config())
        controller.start()
        controller.tick()
        controller.reconfigure(short_config(short_break_duration=4))
        self.assertEqual(controller.session.remaining_seconds, 4)
        for _ in range(4):
            controller.tick()
        self.assertEqual(controller.mode, TimerMode.SHORT_BREAK)
        self.assertEqual(controller.session.duration_seconds, 4)

    def test_invalid_reconfigure_keeps_old_config(self):
        config = short_config()
        controller = FocusSessionController(config)
        with self.assertRaises(InvalidConfiguration):
            controller.reconfigure(short_config(focus_duration=0))
        self.assertIs(controller.config, config)
        self.assertEqual(controller.session.remaining_seconds, 5)


if __name__ == "__main__":
    unittest.main()
