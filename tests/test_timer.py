"""Tests for the timer module."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from conftest import FailingEffects, RecordingEffects, ScriptedPause
from focus_timer.effects import EffectGate
from focus_timer.models import CycleConfig
from focus_timer.pause import PauseSignal
from focus_timer.timer import POLL_INTERVAL, TICK_SECONDS, run_cycles, run_phase


class TickLog:
    def __init__(self) -> None:
        self.reports: list[tuple[int, int]] = []

    def __call__(self, elapsed: int, total: int) -> None:
        self.reports.append((elapsed, total))


class TestRunPhase:
    @pytest.mark.parametrize("duration", [0, 1, 5])
    @pytest.mark.parametrize("toggle_active", [True, False])
    @patch("focus_timer.timer.time.sleep")
    def test_unpaused_reports_every_second(self, mock_sleep, duration, toggle_active, gate, recorder) -> None:
        ticks = TickLog()
        ctx = run_phase(duration, toggle_active, PauseSignal(), gate, ticks)

        assert ticks.reports == [(i, duration) for i in range(duration + 1)]
        assert mock_sleep.call_count == duration
        assert recorder.calls == []
        assert ctx.is_complete
        assert ctx.pauses == 0

    @patch("focus_timer.timer.time.sleep")
    def test_zero_duration_is_immediate(self, mock_sleep, gate, recorder) -> None:
        pause = ScriptedPause([True])
        ticks = TickLog()
        run_phase(0, True, pause, gate, ticks)
        assert ticks.reports == [(0, 0)]
        assert pause.read_count == 0
        mock_sleep.assert_not_called()
        assert recorder.calls == []

    @patch("focus_timer.timer.time.sleep")
    def test_pause_in_focus_relaxes_then_reengages(self, mock_sleep, gate, recorder) -> None:
        # tick 0 unpaused, tick 1 paused for two polls, then released
        pause = ScriptedPause([False, True, True, True, False])
        ticks = TickLog()
        ctx = run_phase(3, True, pause, gate, ticks)

        assert recorder.toggles == [False, True]
        assert ticks.reports == [(0, 3), (1, 3), (2, 3), (3, 3)]
        assert ctx.pauses == 1

    @patch("focus_timer.timer.time.sleep")
    def test_pause_does_not_shorten_phase(self, mock_sleep, gate) -> None:
        polls = 7
        pause = ScriptedPause([False, False, True] + [True] * polls + [False])
        run_phase(4, True, pause, gate, TickLog())

        slept = sum(call.args[0] for call in mock_sleep.call_args_list)
        assert slept == pytest.approx(4 * TICK_SECONDS + polls * POLL_INTERVAL)

    @patch("focus_timer.timer.time.sleep")
    def test_pause_in_break_makes_no_toggle_calls(self, mock_sleep, gate, recorder) -> None:
        pause = ScriptedPause([True, True, False])
        ctx = run_phase(2, False, pause, gate, TickLog())
        assert recorder.calls == []
        assert ctx.pauses == 1
        assert mock_sleep.call_count == 2 + 1

    @patch("focus_timer.timer.time.sleep")
    def test_every_pause_is_matched(self, mock_sleep, gate, recorder) -> None:
        pause = ScriptedPause([True, False, False, True, True, False, True, False])
        ctx = run_phase(4, True, pause, gate, TickLog())
        assert recorder.toggles == [False, True, False, True, False, True]
        assert ctx.pauses == 3

    def test_operator_pause_with_real_signal(self, gate, recorder) -> None:
        pause = PauseSignal()
        sleeps: list[float] = []

        def on_tick(elapsed: int, total: int) -> None:
            if elapsed == 1 and not pause.read():
                pause.toggle()

        def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)
            if seconds == POLL_INTERVAL:
                pause.toggle()

        with patch("focus_timer.timer.time.sleep", side_effect=fake_sleep):
            run_phase(3, True, pause, gate, on_tick)

        assert recorder.toggles == [False, True]
        assert sleeps.count(POLL_INTERVAL) == 1
        assert sleeps.count(TICK_SECONDS) == 3
        assert not pause.read()

    @patch("focus_timer.timer.time.sleep")
    def test_rapid_toggle_collapses(self, mock_sleep, gate, recorder) -> None:
        pause = PauseSignal()

        def on_tick(elapsed: int, total: int) -> None:
            # pause and release before the next sample
            pause.toggle()
            pause.toggle()

        ctx = run_phase(3, True, pause, gate, on_tick)
        assert recorder.calls == []
        assert ctx.pauses == 0

    @patch("focus_timer.timer.time.sleep")
    def test_toggle_failures_do_not_stop_phase(self, mock_sleep) -> None:
        failing = FailingEffects()
        pause = ScriptedPause([True, False])
        ctx = run_phase(2, True, pause, EffectGate(failing), TickLog())
        assert ctx.is_complete
        assert failing.toggles == [False, True]


class TestRunCycles:
    @patch("focus_timer.timer.time.sleep")
    def test_alerts_once_per_cycle_in_order(self, mock_sleep, gate, recorder) -> None:
        config = CycleConfig(focus_seconds=2, break_seconds=1, cycles=3)
        completed = run_cycles(config, gate, PauseSignal(), on_tick=TickLog())

        assert completed == 3
        assert recorder.alerts == [(1, 3), (2, 3), (3, 3)]
        assert mock_sleep.call_count == 3 * (2 + 1)

    @patch("focus_timer.timer.time.sleep")
    def test_toggle_sequence(self, mock_sleep, gate, recorder) -> None:
        config = CycleConfig(focus_seconds=1, break_seconds=1, cycles=2)
        run_cycles(config, gate, PauseSignal(), on_tick=TickLog())
        assert recorder.calls == [
            ("toggle", True),
            ("toggle", False),
            ("notify", 1, 2),
            ("toggle", True),
            ("toggle", False),
            ("notify", 2, 2),
            ("toggle", False),
        ]
        assert gate.settled

    @patch("focus_timer.timer.time.sleep")
    def test_zero_cycles_only_settles(self, mock_sleep, gate, recorder) -> None:
        config = CycleConfig(focus_seconds=10, break_seconds=10, cycles=0)
        completed = run_cycles(config, gate, PauseSignal(), on_tick=TickLog())
        assert completed == 0
        assert recorder.calls == [("toggle", False)]
        mock_sleep.assert_not_called()

    @patch("focus_timer.timer.time.sleep")
    def test_pause_during_focus_ends_in_rest_state(self, mock_sleep, gate, recorder) -> None:
        config = CycleConfig(focus_seconds=2, break_seconds=1, cycles=1)
        pause = ScriptedPause([False, True, False])
        run_cycles(config, gate, pause, on_tick=TickLog())
        assert recorder.toggles == [True, False, True, False, False]
        assert recorder.toggles[-1] is False

    @patch("focus_timer.timer.time.sleep")
    def test_failing_effects_do_not_abort(self, mock_sleep) -> None:
        failing = FailingEffects()
        config = CycleConfig(focus_seconds=1, break_seconds=1, cycles=2)
        completed = run_cycles(config, EffectGate(failing), PauseSignal(), on_tick=TickLog())
        assert completed == 2
        assert failing.alerts == [(1, 2), (2, 2)]
        assert failing.toggles[-1] is False

    @patch("focus_timer.timer.time.sleep")
    def test_progress_bar_when_no_callback(self, mock_sleep) -> None:
        recorder = RecordingEffects()
        config = CycleConfig(focus_seconds=1, break_seconds=1, cycles=1)
        assert run_cycles(config, EffectGate(recorder), PauseSignal()) == 1
        assert recorder.alerts == [(1, 1)]
