"""Phase countdown and focus/break cycle logic."""

from __future__ import annotations

import logging
import time
from contextlib import nullcontext
from typing import Callable, ContextManager, Optional, Protocol

from focus_timer import display
from focus_timer.effects import alert_message
from focus_timer.models import CycleConfig, PhaseContext, PhaseKind
from focus_timer.pause import PauseSignal

log = logging.getLogger(__name__)

TICK_SECONDS = 1
# How often a paused phase re-checks the pause flag.
POLL_INTERVAL = 0.1


class ToggleSink(Protocol):
    def assert_toggle(self, engaged: bool) -> bool: ...


class CycleEffects(ToggleSink, Protocol):
    def notify(self, cycle: int, total: int) -> bool: ...

    def settle(self) -> bool: ...


def _wait_while_paused(pause: PauseSignal) -> None:
    while pause.read():
        time.sleep(POLL_INTERVAL)


def run_phase(
    duration: int,
    toggle_active: bool,
    pause: PauseSignal,
    effects: ToggleSink,
    on_tick: Callable[[int, int], None],
) -> PhaseContext:
    """Count ``duration`` one-second ticks, holding still while paused.

    When ``toggle_active`` is set, a pause relaxes the restriction for its
    duration and resuming engages it again. The pause flag is sampled once per
    tick, so a pause that is released before the next sample has no effect.
    """
    ctx = PhaseContext(total_seconds=duration, toggle_active=toggle_active)

    while not ctx.is_complete:
        if pause.read():
            ctx.pauses += 1
            log.debug("Paused at %d/%ds", ctx.elapsed_seconds, ctx.total_seconds)
            if toggle_active:
                effects.assert_toggle(False)
            _wait_while_paused(pause)
            if toggle_active:
                effects.assert_toggle(True)
            log.debug("Resumed at %d/%ds", ctx.elapsed_seconds, ctx.total_seconds)

        on_tick(ctx.elapsed_seconds, ctx.total_seconds)
        time.sleep(TICK_SECONDS)
        ctx.advance()

    on_tick(ctx.elapsed_seconds, ctx.total_seconds)
    return ctx


def _progress(
    kind: PhaseKind, total: int, on_tick: Optional[Callable[[int, int], None]]
) -> ContextManager[Callable[[int, int], None]]:
    if on_tick is not None:
        return nullcontext(on_tick)
    return display.phase_progress(kind.label, total)


def run_cycles(
    config: CycleConfig,
    effects: CycleEffects,
    pause: PauseSignal,
    on_tick: Optional[Callable[[int, int], None]] = None,
) -> int:
    """Run every focus/break cycle, then leave the network on.

    Progress goes to ``on_tick`` when given, otherwise to a progress bar per
    phase. Returns the number of cycles completed.
    """
    completed = 0
    for cycle in range(1, config.cycles + 1):
        display.print_phase_header(PhaseKind.FOCUS, cycle, config.cycles)
        effects.assert_toggle(True)
        with _progress(PhaseKind.FOCUS, config.focus_seconds, on_tick) as tick:
            run_phase(config.focus_seconds, True, pause, effects, tick)

        display.print_phase_header(PhaseKind.BREAK, cycle, config.cycles)
        effects.assert_toggle(False)
        with _progress(PhaseKind.BREAK, config.break_seconds, on_tick) as tick:
            run_phase(config.break_seconds, False, pause, effects, tick)

        effects.notify(cycle, config.cycles)
        display.ring_bell()
        display.print_alert(alert_message(cycle, config.cycles))
        completed = cycle

    effects.settle()
    display.print_success("All cycles finished!")
    return completed
