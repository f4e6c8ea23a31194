"""Shared fakes for timer and effect tests."""

from __future__ import annotations

from typing import Iterable

import pytest

from focus_timer.effects import EffectError, EffectGate


class RecordingEffects:
    """Side-effect port that records every call instead of touching the system."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def assert_toggle(self, engaged: bool) -> None:
        self.calls.append(("toggle", engaged))

    def notify(self, cycle: int, total: int) -> None:
        self.calls.append(("notify", cycle, total))

    @property
    def toggles(self) -> list[bool]:
        return [c[1] for c in self.calls if c[0] == "toggle"]

    @property
    def alerts(self) -> list[tuple[int, int]]:
        return [(c[1], c[2]) for c in self.calls if c[0] == "notify"]


class FailingEffects(RecordingEffects):
    """Records the attempt, then fails like a missing system tool would."""

    def assert_toggle(self, engaged: bool) -> None:
        super().assert_toggle(engaged)
        raise EffectError("networksetup not found")

    def notify(self, cycle: int, total: int) -> None:
        super().notify(cycle, total)
        raise EffectError("osascript not found")


class ScriptedPause:
    """Pause flag that replays a fixed sequence of reads, then stays unpaused."""

    def __init__(self, reads: Iterable[bool]) -> None:
        self._reads = list(reads)
        self.read_count = 0

    def read(self) -> bool:
        self.read_count += 1
        if self._reads:
            return self._reads.pop(0)
        return False

    def toggle(self) -> bool:
        raise AssertionError("the timer never writes the pause flag")


@pytest.fixture()
def recorder() -> RecordingEffects:
    return RecordingEffects()


@pytest.fixture()
def gate(recorder: RecordingEffects) -> EffectGate:
    return EffectGate(recorder)
