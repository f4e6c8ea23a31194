"""Pydantic models for run settings and phase progress."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class PhaseKind(str, enum.Enum):
    """The two phases of a cycle."""

    FOCUS = "focus"
    BREAK = "break"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ToggleBackend(str, enum.Enum):
    """How the network toggle and alerts are carried out."""

    AUTO = "auto"
    MACOS = "macos"
    LINUX = "linux"
    DRY_RUN = "dry-run"


class CycleConfig(BaseModel):
    """Durations and repetition count for one run. Immutable."""

    model_config = ConfigDict(frozen=True)

    focus_seconds: int = Field(default=1500, ge=0)
    break_seconds: int = Field(default=300, ge=0)
    cycles: int = Field(default=1, ge=0)


class PhaseContext(BaseModel):
    """Progress of a single phase, owned by the phase timer while it runs."""

    total_seconds: int = Field(ge=0)
    elapsed_seconds: int = Field(default=0, ge=0)
    toggle_active: bool = False
    pauses: int = Field(default=0, ge=0)

    @property
    def remaining_seconds(self) -> int:
        return self.total_seconds - self.elapsed_seconds

    @property
    def is_complete(self) -> bool:
        return self.elapsed_seconds >= self.total_seconds

    def advance(self) -> None:
        """Count one finished tick."""
        if self.is_complete:
            raise ValueError(
                f"phase already complete ({self.elapsed_seconds}/{self.total_seconds}s)"
            )
        self.elapsed_seconds += 1


class AppConfig(BaseModel):
    """Stored defaults (persisted to ~/.config/focus-timer/config.json)."""

    focus_seconds: int = Field(default=1500, ge=0)
    break_seconds: int = Field(default=300, ge=0)
    cycles: int = Field(default=1, ge=0)
    pause_command: str = Field(default="p", min_length=1, max_length=16)
    interface: str = "en0"  # only used by the macOS backend
    backend: ToggleBackend = ToggleBackend.AUTO

    def cycle_config(
        self,
        focus_seconds: int | None = None,
        break_seconds: int | None = None,
        cycles: int | None = None,
    ) -> CycleConfig:
        """Build a run configuration, letting explicit values win over stored ones."""
        return CycleConfig(
            focus_seconds=self.focus_seconds if focus_seconds is None else focus_seconds,
            break_seconds=self.break_seconds if break_seconds is None else break_seconds,
            cycles=self.cycles if cycles is None else cycles,
        )
