"""Elapsed active time and pieces-per-hour calculation"""

from dataclasses import dataclass
from typing import Optional

from core.models import Phase, SessionState

SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class RateInfo:
    elapsed_seconds: float = 0.0
    pph: float = 0.0

    @property
    def elapsed_text(self) -> str:
        return format_hms(self.elapsed_seconds)

    @property
    def rounded_pph(self) -> int:
        return round_half_up(self.pph)


def as_of(state: SessionState, now: float) -> Optional[float]:
    """Return the end time for elapsed math: now while running, the pause time while paused."""
    if state.phase == Phase.RUNNING:
        return now
    if state.phase == Phase.PAUSED:
        return state.pause_ts
    return None


def compute(start_ts: float, produced: int, as_of_ts: Optional[float]) -> RateInfo:
    """Elapsed seconds (clamped at zero) and pieces per hour."""
    if as_of_ts is None:
        return RateInfo()
    elapsed = max(0.0, as_of_ts - start_ts)
    hours = elapsed / SECONDS_PER_HOUR
    pph = produced / hours if hours > 0 else 0.0
    return RateInfo(elapsed_seconds=elapsed, pph=pph)


def for_state(state: SessionState, now: float) -> RateInfo:
    return compute(state.start_ts, state.produced, as_of(state, now))


def format_hms(seconds: float) -> str:
    """Format seconds as HH:MM:SS; negative values read 00:00:00."""
    total = max(0, int(seconds))
    hh, rest = divmod(total, 3600)
    mm, ss = divmod(rest, 60)
    return f"{hh:02d}:{mm:02d}:{ss:02d}"


def round_half_up(value: float) -> int:
    # round() rounds half to even
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
