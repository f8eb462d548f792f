"""Daily production and downtime totals of the kiosk"""

import datetime
from dataclasses import dataclass

from core.clock import Clock
from core.models import DowntimeReason, Phase, SessionState, SessionSummary


@dataclass
class ShiftTotals:
    """In-memory totals for one calendar day."""
    day: datetime.date
    produced: int = 0
    finished_sessions: int = 0
    break_seconds: float = 0.0
    fault_seconds: float = 0.0

    @property
    def break_minutes(self) -> int:
        return int(self.break_seconds // 60)

    @property
    def fault_minutes(self) -> int:
        return int(self.fault_seconds // 60)


class ShiftTotalsTracker:
    """Accumulates today's totals from session transitions and summaries"""

    def __init__(self, clock: Clock):
        self.clock = clock
        self.totals = ShiftTotals(day=self._today())

    def _today(self) -> datetime.date:
        return datetime.date.fromtimestamp(self.clock.now())

    def current(self) -> ShiftTotals:
        """Return today's totals, starting a new day when the date changed."""
        today = self._today()
        if today != self.totals.day:
            self.totals = ShiftTotals(day=today)
        return self.totals

    def on_transition(self, previous: SessionState, current: SessionState):
        if previous.phase != Phase.PAUSED or current.phase == Phase.PAUSED:
            return
        if current.phase == Phase.RUNNING:
            # resume moved the effective start forward by exactly the pause
            seconds = current.start_ts - previous.start_ts
        else:
            seconds = self.clock.now() - previous.pause_ts
        self.add_downtime(previous.reason, seconds)

    def add_downtime(self, reason: DowntimeReason, seconds: float):
        totals = self.current()
        seconds = max(0.0, seconds)
        if reason == DowntimeReason.BREAK:
            totals.break_seconds += seconds
        else:
            totals.fault_seconds += seconds

    def record_summary(self, summary: SessionSummary):
        totals = self.current()
        totals.produced += summary.produced
        totals.finished_sessions += 1
