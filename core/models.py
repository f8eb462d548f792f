"""Data model definitions"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class DowntimeReason(str, Enum):
    """Why production is paused."""
    BREAK = "break"
    FAULT = "fault"


class Phase(str, Enum):
    IDLE = "idle"
    AUTHENTICATED = "authenticated"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class WorkOrder:
    """A selectable work order from the catalog."""
    id: str
    wo: str
    model: str
    operation: str
    color: str
    size: str
    target_pph: float

    def __post_init__(self):
        if self.target_pph <= 0:
            raise ValueError(f"target_pph must be positive: {self.target_pph}")

    @property
    def description(self) -> str:
        return f"{self.operation} • {self.color} • {self.size} • hedef {self.target_pph:g} parça/saat"


@dataclass(frozen=True)
class Operator:
    id: str
    name: str


@dataclass(frozen=True)
class SessionState:
    """One kiosk session, tagged by phase.

    Only the fields belonging to the current phase are filled; use the
    constructors below instead of building instances by hand.
    start_ts is the effective start, shifted forward on every resume.
    """
    phase: Phase = Phase.IDLE
    operator: Optional[Operator] = None
    work_order: Optional[WorkOrder] = None
    start_ts: float = 0.0
    produced: int = 0
    reason: Optional[DowntimeReason] = None
    pause_ts: Optional[float] = None

    @classmethod
    def idle(cls) -> "SessionState":
        return cls()

    @classmethod
    def authenticated(cls, operator: Operator) -> "SessionState":
        return cls(phase=Phase.AUTHENTICATED, operator=operator)

    @classmethod
    def running(cls, operator: Operator, work_order: WorkOrder, start_ts: float,
                produced: int = 0) -> "SessionState":
        return cls(phase=Phase.RUNNING, operator=operator, work_order=work_order,
                   start_ts=start_ts, produced=produced)

    @classmethod
    def paused(cls, running: "SessionState", reason: DowntimeReason,
               pause_ts: float) -> "SessionState":
        return replace(running, phase=Phase.PAUSED, reason=reason, pause_ts=pause_ts)

    @property
    def is_active(self) -> bool:
        """Running or paused."""
        return self.phase in (Phase.RUNNING, Phase.PAUSED)

    @property
    def operator_name(self) -> str:
        return self.operator.name if self.operator else ""


@dataclass(frozen=True)
class DisplaySnapshot:
    """Derived values shown on the kiosk on every tick."""
    phase: Phase
    operator_name: str = ""
    work_order: Optional[WorkOrder] = None
    elapsed_text: str = "00:00:00"
    produced: int = 0
    pph: int = 0
    reason: Optional[DowntimeReason] = None


@dataclass(frozen=True)
class SessionSummary:
    """Final snapshot of a finished work order session."""
    device_id: str
    operator_name: str
    work_order: str
    produced: int
    elapsed_seconds: float
    elapsed_text: str
    pph: int
    finished_at: float

    def as_message(self) -> str:
        return (
            "İŞ EMRİ BİTTİ\n"
            f"Operatör: {self.operator_name}\n"
            f"WO: {self.work_order}\n"
            f"Üretilen: {self.produced}\n"
            f"Süre: {self.elapsed_text}\n"
            f"PPH: {self.pph}"
        )

    def to_dict(self) -> dict:
        return {
            'device_id': self.device_id,
            'operator': self.operator_name,
            'work_order': self.work_order,
            'produced': self.produced,
            'elapsed': self.elapsed_text,
            'pph': self.pph,
        }
