"""Event loop scheduling used by the tick driver and the camera loop"""

from typing import Any, Callable, Protocol


class Scheduler(Protocol):
    def after(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Run callback once after delay_ms on the UI thread; return a job handle."""

    def cancel(self, job: Any) -> None:
        """Cancel a pending job."""


class TkScheduler:
    """Scheduler backed by a Tk widget's after/after_cancel"""

    def __init__(self, widget):
        self.widget = widget

    def after(self, delay_ms: int, callback: Callable[[], None]):
        return self.widget.after(delay_ms, callback)

    def cancel(self, job) -> None:
        self.widget.after_cancel(job)
