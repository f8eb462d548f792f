"""Kiosk application service: capture, lookup, session and display refresh"""

import logging
from typing import Callable, List, Optional, Union

from core.capture import CodeCapture
from core.clock import Clock, SystemClock
from core.directory import OperatorDirectory, WorkOrderCatalog, resolve_operator
from core.models import (DisplaySnapshot, DowntimeReason, Phase, SessionState,
                         SessionSummary, WorkOrder)
from core.scheduler import Scheduler
from core.session import SessionStateMachine
from core.stats import ShiftTotalsTracker
from utils.exceptions import DeviceUnavailableError, EmptyCodeError, UnknownIdentityError

logger = logging.getLogger(__name__)

MessageListener = Callable[[str, str], None]


class TickDriver:
    """Calls back at a fixed cadence until stopped"""

    def __init__(self, scheduler: Scheduler, callback: Callable[[], None], interval_ms: int = 1000):
        self.scheduler = scheduler
        self.callback = callback
        self.interval_ms = interval_ms
        self._job = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        if self._running:
            return
        self._running = True
        self._job = self.scheduler.after(self.interval_ms, self._tick)

    def _tick(self):
        self._job = None
        if not self._running:
            return
        self.callback()
        if self._running:
            self._job = self.scheduler.after(self.interval_ms, self._tick)

    def stop(self):
        self._running = False
        if self._job is not None:
            self.scheduler.cancel(self._job)
            self._job = None


class KioskController:
    """Connects code capture, the operator directory and the session machine.

    Presentation code calls the intent methods below and subscribes to
    display snapshots, finish summaries and status messages.
    """

    def __init__(self, machine: SessionStateMachine, directory: OperatorDirectory,
                 catalog: WorkOrderCatalog, capture: CodeCapture, scheduler: Scheduler,
                 stats: Optional[ShiftTotalsTracker] = None, tick_interval_ms: int = 1000,
                 scan_delay_sec: float = 0.0, clock: Optional[Clock] = None):
        self.machine = machine
        self.directory = directory
        self.catalog = catalog
        self.capture = capture
        self.clock = clock or SystemClock()
        self.stats = stats or ShiftTotalsTracker(self.clock)
        self.scan_delay_sec = scan_delay_sec
        self.selected_work_order: Optional[WorkOrder] = None

        self._display_listeners: List[Callable[[DisplaySnapshot], None]] = []
        self._summary_listeners: List[Callable[[SessionSummary], None]] = []
        self._message_listeners: List[MessageListener] = []
        self._last_code = ""
        self._last_code_at: Optional[float] = None
        self._finishing = False

        self.capture.on_code = self.submit_code
        self.capture.visual.on_timeout = self._on_camera_timeout
        self.machine.add_reset_hook(self.capture.cancel_visual)
        self.machine.add_listener(self.stats.on_transition)
        self.machine.add_listener(self._on_transition)
        self.ticker = TickDriver(scheduler, self.refresh, tick_interval_ms)

    # -- subscriptions --------------------------------------------------

    def on_display(self, listener: Callable[[DisplaySnapshot], None]):
        self._display_listeners.append(listener)

    def on_summary(self, listener: Callable[[SessionSummary], None]):
        self._summary_listeners.append(listener)

    def on_message(self, listener: MessageListener):
        """listener(text, level) with level in info/success/warning/error."""
        self._message_listeners.append(listener)

    def _notify(self, text: str, level: str = "info"):
        for listener in list(self._message_listeners):
            listener(text, level)

    # -- capability gating ----------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.machine.phase

    @property
    def can_pick_work_order(self) -> bool:
        return self.phase == Phase.AUTHENTICATED

    @property
    def can_start(self) -> bool:
        return self.phase == Phase.AUTHENTICATED and self.selected_work_order is not None

    @property
    def can_scan(self) -> bool:
        """Codes only log an operator in, so capture is offered while idle."""
        return self.phase == Phase.IDLE

    # -- intents --------------------------------------------------------

    def submit_code(self, code: str):
        """Authenticate with a code from any capture modality."""
        now = self.clock.now()
        if (self.scan_delay_sec and code == self._last_code and self._last_code_at is not None
                and now - self._last_code_at < self.scan_delay_sec):
            logger.debug("Repeated scan of %s dropped", code)
            return
        self._last_code, self._last_code_at = code, now

        try:
            operator = resolve_operator(self.directory, code)
        except EmptyCodeError:
            return
        except UnknownIdentityError as e:
            logger.info("%s", e)
            self._notify("Kart tanınmadı, tekrar okutun.", "warning")
            return

        if self.machine.authenticate(operator):
            self._notify(f"Hoş geldin, {operator.name}", "success")

    def select_work_order(self, order: Optional[WorkOrder]) -> bool:
        if not self.can_pick_work_order:
            return False
        self.selected_work_order = order
        self.refresh()
        return True

    def start(self) -> bool:
        if not self.can_start:
            return False
        return bool(self.machine.start(self.selected_work_order))

    def add_piece(self) -> bool:
        return bool(self.machine.add_piece())

    def pause(self, reason: Union[DowntimeReason, str]) -> bool:
        return bool(self.machine.pause(reason))

    def resume(self) -> bool:
        return bool(self.machine.resume())

    def finish(self) -> Optional[SessionSummary]:
        """Close the work order; summary listeners run before the idle screen is drawn."""
        self._finishing = True
        try:
            summary = self.machine.finish()
            if summary is None:
                return None
            self.stats.record_summary(summary)
            for listener in list(self._summary_listeners):
                listener(summary)
        finally:
            self._finishing = False
        self.refresh()
        return summary

    def reset(self):
        """Logout: back to idle with nothing left over."""
        self.selected_work_order = None
        self.capture.keyboard.clear()
        self.machine.reset()

    def start_camera(self) -> bool:
        if not self.can_scan:
            logger.debug("Camera not started while %s", self.phase.value)
            return False
        try:
            started = self.capture.start_visual()
        except DeviceUnavailableError as e:
            logger.warning("Camera unavailable: %s", e)
            self._notify("Kamera kullanılamıyor. Kartı okuyucuya okutun.", "error")
            return False
        if started:
            self._notify("Kamera açık, kodu gösterin.", "info")
        return started

    def cancel_camera(self):
        self.capture.cancel_visual()

    def _on_camera_timeout(self):
        self._notify("Kod okunamadı, tekrar deneyin.", "warning")

    # -- lifecycle ------------------------------------------------------

    def boot(self):
        """Start the display tick."""
        self.ticker.start()
        self.refresh()

    def shutdown(self):
        self.ticker.stop()
        self.capture.shutdown()

    def refresh(self):
        if self._finishing:
            # Ticks too: the finish summary is acknowledged before the idle screen shows
            return
        snapshot = self.machine.snapshot()
        for listener in list(self._display_listeners):
            listener(snapshot)

    def _on_transition(self, previous: SessionState, current: SessionState):
        if current.phase != previous.phase and Phase.IDLE in (previous.phase, current.phase):
            # Camera codes only ever log in from idle
            self.capture.cancel_visual()
        if current.phase == Phase.IDLE:
            self.selected_work_order = None
        self.refresh()
