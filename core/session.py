"""Work session state machine"""

import functools
import logging
from typing import Callable, List, Optional, Union

from core import rate
from core.clock import Clock
from core.models import (DisplaySnapshot, DowntimeReason, Operator, Phase,
                         SessionState, SessionSummary, WorkOrder)
from utils.exceptions import IllegalTransitionError
from utils.logger import EventLogger

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState, SessionState], None]


def _ignore_illegal(method):
    """Turn an illegal transition into a logged no-op returning None."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except IllegalTransitionError as e:
            logger.debug("Ignored: %s", e)
            return None
    return wrapper


class SessionStateMachine:
    """Owns the idle/authenticated/running/paused lifecycle of one kiosk.

    Every operation checks the current phase first; calls from a phase that
    does not allow them change nothing. All calls must come from the single
    UI thread that owns the machine.
    """

    def __init__(self, clock: Clock, device_id: str = "",
                 event_logger: Optional[EventLogger] = None):
        self.clock = clock
        self.device_id = device_id
        self.event_logger = event_logger
        self._state = SessionState.idle()
        self._listeners: List[StateListener] = []
        self._reset_hooks: List[Callable[[], None]] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def add_listener(self, listener: StateListener):
        """Register a callback receiving (previous, current) after each transition."""
        self._listeners.append(listener)

    def add_reset_hook(self, hook: Callable[[], None]):
        """Register a callback run on every reset, e.g. camera tear-down."""
        self._reset_hooks.append(hook)

    def _expect(self, operation: str, *phases: Phase):
        if self._state.phase not in phases:
            raise IllegalTransitionError(operation, self._state.phase.value)

    def _transition(self, new_state: SessionState, event_type: str, detail: Optional[dict] = None):
        previous = self._state
        self._state = new_state
        if self.event_logger:
            self.event_logger.log_event(event_type, detail)
            self.event_logger.set_operator(new_state.operator_name)
        for listener in list(self._listeners):
            listener(previous, new_state)

    @_ignore_illegal
    def authenticate(self, operator: Optional[Operator]) -> Optional[bool]:
        self._expect('authenticate', Phase.IDLE)
        if operator is None:
            # Directory miss: stay idle
            return None
        if self.event_logger:
            self.event_logger.set_operator(operator.name)
        self._transition(SessionState.authenticated(operator), 'SESSION_AUTHENTICATED',
                         {'operator_id': operator.id})
        return True

    @_ignore_illegal
    def start(self, order: Optional[WorkOrder]) -> Optional[bool]:
        self._expect('start', Phase.AUTHENTICATED)
        if order is None:
            raise IllegalTransitionError('start', 'no work order selected')
        state = SessionState.running(self._state.operator, order, start_ts=self.clock.now())
        self._transition(state, 'WORK_START', {'work_order': order.wo})
        return True

    @_ignore_illegal
    def add_piece(self) -> Optional[bool]:
        self._expect('add_piece', Phase.RUNNING)
        state = self._state
        new_state = SessionState.running(state.operator, state.work_order, state.start_ts,
                                         produced=state.produced + 1)
        self._transition(new_state, 'PIECE_ADDED', {'produced': new_state.produced})
        return True

    @_ignore_illegal
    def pause(self, reason: Union[DowntimeReason, str]) -> Optional[bool]:
        self._expect('pause', Phase.RUNNING)
        try:
            reason = DowntimeReason(reason)
        except ValueError:
            logger.debug("Ignored pause with unknown reason %r", reason)
            return None
        state = SessionState.paused(self._state, reason, pause_ts=self.clock.now())
        self._transition(state, 'PAUSE_START', {'reason': reason.value})
        return True

    @_ignore_illegal
    def resume(self) -> Optional[bool]:
        self._expect('resume', Phase.PAUSED)
        state = self._state
        paused_duration = self.clock.now() - state.pause_ts
        # Shift the effective start so paused time never counts as active time
        new_state = SessionState.running(state.operator, state.work_order,
                                         state.start_ts + paused_duration, state.produced)
        self._transition(new_state, 'PAUSE_END',
                         {'reason': state.reason.value, 'duration_sec': f"{paused_duration:.2f}"})
        return True

    @_ignore_illegal
    def finish(self) -> Optional[SessionSummary]:
        self._expect('finish', Phase.RUNNING, Phase.PAUSED)
        state = self._state
        now = self.clock.now()
        info = rate.for_state(state, now)
        summary = SessionSummary(
            device_id=self.device_id,
            operator_name=state.operator_name,
            work_order=state.work_order.wo,
            produced=state.produced,
            elapsed_seconds=info.elapsed_seconds,
            elapsed_text=info.elapsed_text,
            pph=info.rounded_pph,
            finished_at=now,
        )
        self._transition(SessionState.idle(), 'WORK_FINISHED', summary.to_dict())
        return summary

    def reset(self):
        """Return to idle from any phase and tear down capture resources."""
        previous_phase = self._state.phase
        for hook in list(self._reset_hooks):
            hook()
        self._transition(SessionState.idle(), 'SESSION_RESET', {'from_phase': previous_phase.value})

    def snapshot(self, now: Optional[float] = None) -> DisplaySnapshot:
        state = self._state
        info = rate.for_state(state, self.clock.now() if now is None else now)
        return DisplaySnapshot(
            phase=state.phase,
            operator_name=state.operator_name,
            work_order=state.work_order,
            elapsed_text=info.elapsed_text,
            produced=state.produced,
            pph=info.rounded_pph,
            reason=state.reason,
        )
