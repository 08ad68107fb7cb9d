"""State machine for trajectory recording.

Uses python-statemachine with the RecordingSession as the model.

States:
    IDLE: Not recording, samples are ignored
    RECORDING: Samples are filtered, accumulated and matched to nodes

Transitions:
    IDLE -> RECORDING: start_recording (session cleared on entry)
    RECORDING -> IDLE: stop_recording (session cleared on exit, after the
        synthesizer has turned it into connections)
"""

from __future__ import annotations

import logging
from typing import Any

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from indoor_mapper.recording.session import RecordingSession

logger = logging.getLogger(__name__)


class RecorderStateMachine(StateMachine):
    """Idle <-> Recording lifecycle of a recording session."""

    idle = State("Idle", initial=True)
    recording = State("Recording")

    start_recording = idle.to(recording)
    stop_recording = recording.to(idle)

    @property
    def is_idle(self) -> bool:
        return self.idle.is_active

    @property
    def is_recording(self) -> bool:
        return self.recording.is_active

    def on_enter_recording(self) -> None:
        """Hook: Entering recording state starts from an empty session."""
        self.session.clear()

    def on_exit_recording(self) -> None:
        """Hook: Leaving recording state discards the session."""
        self.session.clear()

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.info(f"[RECORDER] {source.name} --({event})--> {target.name}")

    def __init__(self, session: RecordingSession | None = None, start_value: str | None = None) -> None:
        """Initialize state machine with model pattern.

        Args:
            session: Shared session/model (creates new if None)
            start_value: Optional initial state value (for restoring state)
        """
        model = session or RecordingSession()
        super().__init__(model=model, start_value=start_value)

    @property
    def session(self) -> RecordingSession:
        """Alias for model."""
        return self.model

    def try_transition(self, event: str, **kwargs: Any) -> bool:
        """Attempt a transition, returning success/failure."""
        try:
            self.send(event, **kwargs)
            return True
        except TransitionNotAllowed:
            logger.warning(f"Transition '{event}' not allowed from {self.current_state.name}")
            return False

    def __repr__(self) -> str:
        return f"RecorderStateMachine(state={self.current_state.name}, model={self.session!r})"
