"""
StateMachine - Tracks the tuning pipeline stage.

INIT → DISCOVER → TUNE_DEVICES → TUNE_CONTROLLERS → MAINTENANCE → COMPLETE
          ↓
        FAILED

Strictly linear: no back-edges, no retries.
"""

from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone


class State(Enum):
    """Pipeline stages."""
    INIT = auto()
    DISCOVER = auto()
    TUNE_DEVICES = auto()
    TUNE_CONTROLLERS = auto()
    MAINTENANCE = auto()
    COMPLETE = auto()
    FAILED = auto()


# Valid state transitions
TRANSITIONS: Dict[State, List[State]] = {
    State.INIT: [State.DISCOVER],
    State.DISCOVER: [State.TUNE_DEVICES, State.FAILED],
    State.TUNE_DEVICES: [State.TUNE_CONTROLLERS],
    State.TUNE_CONTROLLERS: [State.MAINTENANCE],
    State.MAINTENANCE: [State.COMPLETE],
    State.COMPLETE: [],
    State.FAILED: [],
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StateEvent:
    """Record of a state transition."""
    from_state: State
    to_state: State
    timestamp: datetime
    duration_ms: int
    metadata: Dict[str, Any] = field(default_factory=dict)


class StateMachine:
    """
    Ensures valid transitions and tracks history.
    """

    def __init__(self, initial_state: State = State.INIT):
        self._state = initial_state
        self._history: List[StateEvent] = []
        self._state_entered_at = _now()
        self._callbacks: List[Callable[[StateEvent], None]] = []

    @property
    def state(self) -> State:
        """Get current state."""
        return self._state

    @property
    def history(self) -> List[StateEvent]:
        """Get state transition history."""
        return self._history.copy()

    def can_transition(self, to_state: State) -> bool:
        """Check if transition to target state is valid."""
        return to_state in TRANSITIONS.get(self._state, [])

    def transition(self, to_state: State, metadata: Optional[Dict[str, Any]] = None):
        """
        Transition to a new state.

        Raises:
            ValueError: If transition is not valid
        """
        if not self.can_transition(to_state):
            raise ValueError(
                f"Invalid transition: {self._state.name} → {to_state.name}. "
                f"Valid transitions: {[s.name for s in TRANSITIONS.get(self._state, [])]}"
            )

        now = _now()
        event = StateEvent(
            from_state=self._state,
            to_state=to_state,
            timestamp=now,
            duration_ms=int((now - self._state_entered_at).total_seconds() * 1000),
            metadata=metadata or {},
        )
        self._history.append(event)
        self._state = to_state
        self._state_entered_at = now

        for callback in self._callbacks:
            callback(event)

    def on_transition(self, callback: Callable[[StateEvent], None]):
        """Register callback fired after every transition."""
        self._callbacks.append(callback)
