"""Finite state machine for the learning run loop."""

from enum import Enum, auto
from typing import Dict, Callable, Optional


class RunLoopState(Enum):
    """States of the timer-driven learning loop."""
    IDLE = auto()
    RUNNING = auto()
    PAUSED = auto()


class RunLoopStateMachine:
    """State machine for starting, pausing and resetting the learning loop."""

    def __init__(self):
        self.current_state = RunLoopState.IDLE
        self._enter_callbacks: Dict[RunLoopState, Callable[[Optional[Dict]], None]] = {}

        # Define valid state transitions
        self._valid_transitions = {
            RunLoopState.IDLE: {RunLoopState.RUNNING},
            RunLoopState.RUNNING: {RunLoopState.PAUSED, RunLoopState.IDLE},
            RunLoopState.PAUSED: {RunLoopState.RUNNING, RunLoopState.IDLE},
        }

    def on_state_enter(self, state: RunLoopState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state entry."""
        self._enter_callbacks[state] = callback

    def can_transition(self, to_state: RunLoopState) -> bool:
        """Check if transition to target state is valid."""
        return to_state in self._valid_transitions.get(self.current_state, set())

    def transition(self, to_state: RunLoopState, context: Optional[Dict] = None) -> bool:
        """Attempt to transition to target state."""
        if not self.can_transition(to_state):
            return False

        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](context)

        return True

    # Convenience methods for common transitions

    def start(self, context: Optional[Dict] = None) -> bool:
        """Start (or resume) the loop."""
        return self.transition(RunLoopState.RUNNING, context)

    def pause(self, context: Optional[Dict] = None) -> bool:
        """Pause the loop."""
        return self.transition(RunLoopState.PAUSED, context)

    def reset_to_idle(self, context: Optional[Dict] = None) -> bool:
        """Return to idle."""
        return self.transition(RunLoopState.IDLE, context)

    # State checking methods

    def is_idle(self) -> bool:
        return self.current_state == RunLoopState.IDLE

    def is_running(self) -> bool:
        return self.current_state == RunLoopState.RUNNING

    def is_paused(self) -> bool:
        return self.current_state == RunLoopState.PAUSED

    def get_state_description(self) -> str:
        """Get human-readable state description."""
        descriptions = {
            RunLoopState.IDLE: "Ready - press Start Learning",
            RunLoopState.RUNNING: "Learning",
            RunLoopState.PAUSED: "Paused",
        }
        return descriptions.get(self.current_state, "Unknown state")
