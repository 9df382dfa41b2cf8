"""Application controller driving the learning engine from a Qt timer."""

import logging
from typing import Optional
from PySide6.QtCore import QObject, QTimer, Signal

from ..domain.types import Coord, Cell, InitMode, LearningConfig, StepResult, INT_TO_ACTION
from ..domain.qlearning import QLearningEngine
from ..utils.rng import SeededRNG
from .fsm import RunLoopStateMachine, RunLoopState

logger = logging.getLogger(__name__)

# Exploration rate suggested when switching to heuristic initialization
HEURISTIC_EPSILON = 0.2


class QLearningController(QObject):
    """
    Controller that owns the learning engine and steps it on a timer.

    The display layer only mutates engine state through the controller's
    commands and redraws in response to its signals.

    Signals:
        state_changed: Emitted when the run loop changes state
        step_completed: Emitted after every learning step
        episode_completed: Emitted when a step ends an episode
        grid_updated: Emitted when the grid or learning state needs to be redrawn
        error_occurred: Emitted when an error occurs
    """

    # Qt Signals
    state_changed = Signal(object)  # RunLoopState
    step_completed = Signal(object)  # StepResult
    episode_completed = Signal(object)  # EpisodeSummary
    grid_updated = Signal()
    error_occurred = Signal(str)  # Error message

    def __init__(self, config: Optional[LearningConfig] = None, rng: Optional[SeededRNG] = None):
        super().__init__()

        # Core components
        self._config = config or LearningConfig()
        self._engine = QLearningEngine(self._config, rng=rng)
        self._state_machine = RunLoopStateMachine()

        # Timer driving the learning loop
        self._timer = QTimer()
        self._timer.timeout.connect(self._on_timer_tick)
        self._timer.setInterval(self._config.step_interval)

        # Setup state machine callbacks
        self._state_machine.on_state_enter(RunLoopState.RUNNING, self._on_running_entered)
        self._state_machine.on_state_enter(RunLoopState.PAUSED, self._on_paused_entered)
        self._state_machine.on_state_enter(RunLoopState.IDLE, self._on_idle_entered)

    # Properties

    @property
    def engine(self) -> QLearningEngine:
        """Get the learning engine."""
        return self._engine

    @property
    def config(self) -> LearningConfig:
        """Get the learning configuration."""
        return self._config

    @property
    def current_state(self) -> RunLoopState:
        """Get the current run loop state."""
        return self._state_machine.current_state

    @property
    def is_running(self) -> bool:
        return self._state_machine.is_running()

    # Run loop control

    def start(self) -> bool:
        """Start or resume the timer-driven learning loop."""
        return self._state_machine.start()

    def pause(self) -> bool:
        """Pause the learning loop."""
        return self._state_machine.pause()

    def toggle_running(self) -> bool:
        """Start if stopped, pause if running."""
        if self._state_machine.is_running():
            return self.pause()
        return self.start()

    def step_once(self) -> Optional[StepResult]:
        """Manually execute one learning step while the loop is not running."""
        if self._state_machine.is_running():
            return None
        return self._do_step()

    def _stop_loop(self):
        if not self._state_machine.is_idle():
            self._state_machine.reset_to_idle()

    # Grid and learning management

    def reset_learning(self) -> bool:
        """Reinitialize the Q-table and counters, keeping the walls."""
        self._stop_loop()
        self._engine.reset_learning()
        self.grid_updated.emit()
        return True

    def reset_grid(self, size: Optional[int] = None) -> bool:
        """Clear all walls and restore default start and goal."""
        self._stop_loop()
        try:
            self._engine.reset_grid(size)
        except ValueError as e:
            self.error_occurred.emit(f"Failed to reset grid: {str(e)}")
            return False
        self.grid_updated.emit()
        return True

    def paint_cell(self, coord: Coord, cell: Cell) -> bool:
        """Paint a cell as empty or wall (drag painting)."""
        if self._state_machine.is_running():
            return False  # Don't allow modifications while running

        try:
            changed = self._engine.set_cell(coord, cell)
        except ValueError as e:
            self.error_occurred.emit(f"Failed to set cell: {str(e)}")
            return False
        if changed:
            self.grid_updated.emit()
        return changed

    def toggle_cell(self, coord: Coord) -> bool:
        """Flip a cell between empty and wall (single click)."""
        if self._state_machine.is_running():
            return False

        try:
            changed = self._engine.toggle_cell(coord)
        except ValueError as e:
            self.error_occurred.emit(f"Failed to toggle cell: {str(e)}")
            return False
        if changed:
            self.grid_updated.emit()
        return changed

    def set_start(self, coord: Coord) -> bool:
        """Move the start marker; learning restarts."""
        return self._move_marker("start", coord)

    def set_goal(self, coord: Coord) -> bool:
        """Move the goal marker; learning restarts."""
        return self._move_marker("goal", coord)

    def _move_marker(self, marker: str, coord: Coord) -> bool:
        if self._state_machine.is_running():
            return False

        try:
            if marker == "start":
                self._engine.set_start(coord)
            else:
                self._engine.set_goal(coord)
        except ValueError as e:
            self.error_occurred.emit(f"Failed to place {marker}: {str(e)}")
            return False
        self.grid_updated.emit()
        return True

    # Configuration

    def set_init_mode(self, mode: InitMode) -> bool:
        """
        Switch between tabula-rasa and heuristic initialization.

        The table is rebuilt straight away only if learning has not started;
        otherwise the new mode applies from the next reset.
        """
        try:
            self._engine.set_init_mode(mode)
        except ValueError as e:
            self.error_occurred.emit(str(e))
            return False

        if mode == "heuristic":
            self._config.epsilon = HEURISTIC_EPSILON
            self._engine.set_epsilon(HEURISTIC_EPSILON)

        if self._engine.is_untouched():
            self._engine.reset_learning()
            self.grid_updated.emit()
        return True

    def set_speed(self, speed: int):
        """Set simulation speed (0..100); higher is faster."""
        self._config.speed = speed
        self._timer.setInterval(self._config.step_interval)

    def update_config(self, **kwargs):
        """Update configuration; alpha and gamma apply from the next step."""
        for key, value in kwargs.items():
            if key == "init_mode":
                self.set_init_mode(value)
            elif key == "speed":
                self.set_speed(value)
            elif key == "grid_size":
                if value != self._engine.grid.size:
                    self.reset_grid(value)
            elif key == "seed":
                self._engine.set_seed(value)
            elif hasattr(self._config, key):
                setattr(self._config, key, value)
                if key == "epsilon":
                    self._engine.set_epsilon(value)

    # State Machine Callbacks

    def _on_running_entered(self, context):
        """Called when entering RUNNING state."""
        self._timer.start(self._config.step_interval)
        logger.info("Learning loop started (interval %d ms)", self._config.step_interval)
        self.state_changed.emit(RunLoopState.RUNNING)

    def _on_paused_entered(self, context):
        """Called when entering PAUSED state."""
        self._timer.stop()
        logger.info("Learning loop paused at episode %d", self._engine.episode)
        self.state_changed.emit(RunLoopState.PAUSED)

    def _on_idle_entered(self, context):
        """Called when entering IDLE state."""
        self._timer.stop()
        self.state_changed.emit(RunLoopState.IDLE)

    # Stepping

    def _do_step(self) -> StepResult:
        result = self._engine.step()
        self.step_completed.emit(result)
        if result.episode:
            self.episode_completed.emit(result.episode)
        self.grid_updated.emit()
        return result

    def _on_timer_tick(self):
        """Called on each timer tick while running."""
        if not self._state_machine.is_running():
            self._timer.stop()
            return
        try:
            self._do_step()
        except Exception as e:
            logger.exception("Learning step failed")
            self.error_occurred.emit(f"Learning step error: {str(e)}")
            self._state_machine.pause()

    # Utility methods

    def get_statistics(self) -> dict:
        """Get current learning statistics."""
        stats = self._engine.get_statistics()
        stats.update({
            "alpha": self._config.alpha,
            "gamma": self._config.gamma,
            "speed": self._config.speed,
            "current_state": self._state_machine.current_state.name,
            "state_description": self._state_machine.get_state_description(),
            "start_action": INT_TO_ACTION[self._engine.best_action(self._engine.start)],
        })
        return stats

    def cleanup(self):
        """Stop the timer before shutdown."""
        self._timer.stop()
        self._stop_loop()
