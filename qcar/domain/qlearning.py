"""Q-Learning engine: one owning object for grid, Q-table, run state and RNG."""

import logging
from typing import Optional, List, Dict
import numpy as np

from .types import (
    Coord, Cell, ActionInt, InitMode, LearningConfig, RunState, StepResult, EpisodeSummary,
    EPSILON_DECAY, EPSILON_MIN, TIMEOUT_FACTOR
)
from .grid import Grid
from .qtable import QTable
from .policy import select_action
from .environment import transition
from ..utils.grid_factory import create_bordered_grid
from ..utils.rng import SeededRNG

logger = logging.getLogger(__name__)


class QLearningEngine:
    """
    Tabular Q-Learning over a walled grid, advanced one step at a time.

    The engine owns all mutable learning state. Callers configure it through
    `config` and the command methods, drive it by calling `step()`, and read
    it back through the query methods. It performs no I/O and is not
    thread-safe: steps must not run concurrently.
    """

    def __init__(self, config: Optional[LearningConfig] = None,
                 rng: Optional[SeededRNG] = None, grid: Optional[Grid] = None):
        self.config = config or LearningConfig()
        self.rng = rng or SeededRNG(self.config.seed)
        # Tie-breaks for display queries; learning draws only come from self.rng
        self.display_rng = SeededRNG(self.config.seed)
        self.grid = grid or create_bordered_grid(self.config.grid_size)
        self.config.grid_size = self.grid.size
        self.run_state = RunState()
        self.q_table = QTable(self.grid.size)
        self.agent_pos: Coord = self.grid.start
        self.reset_learning()

    # Properties

    @property
    def start(self) -> Coord:
        return self.grid.start

    @property
    def goal(self) -> Coord:
        return self.grid.goal

    @property
    def episode(self) -> int:
        return self.run_state.episode

    @property
    def moves(self) -> int:
        return self.run_state.moves

    @property
    def total_reward(self) -> float:
        return self.run_state.total_reward

    @property
    def epsilon(self) -> float:
        return self.run_state.epsilon

    @property
    def timeout_limit(self) -> int:
        """Moves allowed in one episode before it is forcibly ended."""
        return TIMEOUT_FACTOR * self.grid.size ** 2

    # Commands

    def reset_grid(self, size: Optional[int] = None):
        """Rebuild a bordered grid with default start and goal, then reset learning."""
        size = size or self.grid.size
        self.grid = create_bordered_grid(size)
        self.config.grid_size = size
        logger.info("Grid reset to %dx%d", size, size)
        self.reset_learning()

    def reset_learning(self, start: Optional[Coord] = None, goal: Optional[Coord] = None):
        """
        Reinitialize the Q-table and run state, keeping the wall layout.

        Args:
            start: New start position (unchanged if None)
            goal: New goal position (unchanged if None)
        """
        if start is not None or goal is not None:
            self.grid.place_markers(
                start if start is not None else self.grid.start,
                goal if goal is not None else self.grid.goal,
            )

        self.q_table = QTable.initialize(self.grid.size, self.config.init_mode, self.grid.goal)
        self.run_state.reset(self.config.epsilon)
        self.agent_pos = self.grid.start
        logger.info("Learning reset (mode=%s, start=%s, goal=%s, epsilon=%.3f)",
                    self.config.init_mode, self.grid.start, self.grid.goal, self.run_state.epsilon)

    def set_init_mode(self, mode: InitMode):
        """Change the initialization mode used by the next reset."""
        if mode not in ("tabula_rasa", "heuristic"):
            raise ValueError(f"Unknown initialization mode: {mode}")
        self.config.init_mode = mode

    def set_cell(self, coord: Coord, cell: Cell) -> bool:
        """Paint a cell as empty or wall; start, goal and the agent's cell are left alone."""
        if cell == "wall" and coord == self.agent_pos:
            return False
        return self.grid.set_cell(coord, cell)

    def toggle_cell(self, coord: Coord) -> bool:
        """Flip a cell between empty and wall."""
        if coord == self.agent_pos:
            return False
        return self.grid.toggle_cell(coord)

    def set_start(self, coord: Coord):
        """Move the start marker and reset learning."""
        self.grid.move_marker("start", coord)
        self.reset_learning()

    def set_goal(self, coord: Coord):
        """Move the goal marker and reset learning."""
        self.grid.move_marker("goal", coord)
        self.reset_learning()

    def set_seed(self, seed: Optional[int]):
        """Reseed the learning and display random sources."""
        self.config.seed = seed
        self.rng.set_seed(seed)
        self.display_rng.set_seed(seed)

    def set_epsilon(self, epsilon: float):
        """Overwrite the live exploration rate."""
        self.run_state.epsilon = epsilon

    # Learning

    def update_q_value(self, state: Coord, action: ActionInt, reward: float, next_state: Coord) -> float:
        """Apply the Q-learning update to one state-action pair and return the new value."""
        current_q = self.q_table.get(state, action)
        next_q_max = self.q_table.max_value(next_state)

        target = reward + self.config.gamma * next_q_max
        new_q = current_q + self.config.alpha * (target - current_q)

        self.q_table.write(state, action, new_q)
        return new_q

    def decay_epsilon(self):
        """Decay epsilon for less exploration over time."""
        if self.run_state.epsilon > EPSILON_MIN:
            self.run_state.epsilon = max(EPSILON_MIN, self.run_state.epsilon * EPSILON_DECAY)

    def step(self) -> StepResult:
        """
        Execute one learning step.

        Selects an action epsilon-greedily, applies the transition, updates the
        chosen action's value, then ends the episode if the goal was reached or
        the move limit was exceeded.
        """
        rs = self.run_state
        # Counted before the episode checks so the timeout boundary is exact
        rs.moves += 1

        state = self.agent_pos
        action = select_action(self.q_table.read(state), rs.epsilon, self.rng)
        outcome = transition(self.grid, state, action)

        self.update_q_value(state, action, outcome.reward, outcome.next_pos)
        rs.total_reward += outcome.reward
        self.agent_pos = outcome.next_pos

        result = StepResult(
            position=self.agent_pos,
            action=action,
            reward=outcome.reward,
            blocked=outcome.blocked,
        )

        if outcome.terminal:
            result.reached_goal = True
            result.episode = self._end_episode(reached_goal=True)
        elif rs.moves > self.timeout_limit:
            result.timed_out = True
            result.episode = self._end_episode(reached_goal=False)

        result.position = self.agent_pos
        return result

    def run(self, steps: int) -> List[EpisodeSummary]:
        """Execute several steps and return the episodes they completed."""
        episodes = []
        for _ in range(steps):
            result = self.step()
            if result.episode:
                episodes.append(result.episode)
        return episodes

    def _end_episode(self, reached_goal: bool) -> EpisodeSummary:
        rs = self.run_state
        rs.episode += 1
        summary = EpisodeSummary(
            number=rs.episode,
            moves=rs.moves,
            total_reward=rs.total_reward,
            reached_goal=reached_goal,
            epsilon_used=rs.epsilon,
        )

        self.agent_pos = self.grid.start
        rs.reset_episode()
        if reached_goal:
            self.decay_epsilon()

        logger.debug("Episode %d %s after %d moves, reward %.1f, epsilon %.3f",
                     summary.number, "reached goal" if reached_goal else "timed out",
                     summary.moves, summary.total_reward, rs.epsilon)
        return summary

    # Queries

    def is_untouched(self) -> bool:
        """True before the first step after a reset."""
        return self.run_state.episode == 0 and self.run_state.moves == 0

    def q_values(self, coord: Coord) -> np.ndarray:
        """The four action values at a coordinate."""
        return self.q_table.read(coord)

    def max_q(self, coord: Coord) -> float:
        """Max action value at a coordinate."""
        return self.q_table.max_value(coord)

    def best_action(self, coord: Coord) -> ActionInt:
        """Greedy action at a coordinate (random tie-break)."""
        return self.q_table.best_action(coord, self.display_rng)

    def value_grid(self) -> np.ndarray:
        """Max value of every cell, indexed [y][x]."""
        return self.q_table.max_values()

    def policy_grid(self) -> List[List[ActionInt]]:
        """Greedy action of every cell, indexed [y][x]."""
        return self.q_table.policy(self.display_rng)

    def get_statistics(self) -> Dict:
        """Get current run statistics."""
        return {
            "episode": self.run_state.episode,
            "moves": self.run_state.moves,
            "total_reward": self.run_state.total_reward,
            "epsilon": self.run_state.epsilon,
            "agent_pos": self.agent_pos,
            "start": self.grid.start,
            "goal": self.grid.goal,
            "init_mode": self.config.init_mode,
            "grid_size": self.grid.size,
        }
