"""Core type definitions for the Q-Learning car."""

from dataclasses import dataclass
from typing import Optional, Tuple, Literal, Dict

# Coordinate type for grid positions, (x, y)
Coord = Tuple[int, int]

# Cell classification
Cell = Literal["empty", "wall", "start", "goal"]

# Actions the agent can take
Action = Literal["up", "right", "down", "left"]
ActionInt = Literal[0, 1, 2, 3]  # Index into Q-value rows

# Q-table initialization modes
InitMode = Literal["tabula_rasa", "heuristic"]

# Rewards
REWARD_GOAL = 100.0
REWARD_WALL = -100.0
REWARD_STEP = -1.0

# Epsilon schedule, applied on natural episode termination only
EPSILON_DECAY = 0.995
EPSILON_MIN = 0.01

# An episode times out once moves exceed TIMEOUT_FACTOR * size^2
TIMEOUT_FACTOR = 2

# Steepness of the distance gradient used by heuristic initialization
HEURISTIC_SCALE = 2.0


@dataclass
class LearningConfig:
    """Hyperparameters and run settings for the learning engine."""
    grid_size: int = 15
    alpha: float = 0.1  # Learning rate
    gamma: float = 0.9  # Discount factor
    epsilon: float = 0.8  # Initial exploration rate
    init_mode: InitMode = "tabula_rasa"
    speed: int = 50  # 0..100, tick interval is (100 - speed) ms
    seed: Optional[int] = None

    @property
    def step_interval(self) -> int:
        """Milliseconds between timer-driven learning steps."""
        return 100 - max(0, min(100, int(self.speed)))


@dataclass
class RunState:
    """Episode counters and the live exploration rate."""
    episode: int = 0
    moves: int = 0
    total_reward: float = 0.0
    epsilon: float = 0.0

    def reset_episode(self):
        """Clear the per-episode counters."""
        self.moves = 0
        self.total_reward = 0.0

    def reset(self, epsilon: float):
        """Reset everything, starting again from the given epsilon."""
        self.episode = 0
        self.reset_episode()
        self.epsilon = epsilon


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an action to a position."""
    next_pos: Coord
    reward: float
    terminal: bool = False
    blocked: bool = False


@dataclass
class EpisodeSummary:
    """Summary of an episode that just ended."""
    number: int
    moves: int
    total_reward: float
    reached_goal: bool
    epsilon_used: float


@dataclass
class StepResult:
    """Observable result of a single learning step."""
    position: Coord  # Agent position after the step (Start if the episode ended)
    action: ActionInt
    reward: float
    blocked: bool = False
    reached_goal: bool = False
    timed_out: bool = False
    episode: Optional[EpisodeSummary] = None

    @property
    def episode_ended(self) -> bool:
        """Whether the step closed an episode."""
        return self.reached_goal or self.timed_out


# Action mappings
INT_TO_ACTION: Dict[ActionInt, Action] = {
    0: "up",
    1: "right",
    2: "down",
    3: "left"
}

ACTION_DELTAS: Dict[ActionInt, Coord] = {
    0: (0, -1),  # up
    1: (1, 0),   # right
    2: (0, 1),   # down
    3: (-1, 0)   # left
}

ACTION_ARROWS: Dict[ActionInt, str] = {
    0: "^",
    1: ">",
    2: "v",
    3: "<"
}

NUM_ACTIONS = len(ACTION_DELTAS)
