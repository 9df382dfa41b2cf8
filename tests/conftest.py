import pytest
from PySide6.QtCore import QCoreApplication

from qcar.domain.types import LearningConfig
from qcar.domain.qlearning import QLearningEngine
from qcar.utils.rng import SeededRNG


class FixedRNG(SeededRNG):
    """RNG whose uniform draws are pinned, so epsilon-greedy always exploits or explores."""

    def __init__(self, value: float, seed: int = 0):
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def make_engine():
    def _make(size=5, rng=None, **kwargs):
        config = LearningConfig(grid_size=size, **kwargs)
        return QLearningEngine(config, rng=rng or SeededRNG(1234))
    return _make
