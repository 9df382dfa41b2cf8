import pytest
from PySide6.QtCore import QEventLoop, QTimer

from qcar.domain.types import LearningConfig, INT_TO_ACTION
from qcar.app.controller import QLearningController, HEURISTIC_EPSILON
from qcar.app.fsm import RunLoopState
from qcar.utils.rng import SeededRNG


@pytest.fixture
def controller(qapp):
    ctrl = QLearningController(LearningConfig(grid_size=6, epsilon=0.5, speed=100), rng=SeededRNG(8))
    yield ctrl
    ctrl.cleanup()


def test_step_once_emits_signals(controller):
    steps, redraws = [], []
    controller.step_completed.connect(steps.append)
    controller.grid_updated.connect(lambda: redraws.append(True))

    result = controller.step_once()
    assert result is not None
    assert steps == [result]
    assert redraws
    assert controller.engine.moves == 1


def test_start_pause_toggle(controller):
    states = []
    controller.state_changed.connect(states.append)

    assert controller.start()
    assert controller.is_running
    assert controller.step_once() is None
    assert controller.toggle_running()
    assert controller.current_state == RunLoopState.PAUSED
    assert controller.toggle_running()
    assert controller.current_state == RunLoopState.RUNNING
    assert states == [RunLoopState.RUNNING, RunLoopState.PAUSED, RunLoopState.RUNNING]


def test_timer_drives_learning(controller, qapp):
    episodes = []
    loop = QEventLoop()

    def on_episode(summary):
        episodes.append(summary)
        if len(episodes) >= 3:
            controller.pause()
            loop.quit()

    controller.episode_completed.connect(on_episode)
    guard = QTimer()
    guard.setSingleShot(True)
    guard.timeout.connect(loop.quit)
    guard.start(20000)
    controller.start()
    loop.exec()
    guard.stop()

    assert len(episodes) >= 3
    assert controller.engine.episode >= 3
    assert [ep.number for ep in episodes[:3]] == [1, 2, 3]


def test_editing_refused_while_running(controller):
    controller.start()
    assert not controller.toggle_cell((2, 2))
    assert not controller.paint_cell((2, 2), "wall")
    assert not controller.set_goal((2, 3))
    controller.pause()
    assert controller.toggle_cell((2, 2))
    assert controller.engine.grid.classify((2, 2)) == "wall"
    assert controller.paint_cell((2, 2), "empty")
    assert not controller.paint_cell((1, 1), "wall")


def test_invalid_edits_report_errors(controller):
    errors = []
    controller.error_occurred.connect(errors.append)
    assert not controller.set_start((0, 0))
    assert not controller.paint_cell((9, 9), "wall")
    assert len(errors) == 2


def test_set_goal_resets_learning(controller):
    controller.engine.run(20)
    assert controller.set_goal((2, 3))
    assert controller.engine.goal == (2, 3)
    assert controller.engine.is_untouched()


def test_reset_learning_stops_loop(controller):
    controller.start()
    controller.engine.run(10)
    assert controller.reset_learning()
    assert controller.current_state == RunLoopState.IDLE
    assert controller.engine.is_untouched()


def test_reset_grid(controller):
    controller.toggle_cell((2, 2))
    assert controller.reset_grid(8)
    assert controller.engine.grid.size == 8
    assert controller.engine.grid.classify((2, 2)) == "empty"


def test_heuristic_switch_before_learning(controller):
    assert controller.set_init_mode("heuristic")
    engine = controller.engine
    assert engine.epsilon == HEURISTIC_EPSILON
    assert controller.config.epsilon == HEURISTIC_EPSILON
    assert engine.max_q((3, 4)) == 0.0


def test_heuristic_switch_after_learning_waits_for_reset(controller):
    engine = controller.engine
    engine.run(5)
    values = engine.q_table.values.copy()
    assert controller.set_init_mode("heuristic")
    assert (engine.q_table.values == values).all()
    controller.reset_learning()
    assert engine.max_q((3, 4)) == 0.0
    assert not controller.set_init_mode("optimistic")


def test_update_config_hot_reload(controller):
    controller.update_config(alpha=0.7, gamma=0.5, epsilon=0.05, speed=40, unknown=1)
    assert controller.config.alpha == 0.7
    assert controller.config.gamma == 0.5
    assert controller.engine.epsilon == 0.05
    assert controller.config.step_interval == 60
    assert not hasattr(controller.config, "unknown")

    controller.update_config(grid_size=7)
    assert controller.engine.grid.size == 7


def test_statistics(controller):
    controller.step_once()
    stats = controller.get_statistics()
    assert stats["moves"] == 1
    assert stats["current_state"] == "IDLE"
    assert stats["grid_size"] == 6
    assert stats["alpha"] == controller.config.alpha
    assert stats["start_action"] in INT_TO_ACTION.values()


def test_update_config_reseeds_engine(controller):
    controller.update_config(seed=5)
    assert controller.config.seed == 5
    assert controller.engine.rng.seed == 5
    assert controller.engine.display_rng.seed == 5

    controller.reset_learning()
    first = [controller.step_once().action for _ in range(20)]
    controller.update_config(seed=5)
    controller.reset_learning()
    second = [controller.step_once().action for _ in range(20)]
    assert first == second


def test_paint_under_agent_refused(controller):
    engine = controller.engine
    engine.agent_pos = (2, 1)
    assert not controller.paint_cell((2, 1), "wall")
    assert not controller.toggle_cell((2, 1))
    assert engine.grid.classify((2, 1)) == "empty"
