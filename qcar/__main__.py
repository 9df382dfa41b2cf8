"""Main entry point: run the timer-driven learning loop without a window."""

import sys
import signal
import logging
import argparse
from PySide6.QtCore import QCoreApplication

from .domain.types import LearningConfig
from .utils.grid_factory import add_random_walls
from .utils.render import render_grid

PROGRESS_INTERVAL = 50


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Q-Learning car on a walled grid")
    parser.add_argument("--size", type=int, default=15, help="Grid size, border included")
    parser.add_argument("--episodes", type=int, default=500, help="Episodes to run before stopping")
    parser.add_argument("--alpha", type=float, default=0.1, help="Learning rate")
    parser.add_argument("--gamma", type=float, default=0.9, help="Discount factor")
    parser.add_argument("--epsilon", type=float, default=0.8, help="Initial exploration rate")
    parser.add_argument("--heuristic", action="store_true", help="Seed Q-values with a goal-distance gradient")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--wall-density", type=float, default=0.0, help="Fraction of interior cells to wall off")
    parser.add_argument("--speed", type=int, default=100, help="Simulation speed 0..100 (100 = no delay)")
    parser.add_argument("--verbose", action="store_true", help="Log every episode")
    return parser


def main(argv=None):
    """Main entry point for the headless runner."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Q-Learning Car")
    app.setApplicationVersion("1.0.0")

    # Import after the application exists so the controller's timer has a thread to live on
    from .app.controller import QLearningController

    config = LearningConfig(
        grid_size=args.size,
        alpha=args.alpha,
        gamma=args.gamma,
        epsilon=args.epsilon,
        init_mode="heuristic" if args.heuristic else "tabula_rasa",
        speed=args.speed,
        seed=args.seed,
    )

    try:
        controller = QLearningController(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    engine = controller.engine
    if args.wall_density > 0:
        placed = add_random_walls(engine.grid, args.wall_density, engine.rng)
        print(f"Placed {placed} random walls")

    print("Q-Learning Car")
    print("=" * 50)
    print(f"Grid {engine.grid.size}x{engine.grid.size}, start {engine.start}, goal {engine.goal}, "
          f"mode {config.init_mode}")

    successes = []

    def on_episode(summary):
        successes.append(summary.reached_goal)
        if summary.number % PROGRESS_INTERVAL == 0:
            recent = successes[-PROGRESS_INTERVAL:]
            rate = sum(recent) / len(recent)
            print(f"Episode {summary.number}: Success rate: {rate:.1%}, "
                  f"Moves: {summary.moves}, Epsilon: {engine.epsilon:.3f}")
        if summary.number >= args.episodes:
            controller.pause()
            app.quit()

    def on_error(message):
        print(f"Error: {message}")
        app.exit(1)

    controller.episode_completed.connect(on_episode)
    controller.error_occurred.connect(on_error)

    def signal_handler(sig, frame):
        """Handle system signals for graceful shutdown."""
        print(f"\nReceived signal {sig}, shutting down gracefully...")
        controller.cleanup()
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    controller.start()
    try:
        code = app.exec()
    finally:
        controller.cleanup()

    print()
    print(render_grid(engine))
    print()
    stats = controller.get_statistics()
    print(f"Episodes: {stats['episode']}, successful: {sum(successes)}, epsilon: {stats['epsilon']:.3f}")
    print(f"Start value: {engine.max_q(engine.start):.2f}")
    print(f"Greedy action at start: {stats['start_action']}")
    return code


if __name__ == "__main__":
    sys.exit(main())
