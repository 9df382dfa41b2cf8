"""Q-Learning Car - a tabular Q-Learning agent that learns to drive across a walled grid.

The `domain` package holds the learning engine (grid, Q-table, epsilon-greedy policy,
reward function and the step-wise Bellman update); `app` drives it from a Qt timer.
"""

__version__ = "1.0.0"
__author__ = "Q-Learning Car"
