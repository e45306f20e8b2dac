"""Q-Learning Shortest Path - a tabular reinforcement learning pathfinder.

This package implements a Q-Learning agent that learns, by random exploration,
to walk the shortest route across a randomly generated grid world with
impassable cells and a single goal cell.
"""

__version__ = "1.0.0"
__author__ = "Q-Learning Pathfinding Demo"
