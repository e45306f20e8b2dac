"""Domain layer: environment, Q-table and the learning/search procedures."""
