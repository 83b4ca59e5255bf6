"""Maze-facing API: models, host environment, generation and pathfinding."""
