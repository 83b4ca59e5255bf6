"""Maze exploring agent: discovers an unknown maze, then walks its shortest path."""

__version__ = "0.1.0"
