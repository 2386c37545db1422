"""Game logic for a falling-block puzzle: pieces, board, play scene, rankings and helpers."""

__version__ = "0.1.0"