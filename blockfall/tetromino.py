"""Falling pieces: shapes, movement, rotation and wall kicks."""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol

SPAWN_X = 4
SPAWN_Y = -1
GRID_SIZE = 4
ROTATIONS = 4


class BrickType(IntEnum):
    """Kinds of block; the seven pieces come first, then board-only kinds."""

    I = 0  # noqa: E741
    J = 1
    L = 2
    O = 3  # noqa: E741
    T = 4
    S = 5
    Z = 6
    GRID = 7
    NONE = 8

    @property
    def is_piece(self) -> bool:
        return self <= BrickType.Z


class Board(Protocol):
    def is_occupied(self, x: int, y: int) -> bool: ...

    def fix_tetromino(self, tetromino: Tetromino) -> None: ...


Cells = tuple[tuple[int, int], ...]


def _shape(pattern: str) -> Cells:
    """Turn rows such as ``".#./###"`` into (x, y) cells in row-major order."""
    return tuple(
        (x, y)
        for y, row in enumerate(pattern.split("/"))
        for x, mark in enumerate(row)
        if mark == "#"
    )


def _rotations(*patterns: str) -> tuple[Cells, Cells, Cells, Cells]:
    r0, r1, r2, r3 = (_shape(pattern) for pattern in patterns)
    return r0, r1, r2, r3


_SHAPES: dict[BrickType, tuple[Cells, Cells, Cells, Cells]] = {
    BrickType.I: _rotations("..../####", "..#./..#./..#./..#.", "..../..../####", ".#../.#../.#../.#.."),
    BrickType.J: _rotations("#.../###.", ".##./.#../.#..", "..../###./..#.", ".#../.#../##.."),
    BrickType.L: _rotations("..#./###.", ".#../.#../.##.", "..../###./#...", "##../.#../.#.."),
    BrickType.O: _rotations(".##./.##.", ".##./.##.", ".##./.##.", ".##./.##."),
    BrickType.T: _rotations(".#../###.", ".#../.##./.#..", "..../###./.#..", ".#../##../.#.."),
    BrickType.S: _rotations(".##./##..", ".#../.##./..#.", "..../.##./##..", "#.../##../.#.."),
    BrickType.Z: _rotations("##../.##.", "..#./.##./.#..", "..../##../.##.", ".#../##../#..."),
}
_EMPTY: tuple[Cells, Cells, Cells, Cells] = ((), (), (), ())

_KICKS_NORMAL = ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2))
_KICKS_I = ((0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2))


class Tetromino:
    """A piece of a given kind with a rotation and a board position."""

    def __init__(self, kind: BrickType | int, x: int = SPAWN_X, y: int = SPAWN_Y) -> None:
        self.kind = BrickType(kind)
        self.rotation = 0
        self.x = x
        self.y = y
        self._shapes = _SHAPES.get(self.kind, _EMPTY)

    def __repr__(self) -> str:
        return (
            f"Tetromino({self.kind.name}, x={self.x}, y={self.y}, "
            f"rotation={self.rotation})"
        )

    def block(self, rotation: int, y: int, x: int) -> int:
        """Return 1 if the 4x4 grid of ``rotation`` is filled at (x, y), else 0.

        Raises IndexError when the rotation or coordinates lie outside the grid.
        """
        if not 0 <= rotation < ROTATIONS:
            raise IndexError(f"rotation {rotation} out of range")
        if not (0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE):
            raise IndexError(f"cell ({x}, {y}) outside the {GRID_SIZE}x{GRID_SIZE} grid")
        filled = (x, y) in self._shapes[rotation]
        return int(filled)

    def cells(self) -> list[tuple[int, int]]:
        """Board coordinates covered by the piece in its current rotation."""
        return [(self.x + cx, self.y + cy) for cx, cy in self._shapes[self.rotation]]

    def set_position(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def collides(self, board: Board) -> bool:
        """True if any cell lies on an occupied or out-of-bounds board cell."""
        return any(board.is_occupied(x, y) for x, y in self.cells())

    def _shift(self, board: Board, dx: int, dy: int) -> bool:
        self.x += dx
        self.y += dy
        if self.collides(board):
            self.x -= dx
            self.y -= dy
            return False
        return True

    def move_left(self, board: Board) -> bool:
        return self._shift(board, -1, 0)

    def move_right(self, board: Board) -> bool:
        return self._shift(board, 1, 0)

    def move_down(self, board: Board) -> bool:
        return self._shift(board, 0, 1)

    def rotate_cw(self, board: Board) -> bool:
        return self._rotate(board, clockwise=True)

    def rotate_ccw(self, board: Board) -> bool:
        return self._rotate(board, clockwise=False)

    def rotate_180(self, board: Board) -> bool:
        """Turn two steps clockwise.

        The first step is taken unchecked; if the second step and its wall
        kicks fail, the piece is left one step from where it started.
        """
        self.rotation = (self.rotation + 1) % 4
        return self._rotate(board, clockwise=True)

    def hard_drop(self, board: Board) -> bool:
        """Drop the piece as far as it goes and fix it onto the board."""
        while self.move_down(board):
            pass
        board.fix_tetromino(self)
        return True

    def _rotate(self, board: Board, clockwise: bool) -> bool:
        old = self.rotation
        new = (old + (1 if clockwise else 3)) % 4
        self.rotation = new
        if not self.collides(board):
            return True
        self.rotation = old
        return self._wall_kick(board, old, new)

    def _wall_kick(self, board: Board, old: int, new: int) -> bool:
        if self.kind is BrickType.O:
            return False
        kicks = _KICKS_I if self.kind is BrickType.I else _KICKS_NORMAL
        for dx, dy in kicks:
            self.x += dx
            self.y += dy
            self.rotation = new
            if not self.collides(board):
                return True
            self.x -= dx
            self.y -= dy
            self.rotation = old
        return False