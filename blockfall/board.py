"""The playfield grid: walls, line clears, T-spin and perfect-clear checks."""

from __future__ import annotations

from dataclasses import dataclass, replace

from blockfall.tetromino import BrickType, Tetromino
from blockfall.vector import get_screen_size

MAX_X_INDEX = 11
MAX_Y_INDEX = 22
FIRST_VISIBLE_ROW = 2
SCREEN_OFFSET_Y = 80
NEXT_SPACING = 135
_MAX_DROP = 100


@dataclass
class Cell:
    """One square of the board."""

    occupied: bool = False
    kind: BrickType = BrickType.GRID

    def clear(self) -> None:
        self.occupied = False
        self.kind = BrickType.NONE

    def set(self, kind: BrickType | int) -> None:
        self.occupied = True
        self.kind = BrickType(kind)


def _halve(value: int) -> int:
    """Integer halving that rounds toward zero."""
    return -(-value // 2) if value < 0 else value // 2


class GameBoard:
    """A 12 x 23 grid with side walls, a floor and two hidden spawn rows.

    Columns 1..10 and rows 2..21 form the playable area.
    """

    max_x_index = MAX_X_INDEX
    max_y_index = MAX_Y_INDEX

    def __init__(self, x: int = 0, y: int = 0, cell_size: int = 32) -> None:
        self.origin_x = x
        self.origin_y = y
        self.cell_size = cell_size
        self._grid = [
            [Cell() for _ in range(MAX_X_INDEX + 1)] for _ in range(MAX_Y_INDEX + 1)
        ]
        self.reset()

    def reset(self) -> None:
        """Empty the board, rebuild walls and floor, and re-centre it on screen."""
        for row in self._grid:
            for cell in row:
                cell.clear()
        for y in range(FIRST_VISIBLE_ROW):
            self._grid[y][0].set(BrickType.NONE)
            self._grid[y][MAX_X_INDEX].set(BrickType.NONE)
        for y in range(FIRST_VISIBLE_ROW, MAX_Y_INDEX + 1):
            self._grid[y][0].set(BrickType.GRID)
            self._grid[y][MAX_X_INDEX].set(BrickType.GRID)
        for cell in self._grid[MAX_Y_INDEX]:
            cell.set(BrickType.GRID)
        width, height = get_screen_size()
        self.position_on_screen(width, height)

    def is_occupied(self, x: int, y: int) -> bool:
        """True for filled cells; the right wall column, floor row and anything
        outside the grid always count as occupied."""
        if x < 0 or x >= MAX_X_INDEX or y < 0 or y >= MAX_Y_INDEX:
            return True
        return self._grid[y][x].occupied

    def block_type(self, x: int, y: int) -> BrickType:
        if not (0 <= x <= MAX_X_INDEX and 0 <= y <= MAX_Y_INDEX):
            raise IndexError(f"cell ({x}, {y}) is outside the board")
        return self._grid[y][x].kind

    def set_cell(self, x: int, y: int, kind: BrickType | int) -> None:
        """Fill a cell; coordinates outside the grid are ignored."""
        if 0 <= x <= MAX_X_INDEX and 0 <= y <= MAX_Y_INDEX:
            self._grid[y][x].set(kind)

    def position_on_screen(self, width: int, height: int) -> None:
        """Centre the board in a window of the given size, shifted down a little."""
        board_width = (MAX_X_INDEX + 1) * self.cell_size
        board_height = (MAX_Y_INDEX + 1) * self.cell_size
        self.origin_x = _halve(width - board_width)
        self.origin_y = _halve(height - board_height) + SCREEN_OFFSET_Y

    def fix_tetromino(self, tetromino: Tetromino) -> None:
        """Write the piece's cells into the grid."""
        for x, y in tetromino.cells():
            self.set_cell(x, y, tetromino.kind)

    def ghost_y(self, tetromino: Tetromino) -> int:
        """Row at which the piece's ghost is drawn, from the column tops."""
        tops = [
            next(
                (y for y in range(FIRST_VISIBLE_ROW, MAX_Y_INDEX) if self.is_occupied(x, y)),
                MAX_Y_INDEX,
            )
            for x in range(MAX_X_INDEX + 1)
        ]
        bottoms: dict[int, int] = {}
        for x, y in tetromino.cells():
            bottoms[x] = max(y, bottoms.get(x, y))
        distances = [
            tops[x] - bottom - 1
            for x, bottom in bottoms.items()
            if 0 <= x <= MAX_X_INDEX
        ]
        drop = min([_MAX_DROP, *distances])
        drop = max(0, min(drop, MAX_Y_INDEX))
        return tetromino.y + drop

    def check_t_spin(self, tetromino: Tetromino | None) -> bool:
        """True if a T piece has at least three of its four corners blocked."""
        if tetromino is None or tetromino.kind is not BrickType.T:
            return False
        cx = tetromino.x + 1
        cy = tetromino.y + 1
        corners = [(cx - 1, cy - 1), (cx - 1, cy + 1), (cx + 1, cy - 1), (cx + 1, cy + 1)]
        blocked = sum(
            1
            for x, y in corners
            if x <= 0 or x >= MAX_X_INDEX or y <= 0 or y >= MAX_Y_INDEX or self.is_occupied(x, y)
        )
        return blocked >= 3

    def _playable_rows(self) -> range:
        return range(MAX_Y_INDEX - 1, FIRST_VISIBLE_ROW - 1, -1)

    def is_perfect_clear(self) -> bool:
        """True when no playable cell is filled."""
        return not any(
            self.is_occupied(x, y)
            for y in self._playable_rows()
            for x in range(1, MAX_X_INDEX)
        )

    def is_full_line(self, y: int) -> bool:
        return all(self.is_occupied(x, y) for x in range(1, MAX_X_INDEX))

    def remove_full_lines(self) -> int:
        """Remove every full row, let the rows above fall, and return the count."""
        full = {y for y in self._playable_rows() if self.is_full_line(y)}
        if not full:
            return 0
        target = MAX_Y_INDEX - 1
        for source in self._playable_rows():
            if source in full:
                continue
            if source != target:
                for x in range(1, MAX_X_INDEX):
                    self._grid[target][x] = replace(self._grid[source][x])
                    self._grid[source][x].clear()
            target -= 1
        return len(full)

    def is_game_over(self) -> bool:
        """True once any block sits in the top visible row."""
        return any(self.is_occupied(x, FIRST_VISIBLE_ROW) for x in range(1, MAX_X_INDEX))


_HOLD_I = {0: (200, 275), 1: (120, 325), 2: (230, 250), 3: (150, 325)}
_HOLD_JL = {0: (185, 320), 1: (170, 310), 2: (185, 300), 3: (200, 310)}
_HOLD_SZ = {0: (185, 320), 1: (165, 315), 2: (185, 300), 3: (195, 310)}
_HOLD_OTHER = {0: (185, 320), 1: (170, 310), 2: (185, 300), 3: (190, 310)}


def hold_position(tetromino: Tetromino) -> tuple[int, int]:
    """Screen anchor of the held piece preview."""
    kind = tetromino.kind
    if kind is BrickType.O:
        return (170, 325)
    if kind is BrickType.I:
        table = _HOLD_I
    elif kind in (BrickType.J, BrickType.L):
        table = _HOLD_JL
    elif kind in (BrickType.S, BrickType.Z):
        table = _HOLD_SZ
    else:
        table = _HOLD_OTHER
    return table[tetromino.rotation]


def next_position(index: int, tetromino: Tetromino) -> tuple[int, int]:
    """Screen anchor of the ``index``-th piece in the next-piece queue."""
    kind = tetromino.kind
    if kind is BrickType.I:
        x, y = 1078, 145
    elif kind is BrickType.O:
        x, y = 1048, 185
    elif kind in (BrickType.L, BrickType.J, BrickType.S, BrickType.Z):
        x, y = 1060, 195
    else:
        x, y = 1060, 185
    return x, y + index * NEXT_SPACING