"""The playing scene: piece queue, input handling, gravity, scoring and name entry."""

from __future__ import annotations

import random
from collections import deque
from enum import Enum, IntEnum
from typing import Callable, Protocol

from blockfall.board import GameBoard
from blockfall.ranking import NAME_LENGTH, RankingManager
from blockfall.tetromino import BrickType, Tetromino

QUEUE_SIZE = 4
DAS_DELAY = 170
ARR_SPEED = 50
BASE_DROP_TIME = 500.0
DROP_TIME_PER_LEVEL = 30.0
MIN_DROP_TIME = 100.0
LINES_PER_LEVEL = 10
HOLD_SPAWN = (5, 2)
ENTER_BUTTON = ((515, 765), (535, 635))

_LINE_POINTS = {1: 100, 2: 300, 3: 500, 4: 800}
_LINE_SOUNDS = {1: "single", 2: "double", 3: "triple"}


class _SoundPlayer(Protocol):
    def play_sfx(self, name: str, volume: float) -> None: ...

    def play_bgm(self, name: str, volume: float) -> None: ...

    def stop_bgm(self) -> None: ...

    def is_sfx_playing(self) -> bool: ...


class GameState(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    ENTERING_NAME = "entering_name"


class LastAction(Enum):
    NONE = "none"
    MOVE = "move"
    ROTATE = "rotate"
    DROP = "drop"


class Key(IntEnum):
    """Virtual key codes of the non-letter keys the scene reacts to."""

    BACK = 0x08
    RETURN = 0x0D
    SHIFT = 0x10
    CONTROL = 0x11
    SPACE = 0x20
    LEFT = 0x25
    UP = 0x26
    RIGHT = 0x27
    DOWN = 0x28


class SevenBag:
    """Deals the seven piece kinds in shuffled bags of one of each."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._blocks = [BrickType(kind) for kind in range(7)]
        self._rng.shuffle(self._blocks)
        self._index = 0

    def next(self) -> BrickType:
        """Return the next kind, reshuffling once the bag is used up."""
        if self._index >= len(self._blocks):
            self._rng.shuffle(self._blocks)
            self._index = 0
        kind = self._blocks[self._index]
        self._index += 1
        return kind


def _key_code(key: int | str) -> int:
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"expected a single character, got {key!r}")
        return ord(key)
    return int(key)


class PlayScene:
    """One game of falling blocks, from the first piece to the saved score.

    ``sound`` is optional; without it the game-over screen moves straight on to
    name entry. ``on_finished`` is called after the score has been saved.
    """

    def __init__(
        self,
        sound: _SoundPlayer | None = None,
        rankings: RankingManager | None = None,
        rng: random.Random | None = None,
        on_finished: Callable[[], None] | None = None,
    ) -> None:
        self.sound = sound
        self.rankings = rankings if rankings is not None else RankingManager()
        self._rng = rng if rng is not None else random.Random()
        self.on_finished = on_finished
        self._drop_timer = 0.0
        self.board = GameBoard(0, 0, 32)
        self._reset()

    def _reset(self) -> None:
        self.state = GameState.PLAYING
        self.current: Tetromino | None = None
        self.held: Tetromino | None = None
        self.upcoming: deque[Tetromino] = deque()
        self._bag: SevenBag | None = None

        self.can_hold = True
        self.was_last_move_rotation = False
        self.is_t_spin = False
        self.is_perfect_clear = False
        self.is_back_to_back = False
        self.was_last_special_action = False
        self.is_tetris = False

        self._das_timer = 0.0
        self._arr_timer = 0.0
        self.left_pressed = False
        self.right_pressed = False
        self.das_active = False

        self.level = 1
        self.lines_cleared = 0
        self.score = 0
        self.combo = 0
        self.t_spin_lines_cleared = 0

        self.is_game_over = False
        self.bgm_started = False
        self.enter_clicked = False
        self.player_name = ""
        self.last_action = LastAction.NONE

    def _sfx(self, name: str, volume: float) -> None:
        if self.sound is not None:
            self.sound.play_sfx(name, volume)

    def enter(self) -> None:
        """Start a fresh game on an empty board."""
        self._reset()
        self.board = GameBoard(0, 0, 32)
        if self.sound is not None and not self.bgm_started:
            self.sound.play_bgm("bgm_play", 0.3)
            self.bgm_started = True

    def _drop_time(self) -> float:
        return max(BASE_DROP_TIME - (self.level - 1) * DROP_TIME_PER_LEVEL, MIN_DROP_TIME)

    def _auto_shift(self, delta_time: float, dx: int) -> None:
        if not self.das_active:
            self._das_timer += delta_time
            if self._das_timer >= DAS_DELAY:
                self.das_active = True
                self._arr_timer = 0.0
            return
        self._arr_timer += delta_time
        if self._arr_timer >= ARR_SPEED:
            self.move(dx, 0)
            self._sfx("move", 0.25)
            self.last_action = LastAction.MOVE
            self._arr_timer = 0.0

    def _lock_piece(self) -> None:
        assert self.current is not None
        if self.last_action is LastAction.ROTATE:
            self.is_t_spin = self.board.check_t_spin(self.current)
        else:
            self.is_t_spin = False
        self.board.fix_tetromino(self.current)
        cleared = self.board.remove_full_lines()
        self.add_lines_cleared(cleared)
        self.add_score(cleared, self.is_t_spin, self.combo)
        self.current = None

    def update(self, delta_time: float) -> None:
        """Advance the game by ``delta_time`` milliseconds."""
        if self.state is GameState.PLAYING:
            self._update_playing(delta_time)
        elif self.state is GameState.GAME_OVER:
            if self.sound is None or not self.sound.is_sfx_playing():
                self.state = GameState.ENTERING_NAME
        elif self.state is GameState.ENTERING_NAME and self.enter_clicked:
            self.enter_clicked = False
            length = len(self.player_name)
            if length < NAME_LENGTH:
                self.player_name += "A" * (NAME_LENGTH - length)
            else:
                self.player_name = self.player_name[:NAME_LENGTH]
            self.save_score(self.player_name)

    def _update_playing(self, delta_time: float) -> None:
        if self.board.is_game_over() and not self.is_game_over:
            self.is_game_over = True
            if self.sound is not None:
                self.sound.play_sfx("game_over", 0.4)
                self.sound.stop_bgm()
                self.bgm_started = False
            self.state = GameState.GAME_OVER
        if self.is_game_over:
            return
        if self.current is None:
            self.spawn()
            return
        self._drop_timer += delta_time
        if self.left_pressed:
            self._auto_shift(delta_time, -1)
        if self.right_pressed:
            self._auto_shift(delta_time, 1)
        if self._drop_timer > self._drop_time():
            self._drop_timer = 0.0
            if not self.current.move_down(self.board):
                self._lock_piece()

    def key_down(self, key: int | str) -> None:
        """React to a key press; letters may be given as one-character strings."""
        code = _key_code(key)
        if self.state is GameState.PLAYING:
            self._key_down_playing(code)
        elif self.state is GameState.ENTERING_NAME:
            self._key_down_name(code)

    def _try_rotate(self, clockwise: bool, half_turn: bool) -> None:
        if self.rotate(clockwise, half_turn):
            self._sfx("rotate", 0.3)
            self.last_action = LastAction.ROTATE

    def _press_side(self, dx: int) -> None:
        pressed = self.left_pressed if dx < 0 else self.right_pressed
        if pressed or not self.move(dx, 0):
            return
        self._sfx("move", 0.25)
        if dx < 0:
            self.left_pressed = True
        else:
            self.right_pressed = True
        self._das_timer = 0.0
        self.das_active = False
        self.last_action = LastAction.MOVE

    def _key_down_playing(self, code: int) -> None:
        if code in (Key.UP, ord("X")):
            self._try_rotate(True, False)
        elif code == Key.LEFT:
            self._press_side(-1)
        elif code == Key.RIGHT:
            self._press_side(1)
        elif code == Key.DOWN:
            self.move(0, 1)
            self.last_action = LastAction.DROP
        elif code == Key.SPACE:
            self.last_action = LastAction.DROP
            if self.current is not None and self.current.hard_drop(self.board):
                self._sfx("hard_drop", 0.25)
                cleared = self.board.remove_full_lines()
                self.add_lines_cleared(cleared)
                self.is_t_spin = False
                self.add_score(cleared, self.is_t_spin, self.combo)
                self.current = None
        elif code in (Key.CONTROL, ord("Z")):
            self._try_rotate(False, False)
        elif code in (Key.SHIFT, ord("C")):
            if self.hold():
                self._sfx("hold", 0.35)
        elif code == ord("A"):
            self._try_rotate(True, True)

    def _key_down_name(self, code: int) -> None:
        if ord("A") <= code <= ord("Z") or ord("a") <= code <= ord("z"):
            if len(self.player_name) < NAME_LENGTH:
                self.player_name += chr(code).upper()
        elif code == Key.BACK:
            self.player_name = self.player_name[:-1]

    def key_up(self, key: int | str) -> None:
        """Release a held side key, ending its auto-shift."""
        if self.state is not GameState.PLAYING:
            return
        code = _key_code(key)
        if code == Key.LEFT:
            self.left_pressed = False
        elif code == Key.RIGHT:
            self.right_pressed = False
        else:
            return
        self._das_timer = 0.0
        self.das_active = False

    def click(self, x: int, y: int) -> None:
        """Handle a mouse click; on the name screen the button confirms the name."""
        if self.state is not GameState.ENTERING_NAME:
            return
        self._sfx("click", 0.4)
        (left, right), (top, bottom) = ENTER_BUTTON
        if left <= x <= right and top <= y <= bottom:
            self.enter_clicked = True

    def add_lines_cleared(self, count: int) -> None:
        self.lines_cleared += count
        self.level = self.lines_cleared // LINES_PER_LEVEL + 1

    def add_score(self, cleared_lines: int, is_t_spin: bool, combo: int) -> None:
        """Score a locked piece; ``combo`` is the combo count before this piece."""
        self.is_perfect_clear = self.board.is_perfect_clear()
        self.t_spin_lines_cleared = 0
        self.is_tetris = False

        if cleared_lines > 0:
            self._score_clear(cleared_lines, is_t_spin, combo)
            return

        if is_t_spin:
            points = 100
            if self.was_last_special_action:
                points = points * 3 // 2
                self.is_back_to_back = True
                self._sfx("back_to_back", 0.4)
            else:
                self.is_back_to_back = False
            self.was_last_special_action = True
            self.score += points * self.level
        else:
            self.was_last_special_action = False
            self.is_back_to_back = False
        self.combo = 0

    def _score_clear(self, cleared_lines: int, is_t_spin: bool, combo: int) -> None:
        if self.is_perfect_clear:
            if cleared_lines == 4:
                points = 1800
                self.is_tetris = True
            else:
                points = 800
        else:
            points = _LINE_POINTS.get(cleared_lines, 0)
            self.is_tetris = cleared_lines == 4

        if is_t_spin:
            points *= 2
            self.t_spin_lines_cleared = cleared_lines

        special = self.is_tetris or is_t_spin
        self.is_back_to_back = self.was_last_special_action and special
        if self.is_back_to_back:
            points = points * 3 // 2
        self.was_last_special_action = special

        self.combo += 1
        if combo > 1:
            points += 50 * (combo - 1)
        self.score += points * self.level

        if self.sound is None:
            return
        if self.is_perfect_clear:
            self._sfx("perfect_clear", 0.3)
        elif self.is_t_spin and self.is_back_to_back:
            self._sfx("back_to_back", 0.3)
        elif self.is_t_spin:
            self._sfx("t_spin", 0.3)
        elif self.is_tetris and self.is_back_to_back:
            self._sfx("back_to_back", 0.3)
        elif self.is_tetris:
            self._sfx("tetris", 0.3)
        elif cleared_lines in _LINE_SOUNDS:
            self._sfx(_LINE_SOUNDS[cleared_lines], 0.3)
        self._sfx(f"combo{min(self.combo, 7)}", 0.3)

    def move(self, dx: int, dy: int) -> bool:
        """Shift the current piece sideways and/or down; True if the last step moved."""
        if self.current is None:
            return False
        moved = False
        if dx < 0:
            moved = self.current.move_left(self.board)
        elif dx > 0:
            moved = self.current.move_right(self.board)
        if dy > 0:
            moved = self.current.move_down(self.board)
        if moved:
            self.was_last_move_rotation = False
        return moved

    def rotate(self, clockwise: bool, half_turn: bool) -> bool:
        """Rotate the current piece; ``half_turn`` applies only when clockwise."""
        if self.current is None:
            return False
        if clockwise:
            if half_turn:
                rotated = self.current.rotate_180(self.board)
            else:
                rotated = self.current.rotate_cw(self.board)
        else:
            rotated = self.current.rotate_ccw(self.board)
        if rotated:
            self.was_last_move_rotation = True
        return rotated

    def hold(self) -> bool:
        """Swap the current piece with the held one, once per spawned piece."""
        if not self.can_hold:
            return False
        if self.held is None:
            self.held = self.current
            self.spawn()
        else:
            self.held, self.current = self.current, self.held
        if self.current is not None:
            self.current.set_position(*HOLD_SPAWN)
        self.can_hold = False
        return True

    def spawn(self) -> Tetromino:
        """Take the next piece from the queue and refill it from the bag."""
        self.can_hold = True
        if self._bag is None:
            self._bag = SevenBag(self._rng)
            self.upcoming = deque(Tetromino(self._bag.next()) for _ in range(QUEUE_SIZE))
        else:
            self.upcoming.append(Tetromino(self._bag.next()))
        self.current = self.upcoming.popleft()
        return self.current

    def save_score(self, name: str) -> None:
        """Record the result in the ranking table, write it out and finish."""
        self.rankings.add(name, self.lines_cleared, self.score)
        self.rankings.save()
        if self.on_finished is not None:
            self.on_finished()