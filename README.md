# blockfall

The game logic of a falling-block puzzle game. It has no window, drawing or audio code. You
connect it to your own display and input layer.

## Modules

- `blockfall.tetromino`: the seven piece kinds (`BrickType.I`, `J`, `L`, `O`, `T`, `S`, `Z`)
  and `Tetromino`. A piece has a `kind`, a `rotation` and an `x`/`y` position. It can
  `move_left`, `move_right`, `move_down`, `rotate_cw`, `rotate_ccw`, `rotate_180` and
  `hard_drop`. Each call returns whether it succeeded. Rotations try a fixed list of wall-kick
  offsets: one list for I, one for the other pieces, and no kicks for O. `cells()` returns the
  board cells the piece covers.
- `blockfall.board`: `GameBoard` is a 12 × 23 grid of `Cell`s. It has side walls, a floor and two
  hidden spawn rows. Columns 1–10 and rows 2–21 are playable. It provides:
  - `fix_tetromino`;
  - `remove_full_lines`, which returns how many rows were cleared;
  - `is_full_line`, `is_perfect_clear`, `check_t_spin` (three of the T's four corners blocked)
    and `is_game_over` (a block in row 2);
  - `ghost_y`, the row where the ghost piece is drawn;
  - `position_on_screen`, which centres the board in a window of a given size.

  `hold_position(tetromino)` and `next_position(index, tetromino)` return the pixel anchors of
  the hold slot and of the preview slots.
- `blockfall.play`: `PlayScene` runs one game. See below.
- `blockfall.ranking`: `RankingManager` keeps at most five `Ranking`s (name, lines, score),
  ordered by descending score. Ties keep the order in which they were added. Names are cut to
  three characters. The table loads from `ranking.dat` by default, or from the path you pass.
  `save()` writes it back. Each record is the name as 8 bytes of UTF-16-LE followed by lines
  and score as little-endian 32-bit integers.
- `blockfall.sprites`: `parse_sprites(text, max_count)` reads objects that have `name`, `x`,
  `y`, `width` and `height` fields from the first JSON-like array in `text`. It keeps only
  objects with a positive width and height. `SpriteSheet.load_json(path)` loads up to eight of
  them. It raises `ValueError` if none are usable. `find(name)` and `get(index)` look sprites
  up.
- `blockfall.collider`: `CircleCollider` and `BoxCollider`, with `intersects`. Touching counts
  as overlap.
- `blockfall.vector`: `Vector2f` and a shared screen size (`set_screen_size`,
  `get_screen_size`, default 800 × 600). `GameBoard` centres itself using this screen size.
- `blockfall.timer`: `GameTimer`, a pausable frame timer. You can inject its clock.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Using the board directly

```python
from blockfall.board import GameBoard
from blockfall.tetromino import BrickType, Tetromino

board = GameBoard(0, 0, 32)
piece = Tetromino(BrickType.T)
piece.move_left(board)
piece.rotate_cw(board)
landing = board.ghost_y(piece)
piece.hard_drop(board)
cleared = board.remove_full_lines()
```

## Running a game with `PlayScene`

```python
import random
from blockfall.play import Key, PlayScene
from blockfall.ranking import RankingManager

scene = PlayScene(rankings=RankingManager("scores.dat"), rng=random.Random(1))
scene.enter()
scene.update(16.0)         # milliseconds; spawns the first piece
scene.key_down(Key.LEFT)
scene.key_up(Key.LEFT)
scene.key_down("X")        # letters may be given as one-character strings
print(scene.score, scene.level, scene.lines_cleared)
```

Controls while playing:

| Key | Action |
| --- | --- |
| `Key.UP` or `"X"` | Rotate clockwise |
| `Key.CONTROL` or `"Z"` | Rotate counter-clockwise |
| `"A"` | Half turn |
| `Key.LEFT` / `Key.RIGHT` | Move; holding repeats every 50 ms after 170 ms |
| `Key.DOWN` | Soft drop |
| `Key.SPACE` | Hard drop |
| `Key.SHIFT` or `"C"` | Hold, once per piece |

Letter keys must be upper case while playing.

Rules:

- Gravity moves the piece every 500 ms, 30 ms faster per level, down to 100 ms.
- The level is one plus every ten cleared lines.
- Scoring covers line clears, perfect clears, T-spins, back-to-back bonuses and combos. Points
  are multiplied by the level.

When a block reaches the top visible row, the scene moves to `GameState.GAME_OVER`. From there
it goes to `GameState.ENTERING_NAME`:

- With no sound object, this happens on the next update.
- With a sound object, it happens once `is_sfx_playing()` returns false.

During name entry:

- Letters type up to three characters, and `Key.BACK` deletes one.
- A `click` inside x 515–765, y 535–635 confirms the name.
- A short name is padded with `A`.
- The score is added to the ranking table and saved, and then `on_finished` is called if you
  gave one.

An optional `sound` object receives effect and music names. It needs the methods `play_sfx`,
`play_bgm`, `stop_bgm` and `is_sfx_playing`. The names sent are:

- `move`, `rotate`, `hard_drop`, `hold`, `click`, `game_over`
- `single`, `double`, `triple`, `tetris`, `t_spin`, `back_to_back`, `perfect_clear`
- `combo1` … `combo7`
- `bgm_play`

## What it does not do

The package has no command to run, and it does not do any of the following:

- open a window or render anything;
- load images;
- play audio;
- provide title or ranking screens.

Sprite sheets give only rectangles. Drawing the pieces, the ghost, the hold slot and the
preview slots is up to the caller.