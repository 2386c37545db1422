import random
from collections import Counter

import pytest

from blockfall.play import GameState, Key, LastAction, PlayScene, SevenBag
from blockfall.ranking import RankingManager
from blockfall.tetromino import BrickType, Tetromino


class FakeSound:
    def __init__(self):
        self.sfx = []
        self.bgm = []
        self.playing = False
        self.bgm_stopped = 0

    def play_sfx(self, name, volume):
        self.sfx.append((name, volume))

    def play_bgm(self, name, volume):
        self.bgm.append((name, volume))

    def stop_bgm(self):
        self.bgm_stopped += 1

    def is_sfx_playing(self):
        return self.playing


@pytest.fixture
def ranking_path(tmp_path):
    return tmp_path / "ranking.dat"


@pytest.fixture
def scene(ranking_path):
    s = PlayScene(rankings=RankingManager(ranking_path), rng=random.Random(7))
    s.enter()
    return s


@pytest.fixture
def noisy(ranking_path):
    sound = FakeSound()
    s = PlayScene(sound=sound, rankings=RankingManager(ranking_path), rng=random.Random(3))
    s.enter()
    return s, sound


def test_seven_bag_deals_each_kind_once_per_bag():
    bag = SevenBag(random.Random(11))
    for _ in range(3):
        dealt = [bag.next() for _ in range(7)]
        assert sorted(dealt) == [BrickType(k) for k in range(7)]


def test_enter_starts_fresh_game_and_music(noisy):
    scene, sound = noisy
    assert scene.state is GameState.PLAYING
    assert (scene.level, scene.score, scene.lines_cleared) == (1, 0, 0)
    assert sound.bgm == [("bgm_play", 0.3)]


def test_first_update_spawns_piece_with_queue(scene):
    assert scene.current is None
    scene.update(0)
    assert scene.current is not None
    assert scene.current.kind.is_piece
    assert len(scene.upcoming) == 3
    kinds = [scene.current.kind, *(p.kind for p in scene.upcoming)]
    assert len(set(kinds)) == 4


def test_gravity_moves_piece_down_after_drop_time(scene):
    scene.update(0)
    start_y = scene.current.y
    scene.update(400)
    assert scene.current.y == start_y
    scene.update(501)
    assert scene.current.y == start_y + 1


def test_level_follows_cleared_lines(scene):
    scene.add_lines_cleared(9)
    assert scene.level == 1
    scene.add_lines_cleared(1)
    assert scene.level == 2


def test_single_line_score(scene):
    scene.board.set_cell(1, 21, BrickType.T)
    scene.add_score(1, False, 0)
    assert scene.score == 100
    assert scene.combo == 1
    assert not scene.is_tetris


def test_perfect_clear_scores(scene):
    scene.add_score(1, False, 0)
    assert scene.is_perfect_clear
    assert scene.score == 800


def test_tetris_then_back_to_back(scene):
    scene.board.set_cell(1, 21, BrickType.T)
    scene.add_score(4, False, 0)
    assert scene.is_tetris
    assert scene.score == 800
    assert not scene.is_back_to_back
    before = scene.score
    scene.add_score(4, False, scene.combo)
    assert scene.is_back_to_back
    assert scene.score - before > 800


def test_no_lines_resets_combo(scene):
    scene.board.set_cell(1, 21, BrickType.T)
    scene.add_score(1, False, 0)
    scene.add_score(1, False, scene.combo)
    assert scene.combo == 2
    scene.add_score(0, False, scene.combo)
    assert scene.combo == 0
    assert not scene.was_last_special_action


def test_t_spin_without_lines(noisy):
    scene, sound = noisy
    scene.board.set_cell(1, 21, BrickType.T)
    scene.add_score(0, True, 0)
    assert scene.score == 100
    assert not scene.is_back_to_back
    scene.add_score(0, True, 0)
    assert scene.is_back_to_back
    assert ("back_to_back", 0.4) in sound.sfx


def test_line_clear_sounds(noisy):
    scene, sound = noisy
    scene.board.set_cell(1, 21, BrickType.T)
    scene.add_score(1, False, 0)
    assert sound.sfx[-2:] == [("single", 0.3), ("combo1", 0.3)]


def test_key_move_and_rotate(scene):
    scene.current = Tetromino(BrickType.T, 4, 5)
    scene.key_down(Key.LEFT)
    assert scene.current.x == 3
    assert scene.last_action is LastAction.MOVE
    scene.key_down(Key.UP)
    assert scene.current.rotation == 1
    assert scene.last_action is LastAction.ROTATE
    scene.key_down("Z")
    assert scene.current.rotation == 0


def test_auto_shift_after_delay(noisy):
    scene, sound = noisy
    scene.current = Tetromino(BrickType.T, 5, 10)
    scene.key_down(Key.LEFT)
    assert scene.current.x == 4
    scene.update(170)
    assert scene.das_active
    assert scene.current.x == 4
    scene.update(50)
    assert scene.current.x == 3
    scene.key_up(Key.LEFT)
    assert not scene.left_pressed and not scene.das_active
    assert sound.sfx.count(("move", 0.25)) == 2


def test_hard_drop_locks_piece(scene):
    scene.current = Tetromino(BrickType.O, 4, 5)
    scene.key_down(Key.SPACE)
    assert scene.current is None
    filled = Counter(
        scene.board.block_type(x, y)
        for y in range(2, 22)
        for x in range(1, 11)
        if scene.board.is_occupied(x, y)
    )
    assert filled[BrickType.O] == 4
    assert scene.last_action is LastAction.DROP


def test_hold_swaps_once_per_piece(scene):
    scene.update(0)
    first = scene.current
    assert scene.hold()
    assert scene.held is first
    assert scene.current is not first
    assert (scene.current.x, scene.current.y) == (5, 2)
    assert not scene.hold()
    scene.spawn()
    assert scene.hold()
    assert scene.current is first


def test_game_over_without_sound_goes_to_name_entry(scene):
    scene.board.set_cell(5, 2, BrickType.T)
    scene.update(16)
    assert scene.state is GameState.GAME_OVER
    scene.update(16)
    assert scene.state is GameState.ENTERING_NAME


def test_game_over_waits_for_sound(noisy):
    scene, sound = noisy
    scene.board.set_cell(5, 2, BrickType.T)
    scene.update(16)
    assert ("game_over", 0.4) in sound.sfx
    assert sound.bgm_stopped == 1
    sound.playing = True
    scene.update(16)
    assert scene.state is GameState.GAME_OVER
    sound.playing = False
    scene.update(16)
    assert scene.state is GameState.ENTERING_NAME


def test_name_entry_keys(scene):
    scene.state = GameState.ENTERING_NAME
    for key in ("a", "B", "c", "D"):
        scene.key_down(key)
    assert scene.player_name == "ABC"
    scene.key_down(Key.BACK)
    assert scene.player_name == "AB"


def test_confirm_pads_name_and_saves(ranking_path):
    finished = []
    scene = PlayScene(
        rankings=RankingManager(ranking_path),
        rng=random.Random(1),
        on_finished=lambda: finished.append(True),
    )
    scene.enter()
    scene.score = 1234
    scene.lines_cleared = 12
    scene.state = GameState.ENTERING_NAME
    scene.key_down("A")
    scene.key_down("B")
    scene.click(10, 10)
    assert not scene.enter_clicked
    scene.click(600, 600)
    scene.update(16)
    assert finished == [True]
    top = RankingManager(ranking_path).top()
    assert (top.name, top.lines, top.score) == ("ABA", 12, 1234)


def test_empty_name_becomes_default(scene, ranking_path):
    scene.state = GameState.ENTERING_NAME
    scene.click(515, 535)
    scene.update(16)
    assert scene.rankings.top().name == "AAA"
    assert RankingManager(ranking_path).top().name == "AAA"