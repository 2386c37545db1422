import struct

import pytest

from blockfall.ranking import Ranking, RankingManager


@pytest.fixture
def manager(tmp_path):
    return RankingManager(tmp_path / "ranking.dat")


def test_name_is_truncated_to_three():
    assert Ranking("ABCD", 1, 2).name == "ABC"
    assert Ranking("AB", 1, 2).name == "AB"


def test_missing_file_gives_empty_table(manager):
    assert len(manager) == 0
    assert manager.top() is None


def test_entries_sorted_by_score(manager):
    manager.add("AAA", 1, 100)
    manager.add("BBB", 2, 300)
    manager.add("CCC", 3, 200)
    assert [r.score for r in manager] == [300, 200, 100]
    assert manager.top().name == "BBB"


def test_equal_scores_keep_insertion_order(manager):
    manager.add("AAA", 1, 100)
    manager.add("BBB", 2, 100)
    manager.add("CCC", 3, 100)
    assert [r.name for r in manager] == ["AAA", "BBB", "CCC"]


def test_table_keeps_five_best(manager):
    for score in [10, 70, 30, 50, 20, 60, 40]:
        manager.add("XYZ", 0, score)
    scores = [r.score for r in manager]
    assert len(manager) == 5
    assert scores == sorted(scores, reverse=True)
    assert scores[-1] == 30


def test_low_score_not_added_when_full(manager):
    for score in [50, 60, 70, 80, 90]:
        manager.add("AAA", 0, score)
    manager.add("LOW", 0, 10)
    names = [r.name for r in manager]
    scores = [r.score for r in manager]
    assert len(manager) == 5
    assert "LOW" not in names
    assert scores == [90, 80, 70, 60, 50]


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "ranking.dat"
    first = RankingManager(path)
    first.add("ABC", 12, 3400)
    first.add("DE", 5, 900)
    first.save()
    second = RankingManager(path)
    assert second.rankings == first.rankings


def test_file_format(tmp_path):
    path = tmp_path / "ranking.dat"
    manager = RankingManager(path)
    manager.add("ABC", 12, 3400)
    manager.save()
    expected = "ABC".encode("utf-16-le") + b"\0\0" + struct.pack("<ii", 12, 3400)
    assert path.read_bytes() == expected


def test_partial_record_ignored(tmp_path):
    path = tmp_path / "ranking.dat"
    record = "QRS".encode("utf-16-le") + b"\0\0" + struct.pack("<ii", 3, 700)
    path.write_bytes(record + b"\x01\x02\x03")
    manager = RankingManager(path)
    assert manager.rankings == [Ranking("QRS", 3, 700)]


def test_load_replaces_entries(tmp_path):
    path = tmp_path / "ranking.dat"
    manager = RankingManager(path)
    manager.add("AAA", 1, 100)
    manager.save()
    manager.add("BBB", 2, 200)
    manager.load()
    assert [r.name for r in manager] == ["AAA"]


def test_clear(manager):
    manager.add("AAA", 1, 100)
    manager.clear()
    assert len(manager) == 0
    assert manager.top() is None