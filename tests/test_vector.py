import math

import pytest

from blockfall.vector import Vector2f, get_screen_size, set_screen_size


def test_default_is_zero():
    v = Vector2f()
    assert (v.x, v.y) == (0.0, 0.0)


def test_uniform_sets_both_components():
    v = Vector2f.uniform(2.5)
    assert v == Vector2f(2.5, 2.5)


def test_add_then_subtract_round_trip():
    a = Vector2f(1.5, -2.0)
    b = Vector2f(-3.25, 4.0)
    assert (a + b) - b == a


def test_multiply_then_divide_round_trip():
    a = Vector2f(1.5, -2.0)
    assert (a * 4.0) / 4.0 == a
    assert 4.0 * a == a * 4.0


def test_division_by_zero_gives_zero_vector():
    assert Vector2f(3.0, -7.0) / 0 == Vector2f(0.0, 0.0)


def test_negation():
    a = Vector2f(2.0, -3.0)
    assert -a + a == Vector2f()


def test_length_of_three_four():
    assert Vector2f(3.0, 4.0).length() == pytest.approx(5.0)


def test_length_squared_matches_length():
    v = Vector2f(1.7, -2.3)
    assert v.length_squared() == pytest.approx(v.length() ** 2)


def test_normalized_has_unit_length_and_same_direction():
    v = Vector2f(-6.0, 2.0)
    n = v.normalized()
    assert n.length() == pytest.approx(1.0)
    assert v.cross(n) == pytest.approx(0.0)
    assert v.dot(n) > 0


def test_normalized_zero_stays_zero():
    assert Vector2f().normalized() == Vector2f()


def test_dot_symmetric_and_cross_antisymmetric():
    a = Vector2f(1.0, 2.0)
    b = Vector2f(-4.0, 0.5)
    assert a.dot(b) == b.dot(a)
    assert a.cross(b) == -b.cross(a)
    assert a.cross(a) == 0.0


def test_dot_of_perpendicular_is_zero():
    a = Vector2f(2.0, 3.0)
    b = Vector2f(-3.0, 2.0)
    assert a.dot(b) == 0.0


def test_distance_matches_difference_length():
    a = Vector2f(1.0, 1.0)
    b = Vector2f(-2.0, 5.5)
    assert a.distance(b) == pytest.approx((a - b).length())
    assert a.distance_squared(b) == pytest.approx((a - b).length_squared())
    assert math.isclose(a.distance(b), b.distance(a))


def test_screen_size_default():
    assert get_screen_size() == (800, 600)


def test_screen_size_round_trip():
    previous = get_screen_size()
    try:
        set_screen_size(1280, 960)
        assert get_screen_size() == (1280, 960)
    finally:
        set_screen_size(*previous)
    assert get_screen_size() == previous