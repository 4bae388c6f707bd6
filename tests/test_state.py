import random

import pytest

from walksat_lab.sat.state import Assignment, SearchStats


def test_from_bools_is_one_based():
    a = Assignment.from_bools([True, False, True])
    assert len(a) == 3
    assert a[1] and not a[2] and a[3]
    assert a.to_dimacs() == [1, -2, 3]
    assert a.to_bitstring() == "101"


def test_from_dict_and_lit_true():
    a = Assignment.from_dict({1: False, 2: True})
    assert a.n_vars == 2
    assert a.lit_true(-1)
    assert a.lit_true(2)
    assert not a.lit_true(-2)


def test_flip_toggles_and_checks_range():
    a = Assignment(2)
    a.flip(2)
    assert a.value(2) is True
    a.flip(2)
    assert a.value(2) is False
    with pytest.raises(IndexError):
        a.flip(3)
    with pytest.raises(IndexError):
        a.flip(0)


def test_copy_is_independent():
    a = Assignment.from_bools([True, True])
    b = a.copy()
    b.flip(1)
    assert a[1] is True
    assert a != b


def test_randomize_depends_only_on_seed():
    a, b = Assignment(50), Assignment(50)
    a.randomize(random.Random(3))
    b.randomize(random.Random(3))
    assert a == b
    # both values show up over 50 draws
    assert 0 < sum(a.values[1:]) < 50


def test_stats_rate():
    st = SearchStats(tries=1, flips=10, elapsed_sec=2.0)
    assert st.flips_per_sec == 5.0
