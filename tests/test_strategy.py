import random
import typing

import pytest

from lockstep import Strategy, implies, get_strat_instance, has_strat_instance, Nat, Neg
from lockstep import MissingStrategyError, UnsatisfiedImplication

def draws(t, n=200, size=10, seed=0):
    rng = random.Random(seed)
    s = Strategy[t]()
    return [s.draw(rng, size) for _ in range(n)]

def shrinks(t, v):
    return list(Strategy[t]().simplify(v))

def test_ints_in_range():
    xs = draws(int)
    assert all(-10 <= x <= 10 for x in xs)
    assert min(xs) < 0 < max(xs)

def test_nats_and_negs():
    assert all(0 <= x <= 10 for x in draws(Nat))
    assert all(-10 <= x <= 0 for x in draws(Neg))

def test_deterministic():
    assert draws(typing.List[int], seed=3) == draws(typing.List[int], seed=3)

def test_int_shrinks_towards_zero():
    assert shrinks(int, 0) == []
    assert shrinks(int, 100) == [0, 50, 75, 88, 94, 97, 99]
    assert shrinks(int, -4) == [0, 4, -2, -3]

def test_bool_shrinks_to_false():
    assert shrinks(bool, True) == [False]
    assert shrinks(bool, False) == []

def test_str_shrinks():
    assert shrinks(str, '') == []
    xs = shrinks(str, 'cab')
    assert xs[0] == ''
    assert all(len(x) < 3 or x < 'cab' for x in xs)
    assert 'aab' in xs

def test_list_shrinks_shorter_first():
    xs = shrinks(typing.List[int], [3, 1])
    assert xs[0] == []
    assert [3] in xs and [1] in xs
    assert [0, 1] in xs

def test_tuple_strategy():
    rng = random.Random(1)
    v = Strategy[typing.Tuple[int, bool]]().draw(rng, 5)
    assert isinstance(v, tuple) and len(v) == 2
    assert isinstance(v[1], bool)
    assert shrinks(typing.Tuple[int, bool], (2, True))[0] == (0, True)

def test_optional_shrinks_to_none():
    assert shrinks(typing.Optional[int], 5)[:2] == [None, 0]
    assert set(map(type, draws(typing.Optional[int]))) == {int, type(None)}

def test_generic_strategies_are_cached():
    assert get_strat_instance(typing.List[int]) is get_strat_instance(typing.List[int])

def test_missing_strategy():
    class Opaque:
        pass

    assert not has_strat_instance(Opaque)
    assert not has_strat_instance(typing.List[Opaque])
    with pytest.raises(MissingStrategyError):
        get_strat_instance(Opaque)

def is_even(n):
    return n % 2 == 0

def test_implies_filters_draws_and_shrinks():
    evens = implies(is_even, int)
    assert all(is_even(x) for x in draws(evens))
    assert all(is_even(x) for x in shrinks(evens, 100))
    assert 0 in shrinks(evens, 100)

def test_unsatisfiable_implication():
    def never(x):
        return False

    t = implies(never, int, tries=5)
    with pytest.raises(UnsatisfiedImplication) as e:
        draws(t, n=1)

    assert '5 tries' in str(e.value)
