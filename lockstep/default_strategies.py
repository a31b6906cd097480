import types
import string
import typing
import logging

from .strategy import Strategy, register
from . import _types

LETTERS = string.ascii_lowercase
log = logging.getLogger('default_strategies')

def _shrink_towards_zero(value):
    if value == 0:
        return

    yield 0

    if value < 0:
        yield -value

    sign = 1 if value > 0 else -1
    k = abs(value) // 2
    while k > 0:
        yield sign * (abs(value) - k)
        k //= 2

def _deletions(xs):
    '''Copies of the list 'xs' with chunks removed, biggest chunks first
    '''
    n = len(xs)
    k = n // 2
    while k > 0:
        for i in range(0, n - k + 1, k):
            yield xs[:i] + xs[i + k:]
        k //= 2

class IntStrat(Strategy[int]):
    def generate(self, rng, size):
        return rng.randint(-size, size)

    def shrink(self, value):
        yield from _shrink_towards_zero(value)

class NatStrat(Strategy[_types.Nat]):
    def generate(self, rng, size):
        return rng.randint(0, size)

    def shrink(self, value):
        yield from _shrink_towards_zero(value)

class NegStrat(Strategy[_types.Neg]):
    def generate(self, rng, size):
        return -rng.randint(0, size)

    def shrink(self, value):
        for v in _shrink_towards_zero(-value):
            yield -v

class BoolStrat(Strategy[bool]):
    def generate(self, rng, _):
        return rng.random() < 0.5

    def shrink(self, value):
        if value:
            yield False

class StrStrat(Strategy[str]):
    def generate(self, rng, size):
        n = rng.randint(0, size)
        return ''.join(rng.choice(LETTERS) for _ in range(n))

    def shrink(self, value):
        if value == '':
            return

        yield ''
        for cs in _deletions(list(value)):
            if cs:
                yield ''.join(cs)

        for i, c in enumerate(value):
            if c != LETTERS[0]:
                yield value[:i] + LETTERS[0] + value[i + 1:]

class NoneTypeStrat(Strategy[type(None)]):
    def generate(self, rng, _):
        return None

class ListStrat(Strategy[list]):
    def generate(self, rng, size, t):
        elem = Strategy[t]()
        return [elem.draw(rng, size) for _ in range(rng.randint(0, size))]

    def shrink(self, value, t):
        if not value:
            return

        yield []
        for xs in _deletions(value):
            if xs:
                yield xs

        elem = Strategy[t]()
        for i, x in enumerate(value):
            for y in elem.simplify(x):
                yield value[:i] + [y] + value[i + 1:]

class SetStrat(Strategy[set]):
    def generate(self, rng, size, t):
        elem = Strategy[t]()
        return {elem.draw(rng, size) for _ in range(rng.randint(0, size))}

    def shrink(self, value, t):
        if not value:
            return

        yield set()
        for xs in _deletions(sorted(value, key=repr)):
            if xs:
                yield set(xs)

class FrozenSetStrat(Strategy[frozenset]):
    def generate(self, rng, size, t):
        return frozenset(SetStrat().generate(rng, size, t))

    def shrink(self, value, t):
        for s in SetStrat().shrink(set(value), t):
            yield frozenset(s)

class TupleStrat(Strategy[tuple]):
    def generate(self, rng, size, *ts):
        if len(ts) == 2 and ts[1] is Ellipsis:
            elem = Strategy[ts[0]]()
            return tuple(elem.draw(rng, size) for _ in range(rng.randint(0, size)))

        return tuple(Strategy[t]().draw(rng, size) for t in ts)

    def shrink(self, value, *ts):
        if len(ts) == 2 and ts[1] is Ellipsis:
            for xs in ListStrat().shrink(list(value), ts[0]):
                yield tuple(xs)
            return

        for i, (t, x) in enumerate(zip(ts, value)):
            for y in Strategy[t]().simplify(x):
                yield value[:i] + (y,) + value[i + 1:]

class UnionStrat(Strategy[typing.Union]):
    def generate(self, rng, size, *ts):
        t = rng.choice(ts)
        return Strategy[t]().draw(rng, size)

    def shrink(self, value, *ts):
        if type(None) in ts and value is not None:
            yield None

        for t in ts:
            if isinstance(t, type) and t is not type(None) and isinstance(value, t):
                yield from Strategy[t]().simplify(value)
                return

if hasattr(types, 'UnionType'):
    register(types.UnionType, UnionStrat)
