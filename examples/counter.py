#!/usr/bin/env python3
from lockstep import *

class Counter:
    '''A counter which should saturate at 10 but does not'''
    def __init__(self):
        self.n = 0

    def inc(self):
        self.n += 1
        return self.n

    def reset(self):
        self.n = 0

class CounterModel(Model):
    _STATE = 0

    def new_sut(self):
        return Counter()

    @command
    def inc(sut):
        return sut.inc()

    def inc_next(self, state, args, var):
        n = min(state + 1, 10)
        return n, n

    @command
    def reset(sut):
        sut.reset()

    def reset_pre(self, state):
        return state > 5

    def reset_next(self, state, args, var):
        return 0, None

if __name__ == '__main__':
    out = check(CounterModel, Config(max_length=50, weights={'inc': 4}))
