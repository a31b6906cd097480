#!/usr/bin/env python3
'''Fixed-size cache backed by SQLite

* Values can be read by searching for their key
* The cache can be emptied on demand
* Once the maximum size is reached, the oldest written value is replaced
* Overwriting an entry, even with a changed value, keeps its position

The SQLite implementation below gets the last point wrong.
'''
import sqlite3

from lockstep import *

class Cache:
    def __init__(self, size):
        self.size = size
        self.conn = sqlite3.connect(':memory:')
        self.conn.execute('create table cache (id integer primary key, key integer unique, val integer)')

    def get(self, key):
        row = self.conn.execute('select val from cache where key = ?', (key,)).fetchone()
        return row[0] if row else None

    def set(self, key, val):
        with self.conn:
            # an overwrite is a delete then an insert, moving the entry to the newest position
            self.conn.execute('delete from cache where key = ?', (key,))

            count, = self.conn.execute('select count(*) from cache').fetchone()
            if count == self.size:
                self.conn.execute('delete from cache where id = (select min(id) from cache)')
            self.conn.execute('insert into cache (key, val) values (?, ?)', (key, val))

    def flush(self):
        with self.conn:
            self.conn.execute('delete from cache')

    def close(self):
        self.conn.close()

class CacheModel(Model):
    '''The cache as a list of (key, value) pairs, oldest first
    '''
    SIZE = 3
    _STATE = ()
    weights = {'set': 3, 'get': 3}

    def new_sut(self):
        return Cache(self.SIZE)

    def teardown(self, sut):
        sut.close()

    @command
    def get(sut, key: int):
        return sut.get(key)

    def get_args(self, state, rng, handles):
        # mostly known keys, to hit the cache
        keys = [k for k, _ in state]
        if keys and rng.random() < 0.75:
            return rng.choice(keys),
        return rng.randint(-5, 5),

    def get_next(self, state, args, var):
        key, = args
        return state, dict(state).get(key)

    @command
    def set(sut, key: int, val: int):
        sut.set(key, val)

    def set_args(self, state, rng, handles):
        return rng.randint(-5, 5), rng.randint(-100, 100)

    def set_next(self, state, args, var):
        key, val = args
        if any(k == key for k, _ in state):
            return tuple((k, val if k == key else v) for k, v in state), None

        state = state + ((key, val),)
        return state[-self.SIZE:], None

    @command
    def flush(sut):
        sut.flush()

    def flush_next(self, state, args, var):
        return (), None

if __name__ == '__main__':
    out = check(CacheModel, Config(max_length=40, num_trials=200))
