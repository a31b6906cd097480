#!/usr/bin/env python3
from lockstep import *

class Files:
    '''An in-memory file table which hands out descriptors

    Closing a file gives its descriptor number back too eagerly,
    so a later open can reuse the descriptor of a file still open.
    '''
    def __init__(self):
        self.files = {}
        self.next_fd = 0

    def open(self):
        fd = self.next_fd
        self.next_fd += 1
        self.files[fd] = ''
        return fd

    def write(self, fd, data):
        self.files[fd] += data

    def read(self, fd):
        return self.files[fd]

    def close(self, fd):
        del self.files[fd]
        self.next_fd -= 1

class Fd:
    '''Handle type of an open file'''

class FilesModel(Model):
    # open handle -> contents
    _STATE = {}

    def new_sut(self):
        return Files()

    @command
    def open(sut) -> Fd:
        return sut.open()

    def open_next(self, state, args, var):
        state = dict(state)
        state[var] = ''
        return state, var

    @command
    def write(sut, fd: Fd, data: str):
        sut.write(fd, data)

    def write_pre(self, state):
        return bool(state)

    def write_args(self, state, rng, handles):
        return rng.choice(sorted(state)), Strategy[str]().draw(rng, 3)

    def write_valid(self, state, args):
        return args[0] in state

    def write_next(self, state, args, var):
        fd, data = args
        state = dict(state)
        state[fd] += data
        return state, None

    @command
    def read(sut, fd: Fd):
        return sut.read(fd)

    read_pre = write_pre
    read_valid = write_valid

    def read_args(self, state, rng, handles):
        return rng.choice(sorted(state)),

    def read_next(self, state, args, var):
        fd, = args
        return state, state[fd]

    @command
    def close(sut, fd: Fd):
        sut.close(fd)

    close_pre = write_pre
    close_valid = write_valid
    close_args = read_args

    def close_next(self, state, args, var):
        fd, = args
        state = dict(state)
        del state[fd]
        return state, None

if __name__ == '__main__':
    out = check(FilesModel, Config(max_length=30, num_trials=200))
