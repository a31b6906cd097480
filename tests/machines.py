'''Models shared by the tests
'''
import time

from lockstep import *

class Counter:
    def __init__(self, cap=None):
        self.n = 0
        self.cap = cap

    def inc(self):
        self.n += 1
        if self.cap is not None:
            self.n = min(self.n, self.cap)
        return self.n

    def reset(self):
        self.n = 0

class CounterModel(Model):
    '''Saturates at 10, the counter it is run against does not
    '''
    _STATE = 0
    cap = None

    def new_sut(self):
        return Counter(self.cap)

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

class CappedCounterModel(CounterModel):
    cap = 10

class ResetOnlyModel(Model):
    _STATE = False

    def new_sut(self):
        return Counter()

    @command
    def reset(sut):
        sut.reset()

    def reset_pre(self, state):
        return not state

    def reset_next(self, state, args, var):
        return True, None

class Files:
    '''Reuses the descriptor of a file still open after a close
    '''
    def __init__(self):
        self.files = {}
        self.next_fd = 0
        self.closed = False

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
    pass

class FilesModel(Model):
    _STATE = {}

    def new_sut(self):
        return Files()

    def teardown(self, sut):
        sut.closed = True

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

class Stack:
    def __init__(self):
        self.items = []

    def push(self, v):
        self.items.append(v)

    def pop(self):
        return self.items.pop()

class StackModel(Model):
    '''pop on an empty stack raises IndexError, which the model expects
    '''
    _STATE = ()

    def new_sut(self):
        return Stack()

    @command
    def push(sut, v: int):
        sut.push(v)

    def push_next(self, state, args, var):
        v, = args
        return state + (v,), None

    @command(tolerates=(IndexError,))
    def pop(sut):
        return sut.pop()

    def pop_next(self, state, args, var):
        if not state:
            return state, None
        return state[:-1], state[-1]

    def pop_post(self, state, new_state, prediction, result):
        if not state:
            return assertRaised(result, IndexError)
        return assertEqual(result, prediction)

class IntolerantStackModel(StackModel):
    '''pop is allowed on an empty stack but nobody expects the IndexError
    '''
    @command
    def pop(sut):
        return sut.pop()

    def pop_next(self, state, args, var):
        return state[:-1], state[-1] if state else None

class Sleepy:
    def __init__(self):
        self.n = 0

    def step(self):
        self.n += 1
        if self.n >= 3:
            time.sleep(0.5)
        return self.n

class SleepyModel(Model):
    '''The third step never returns in time
    '''
    _STATE = 0

    def new_sut(self):
        return Sleepy()

    @command
    def step(sut):
        return sut.step()

    def step_next(self, state, args, var):
        return state + 1, state + 1

TARGET = 3

class Up(Command):
    def generate_args(self, state, rng, handles, size):
        return rng.randint(0, size),

    def apply_model(self, state, args, var):
        return state + 1, args[0]

    def run_sut(self, sut, args):
        return args[0]

    def postcondition(self, state, new_state, prediction, result):
        return new_state != TARGET

    def shrink_args(self, args):
        for t in Strategy[Nat]().simplify(args[0]):
            yield t,

class Down(Command):
    def generate_args(self, state, rng, handles, size):
        return ()

    def apply_model(self, state, args, var):
        return state, 0

    def run_sut(self, sut, args):
        return 0

class PlanModel(Model):
    '''Fails as soon as TARGET `up`'s have been run
    '''
    _STATE = 0
    up = Up()
    down = Down()

    def new_sut(self):
        return None

def plan(model, *steps):
    '''Partials from ('up', tag) / ('down',) tuples
    '''
    cmds = {c.name: c for c in model.commands()}
    return Partials(Partial(cmds[name], args) for name, *args in steps)

class Descriptors:
    '''A correct descriptor table, closing twice raises KeyError
    '''
    def __init__(self):
        self.open = set()
        self.next_fd = 0

    def open_fd(self):
        fd = self.next_fd
        self.next_fd += 1
        self.open.add(fd)
        return fd

    def close(self, fd):
        self.open.remove(fd)

class DescriptorsModel(Model):
    '''Handles filled in by the engine, only `_valid` keeps closed ones out
    '''
    _STATE = frozenset()

    def new_sut(self):
        return Descriptors()

    @command
    def open(sut) -> Fd:
        return sut.open_fd()

    def open_next(self, state, args, var):
        return state | {var}, var

    @command(weight=3)
    def close(sut, fd: Fd):
        sut.close(fd)

    def close_pre(self, state):
        return bool(state)

    def close_valid(self, state, args):
        return args[0] in state

    def close_next(self, state, args, var):
        fd, = args
        return state - {fd}, None
