# executor.py - Lockstep replay of a command sequence against the model and the SUT
import enum
import logging
import threading

import attr

from . import utils
from .symbolic import Environment, references
from .error_types import Raised

__all__ = [
    'DivergenceKind',
    'Divergence',
    'Execution',
    'Step',
    'stuck_calls',
    'execute',
    'validate',
]

log = logging.getLogger('executor')

class DivergenceKind(enum.Enum):
    POSTCONDITION = 'postcondition'
    SUT_ERROR = 'sut-error'
    TIMEOUT = 'timeout'

    def __str__(self):
        return self.value

@attr.s
class Step:
    '''One executed command: its concrete arguments, what the model predicted
    and what the system-under-test did
    '''
    partial = attr.ib()
    args = attr.ib()
    expected = attr.ib()
    actual = attr.ib()

    def __str__(self):
        call = '{}({})'.format(self.partial.command.name, self.partial.command.format_args(self.args))
        if self.partial.var is not None:
            call = '{} = {}'.format(self.partial.var, call)
        return '{} -> {} (expected {})'.format(
            call, utils.pretty_value(self.actual), utils.pretty_value(self.expected))

@attr.s
class Divergence:
    '''Where and how the model and the system-under-test disagreed

    'partials' is the sequence executed, up to and including 'index'
    '''
    index = attr.ib()
    kind = attr.ib()
    expected = attr.ib()
    actual = attr.ib()
    message = attr.ib()
    partials = attr.ib()
    trace = attr.ib(default=attr.Factory(list))

    @property
    def command(self):
        return self.partials[self.index].command

    def describe(self):
        return '{} at step {} ({}): {}'.format(self.kind, self.index, self.command.name, self.message)

@attr.s
class Execution:
    trace = attr.ib(default=attr.Factory(list))
    divergence = attr.ib(default=None)

    @property
    def ok(self):
        return self.divergence is None

class CommandTimeout(Exception):
    pass

# worker threads of timed out calls, which Python cannot stop
_stuck = []

def stuck_calls():
    '''Number of timed out SUT calls still running in the background
    '''
    _stuck[:] = [t for t in _stuck if t.is_alive()]
    return len(_stuck)

def validate(model, partials):
    '''Whether 'partials' could have been generated:
    references only point backwards and every precondition holds when replayed on the model
    '''
    if not partials.is_well_scoped():
        log.debug('* validate: dangling reference in {}'.format(partials))
        return False

    state = model.initial_state()
    for i, p in enumerate(partials):
        cmd = p.command
        if not cmd.precondition(state) or not cmd.valid_args(state, p.args):
            log.debug('* validate: precondition of step {} ({}) fails'.format(i, p))
            return False

        state, _ = cmd.apply_model(state, p.args, p.var)

    return True

def _call(cmd, sut, args, timeout):
    if timeout is None:
        return cmd.run_sut(sut, args)

    box = {}

    def target():
        try:
            box['result'] = cmd.run_sut(sut, args)
        except BaseException as e:
            box['error'] = e

    t = threading.Thread(target=target, name='lockstep-{}'.format(cmd.name), daemon=True)
    t.start()
    t.join(timeout)
    if t.is_alive():
        _stuck.append(t)
        log.warning('{} timed out, {} call(s) still running in the background'.format(cmd.name, stuck_calls()))
        raise CommandTimeout('{} did not return within {}s'.format(cmd.name, timeout))

    if 'error' in box:
        raise box['error']
    return box['result']

def _expected(env, prediction):
    # a prediction may name this step's own output, unbound when the call never returned
    if all(v in env for v in references(prediction)):
        return env.resolve(prediction)
    return prediction

def execute(model, partials, timeout=None):
    '''Run 'partials' on a fresh model state and a fresh system-under-test,
    halting at the first divergence

    An unresolvable handle raises :class:`UnresolvedReference`: it means the
    sequence was never valid, which is an engine bug rather than a test failure.
    '''
    env = Environment()
    state = model.initial_state()
    trace = []

    def diverge(i, kind, expected, actual, message):
        log.info('* divergence ({}) at step {}: {}'.format(kind, i, message))
        d = Divergence(i, kind, expected, actual, message, partials.truncate(i), trace)
        return Execution(trace, d)

    with model.system() as sut:
        for i, p in enumerate(partials):
            cmd = p.command
            args = env.resolve(p.args)
            new_state, prediction = cmd.apply_model(state, p.args, p.var)
            log.debug('execute {}: {}'.format(i, p))

            try:
                result = _call(cmd, sut, args, timeout)
            except CommandTimeout as e:
                expected = _expected(env, prediction)
                trace.append(Step(p, args, expected, None))
                return diverge(i, DivergenceKind.TIMEOUT, expected, None, str(e))
            except Exception as e:
                if not isinstance(e, cmd.tolerates):
                    expected = _expected(env, prediction)
                    trace.append(Step(p, args, expected, Raised(e)))
                    return diverge(i, DivergenceKind.SUT_ERROR, expected, Raised(e),
                                   '{} raised {!r}'.format(cmd.name, e))
                result = Raised(e)

            if p.var is not None:
                env.bind(p.var, result)

            expected = env.resolve(prediction)
            trace.append(Step(p, args, expected, result))

            try:
                ok = cmd.postcondition(state, new_state, expected, result)
                message = 'postcondition of {} does not hold: expected {}, got {}'.format(
                    cmd.name, utils.pretty_value(expected), utils.pretty_value(result))
            except AssertionError as e:
                ok = False
                message = 'postcondition of {}: {}'.format(cmd.name, e)

            if not ok:
                return diverge(i, DivergenceKind.POSTCONDITION, expected, result, message)

            state = new_state

    return Execution(trace)
