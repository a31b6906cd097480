# model.py - Definition of a Model and of the commands run against it
import abc
import copy
import inspect
import itertools
import logging
import contextlib

from . import utils
from .symbolic import Var, references
from .strategy import Strategy, has_strat_instance
from .error_types import MissingStrategyError

__all__ = [
    'Command',
    'FunctionCommand',
    'Model',
    'Partial',
    'Partials',
    'command',
]

log = logging.getLogger('model')

# bound on the argument tuples tried before a command is skipped for a step
ARG_TRIES = 100

class Command(abc.ABC):
    '''One kind of operation the system-under-test supports

    Only `apply_model` may change the model state (by returning a new one)
    and only `run_sut` may touch the system-under-test.
    '''
    weight = 1
    returns = None
    tolerates = ()

    def __init__(self, name=None, weight=None):
        self.name = name or self.__class__.__name__
        if weight is not None:
            self.weight = weight

    def bind(self, model):
        '''This command as used by 'model'
        '''
        return self

    def precondition(self, state):
        return True

    def valid_args(self, state, args):
        '''Argument-aware part of the precondition,
        re-checked whenever a shrunk sequence is validated
        '''
        return True

    def applicable(self, state, handles):
        return self.precondition(state)

    @abc.abstractmethod
    def generate_args(self, state, rng, handles, size):
        '''Tuple of arguments, concrete values or :class:`Var`'s from `handles`
        '''

    def draw_args(self, state, rng, handles, size, tries=ARG_TRIES):
        '''Arguments from `generate_args` which `valid_args` accepts,
        or None when 'tries' draws found none
        '''
        for _ in range(tries):
            args = tuple(self.generate_args(state, rng, handles, size))
            if self.valid_args(state, args):
                return args

        return None

    def apply_model(self, state, args, var):
        '''Returns `(new_state, prediction)`

        'var' is the handle allocated for this step's output, or None
        '''
        return state, None

    @abc.abstractmethod
    def run_sut(self, sut, args):
        pass

    def postcondition(self, state, new_state, prediction, result):
        return prediction == result

    def shrink_args(self, args):
        '''Yield simpler argument tuples
        '''
        yield from ()

    def format_args(self, args):
        return ', '.join(map(utils.pretty_value, args))

    def __repr__(self):
        return self.name

class FunctionCommand(Command):
    '''An @property like :class:`Command`
    It acts like @property except instead of getter and setter
    it has pre, post, next, args and valid for handling state transitions
    and validating current states.

    The wrapped function is the SUT call, its first parameter is the SUT,
    the rest are annotated with the types of the command's arguments.
    A parameter whose type has no registered strategy is filled with a
    handle produced by an earlier command returning that type.

    Hooks are called with the model instance first::

        fpre(model, state) -> bool
        fargs(model, state, rng, handles) -> args
        fnext(model, state, args, var) -> (new_state, prediction)
        fpost(model, state, new_state, prediction, result) -> bool
        fvalid(model, state, args) -> bool
    '''
    def __init__(self, fdo, fpre=None, fpost=None, fnext=None, fargs=None, fvalid=None,
                 fname=None, weight=1, tolerates=()):
        self.fdo = fdo
        self.fpre = fpre
        self.fpost = fpost
        self.fnext = fnext
        self.fargs = fargs
        self.fvalid = fvalid
        self.model = None
        self.tolerates = tuple(tolerates)
        super().__init__(fname or fdo.__name__, weight)

        params = list(inspect.signature(fdo).parameters.values())
        if not params:
            raise TypeError('command {} must take the system-under-test as its first parameter'.format(self.name))

        self.parameters = params[1:]
        rt = inspect.signature(fdo).return_annotation
        self.returns = None if rt is inspect.Signature.empty else rt

    def _copy(self, **kws):
        c = copy.copy(self)
        for k, v in kws.items():
            setattr(c, k, v)
        return c

    def pre(self, f):
        '''Precondition for this :class:`Command`
        '''
        return self._copy(fpre=f)

    def post(self, f):
        return self._copy(fpost=f)

    def next(self, f):
        return self._copy(fnext=f)

    def args(self, f):
        return self._copy(fargs=f)

    def valid(self, f):
        return self._copy(fvalid=f)

    def bind(self, model):
        return self._copy(model=model)

    @property
    def param_types(self):
        for p in self.parameters:
            yield p.annotation

    @property
    def handle_types(self):
        '''The parameter types filled with handles rather than generated values
        '''
        return [t for t in self.param_types
                if t is not inspect.Parameter.empty and not has_strat_instance(t)]

    def precondition(self, state):
        if self.fpre is None:
            return True

        try:
            # a precondition can just be `pass` which is not a failure case
            return self.fpre(self.model, state) is not False
        except AssertionError as e:
            log.debug('{} precondition: {}'.format(self.name, e))
            return False

    def valid_args(self, state, args):
        if self.fvalid is None:
            return True

        try:
            return self.fvalid(self.model, state, args) is not False
        except AssertionError:
            return False

    def applicable(self, state, handles):
        if not self.precondition(state):
            return False

        if self.fargs is not None:
            return True

        return all(handles.has(t) for t in self.handle_types)

    def _pools(self, rng, handles, size):
        '''Per parameter, the values to pick from: one drawn value,
        or every handle of the parameter's type in random order
        '''
        pools = []
        for p in self.parameters:
            t = p.annotation
            if t is inspect.Parameter.empty:
                raise MissingStrategyError('parameter {!r} of {} has no annotation'.format(p.name, self.name))

            if has_strat_instance(t):
                pools.append([Strategy[t]().draw(rng, size)])
            else:
                hs = handles.of(t)
                rng.shuffle(hs)
                pools.append(hs)

        return pools

    def generate_args(self, state, rng, handles, size):
        if self.fargs is not None:
            return tuple(self.fargs(self.model, state, rng, handles))

        return tuple(pool[0] for pool in self._pools(rng, handles, size))

    def draw_args(self, state, rng, handles, size, tries=ARG_TRIES):
        if self.fargs is not None or not self.handle_types:
            return super().draw_args(state, rng, handles, size, tries)

        # search the combinations of handles for one `valid_args` accepts,
        # redrawing the other values once they are used up
        checked = 0
        while checked < tries:
            pools = self._pools(rng, handles, size)
            if not all(pools):
                return None

            for args in itertools.product(*pools):
                if self.valid_args(state, args):
                    return args

                checked += 1
                if checked >= tries:
                    break

        return None

    def apply_model(self, state, args, var):
        if self.fnext is None:
            return state, None

        return self.fnext(self.model, state, args, var)

    def run_sut(self, sut, args):
        return self.fdo(sut, *args)

    def postcondition(self, state, new_state, prediction, result):
        if self.fpost is None:
            return prediction == result

        # as with preconditions can just `pass`
        return self.fpost(self.model, state, new_state, prediction, result) is not False

    def shrink_args(self, args):
        for i, (t, a) in enumerate(zip(self.param_types, args)):
            if isinstance(a, Var) or not has_strat_instance(t):
                continue

            for b in Strategy[t]().simplify(a):
                yield args[:i] + (b,) + args[i + 1:]

    def format_args(self, args):
        names = [p.name for p in self.parameters]
        if len(names) != len(args):
            return super().format_args(args)

        return ', '.join('{}={}'.format(n, utils.pretty_value(a)) for n, a in zip(names, args))

    def __get__(self, obj, objtype=None):
        '''Getting a Command from a model instance is looking up its `fdo` function
        '''
        if obj is None:
            return self
        return self.fdo

def command(f=None, *, weight=1, tolerates=()):
    '''Decorator to make the function a :class:`Command`.

    Allowing easy definition of pre- and post- conditions as well as
    state transitions in a stateful model.

    Usable bare (`@command`) or with options (`@command(weight=3, tolerates=(KeyError,))`).
    '''
    def decorator(f):
        return FunctionCommand(f, weight=weight, tolerates=tolerates)

    if f is None:
        return decorator
    return decorator(f)

class Partial:
    '''A :class:`Command` applied to arguments, one step of a sequence

    'var' is the handle standing for this step's output, or None
    '''
    __slots__ = ('command', 'args', 'var')

    def __init__(self, command, args, var=None):
        self.command = command
        self.args = tuple(args)
        self.var = var

    @property
    def references(self):
        return references(self.args)

    def replace(self, args):
        return Partial(self.command, args, self.var)

    def __eq__(self, other):
        if not isinstance(other, Partial):
            return NotImplemented
        return (self.command.name, self.args, self.var) == (other.command.name, other.args, other.var)

    def __hash__(self):
        return hash((self.command.name, self.var))

    def __str__(self):
        return '{}({})'.format(self.command.name, self.command.format_args(self.args))

    def __repr__(self):
        argstr = ', '.join([repr(self.command), repr(self.args), repr(self.var)])
        return '%s(%s)' % (self.__class__.__name__, argstr)

class Partials:
    '''An immutable sequence of :class:`Partial`'s

    Every handle a step refers to is produced by a strictly earlier step.
    '''
    def __init__(self, partials=()):
        self._partials = tuple(partials)

    def produced(self):
        return {p.var for p in self._partials if p.var is not None}

    def referenced(self):
        refs = set()
        for p in self._partials:
            refs |= p.references
        return refs

    def is_well_scoped(self):
        available = set()
        for p in self._partials:
            if not p.references <= available:
                return False

            if p.var is not None:
                available.add(p.var)
        return True

    def without(self, indices):
        '''A copy with the steps at 'indices' removed,
        along with every step left referring to a handle nobody produces any more
        '''
        indices = set(indices)
        available = set()
        kept = []
        for i, p in enumerate(self._partials):
            if i in indices or not p.references <= available:
                continue

            kept.append(p)
            if p.var is not None:
                available.add(p.var)
        return Partials(kept)

    def with_args(self, i, args):
        ps = list(self._partials)
        ps[i] = ps[i].replace(args)
        return Partials(ps)

    def truncate(self, index):
        '''The prefix up to and including 'index'
        '''
        return Partials(self._partials[:index + 1])

    def lines(self):
        named = self.referenced()
        for p in self._partials:
            if p.var is not None and p.var in named:
                yield '{} = {}'.format(p.var, p)
            else:
                yield str(p)

    @property
    def pretty(self):
        if not self._partials:
            return '<empty>'

        return '\n> '.join(self.lines())

    def __len__(self):
        return len(self._partials)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return Partials(self._partials[i])
        return self._partials[i]

    def __iter__(self):
        return iter(self._partials)

    def __eq__(self, other):
        if not isinstance(other, Partials):
            return NotImplemented
        return self._partials == other._partials

    def __hash__(self):
        return hash(self._partials)

    def __str__(self):
        if not self._partials:
            return '<empty>'
        return '; '.join(self.lines())

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, list(self._partials))

HOOKS = ('pre', 'post', 'next', 'args', 'valid')

def _hooks(namespace, name):
    hooks = {}
    for hook in HOOKS:
        f = namespace.get('{}_{}'.format(name, hook))
        if f is not None:
            hooks['f' + hook] = f
    return hooks

class ModelMeta(abc.ABCMeta):
    '''Metaclass of a :class:`Model`
    collects all the Command's up into a tuple to be accessed later
    '''
    def __new__(mcls, name, bases, namespace):
        cmds = {}
        for base in reversed(bases):
            for c in getattr(base, '__modelcommands__', ()):
                cmds[c.name] = c

        # hooks redefined in a subclass replace those of the inherited command
        for c in list(cmds.values()):
            if isinstance(c, FunctionCommand):
                hooks = _hooks(namespace, c.name)
                if hooks:
                    cmds[c.name] = c._copy(**hooks)

        for attr_name, value in namespace.items():
            if isinstance(value, FunctionCommand):
                # look for _pre, _post, _next, _args and _valid methods
                hooks = {k: f for k, f in _hooks(namespace, attr_name).items() if getattr(value, k) is None}
                value = value._copy(**hooks)
                namespace[attr_name] = value
                cmds[value.name] = value
            elif isinstance(value, Command):
                if value.name == value.__class__.__name__:
                    value.name = attr_name
                cmds[value.name] = value

        cls = super().__new__(mcls, name, bases, namespace)
        cls.__modelcommands__ = tuple(sorted(cmds.values(), key=lambda c: c.name))
        return cls

class Model(metaclass=ModelMeta):
    '''A :class:`Model` is some state-machine model of
    some arbitrary API

    Subclasses provide the initial state (`_STATE`, or override `initial_state`)
    and a way to build and tear down the system-under-test.
    '''
    _STATE = None
    weights = {}

    def initial_state(self):
        return copy.deepcopy(self._STATE)

    def new_sut(self):
        raise NotImplementedError('{} does not construct a system-under-test'.format(type(self).__name__))

    def teardown(self, sut):
        pass

    def commands(self):
        try:
            return self._bound_commands
        except AttributeError:
            self._bound_commands = [c.bind(self) for c in type(self).__modelcommands__]
            return self._bound_commands

    @contextlib.contextmanager
    def system(self):
        '''Scoped system-under-test, torn down on every exit path
        '''
        sut = self.new_sut()
        try:
            yield sut
        finally:
            self.teardown(sut)
