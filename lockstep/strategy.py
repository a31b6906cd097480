# strategy.py - Strategies for producing (and simplifying) arguments to model commands
import abc
import typing
import logging

from .error_types import MissingStrategyError, LockstepError
from . import utils

log = logging.getLogger('strategy')

__all__ = [
    'Strategy',
    'register',
    'has_strat_instance',
    'get_strat_instance',
    'implies',
    'UnsatisfiedImplication',
]

class UnsatisfiedImplication(LockstepError):
    pass

def has_strat_instance(t):
    try:
        Strategy.get_strat_instance(t)
        return True
    except MissingStrategyError:
        return False

def get_strat_instance(t):
    '''Gets the strategy class registered to some type 't'
    '''
    return Strategy.get_strat_instance(t)

def register(t, strategy, override=True):
    '''Register a :class:`Strategy` class for
    type 't'
    '''
    if t in StratMeta.__strats__ and not override:
        raise ValueError('a strategy for {} is already registered'.format(utils.pretty_type(t)))

    StratMeta.__strats__[t] = strategy

class StratMeta(abc.ABCMeta):
    '''Metaclass for a strategy
    handles setting up the LUT
    '''
    # global LUT of all strategies
    __strats__ = {}

    def __init__(self, *args, **kwargs):
        pass

    def __new__(mcls, name, bases, namespace, _subtype=None, autoregister=True):
        cls = super().__new__(mcls, name, bases, namespace)

        for base in bases:
            if getattr(base, '_subtype', None) is not None:
                cls._subtype = base._subtype

                if autoregister:
                    register(base._subtype, cls)

        if _subtype is not None:
            cls._subtype = _subtype

        return cls

    def __getitem__(self, t):
        try:
            return self.get_strat_instance(t)
        except MissingStrategyError:
            pass

        return self.new(t)

    def new(self, t):
        name = '{}[{}]'.format(self.__name__, utils.pretty_type(t))
        return type(self)(name, (self,), {}, _subtype=t, autoregister=False)

    def get_strat_instance(self, t):
        if t is None:
            t = type(None)

        # see if we have an instance for t, outright
        try:
            return StratMeta.__strats__[t]
        except KeyError:
            pass
        except TypeError:
            raise MissingStrategyError('Cannot get Strategy instance for unhashable ~{!r}'.format(t)) from None

        # for generic aliases break t up into its origin and parameters
        # and compose the origin's strategy with those parameters.
        # this allows generation of higher-kinded types such as List[~T]
        origin = typing.get_origin(t)
        if origin is None:
            raise MissingStrategyError('Cannot get Strategy instance for ~{}'.format(utils.pretty_type(t)))

        strat_origin = self.get_strat_instance(origin)
        params = typing.get_args(t)
        for p in params:
            if p is not Ellipsis:
                self.get_strat_instance(p)

        name = 'Generated_{}[{}]'.format(strat_origin.__name__, ', '.join(map(utils.pretty_type, params)))
        GenStrat = type(strat_origin)(name, (strat_origin,), {'_params': params}, autoregister=False)
        GenStrat.__module__ = strat_origin.__module__
        StratMeta.__strats__[t] = GenStrat
        return GenStrat

class Strategy(metaclass=StratMeta):
    '''A :class:`Strategy` is a method of generating random values of some type
    and of proposing simpler versions of a value it produced

    Parameterised strategies (List, Tuple, ...) receive their type parameters as `*params`
    '''
    _subtype = None
    _params = ()

    def __init__(self, *params):
        self.params = params or self._params

    @abc.abstractmethod
    def generate(self, rng, size, *params):
        '''Draw one value from the `random.Random` 'rng'

        'size' bounds the magnitude of the value
        '''

    def shrink(self, value, *params):
        '''Yield values simpler than 'value', simplest first
        '''
        yield from ()

    def draw(self, rng, size):
        return self.generate(rng, size, *self.params)

    def simplify(self, value):
        return self.shrink(value, *self.params)

    @property
    def name(self):
        return self.__class__.__qualname__

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, ', '.join(map(utils.pretty_type, self.params)))

def implies(f, t, tries=100):
    ''' f => t

    A new type whose values are the values of 't' for which 'f' holds
    '''
    impl_name = f.__name__
    t_pretty = utils.pretty_type(t)
    t_name = '{}->{}'.format(impl_name, t_pretty)
    t_new = type(t_name, (), {})
    base = get_strat_instance(t)

    class ImpliesStrat(Strategy[t_new]):
        def generate(self, rng, size):
            s = base()
            for _ in range(tries):
                v = s.draw(rng, size)
                if f(v):
                    return v

            raise UnsatisfiedImplication('{} found no value in {} tries'.format(t_name, tries))

        def shrink(self, value):
            for v in base().simplify(value):
                if f(v):
                    yield v

    ImpliesStrat.__name__ = t_name
    ImpliesStrat.__qualname__ = t_name
    return t_new
