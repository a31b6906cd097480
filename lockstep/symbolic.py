# symbolic.py - Symbolic handles for values produced by earlier commands
import string
import logging
import collections

from .error_types import UnresolvedReference

__all__ = [
    'Var',
    'Handles',
    'Environment',
    'references',
]

log = logging.getLogger('symbolic')
LETTERS = string.ascii_lowercase

def var_name(i):
    '''Short letter name for the i'th variable

    0 -> 'a', 25 -> 'z', 26 -> 'aa', ...
    '''
    name = ''
    i += 1
    while i > 0:
        i, r = divmod(i - 1, len(LETTERS))
        name = LETTERS[r] + name
    return name

class Var:
    '''A placeholder for the output of an earlier command

    Only the id and the static type are known at generation time,
    the concrete value is looked up in an :class:`Environment` during execution.
    '''
    __slots__ = ('_id', '_typ')

    def __init__(self, id, typ=None):
        self._id = id
        self._typ = typ

    @property
    def id(self):
        return self._id

    @property
    def typ(self):
        return self._typ

    @property
    def name(self):
        return var_name(self._id)

    def __eq__(self, other):
        if not isinstance(other, Var):
            return NotImplemented
        return self._id == other._id

    def __hash__(self):
        return hash(('Var', self._id))

    def __lt__(self, other):
        return self._id < other._id

    def __repr__(self):
        return 'Var({!r})'.format(self.name)

    def __str__(self):
        return self.name

def references(obj):
    '''All the :class:`Var`'s mentioned somewhere inside `obj`
    '''
    found = set()
    stack = [obj]
    while stack:
        o = stack.pop()
        if isinstance(o, Var):
            found.add(o)
        elif isinstance(o, dict):
            stack.extend(o.keys())
            stack.extend(o.values())
        elif isinstance(o, (tuple, list, set, frozenset)):
            stack.extend(o)
    return found

class Handles:
    '''Generation-time pool of the symbolic outputs produced so far,
    grouped by their static type
    '''
    def __init__(self):
        self._by_type = collections.defaultdict(list)
        self._count = 0

    def new(self, typ):
        '''Allocate a fresh Var of type `typ` and record it
        '''
        v = Var(self._count, typ)
        self._count += 1
        self._by_type[typ].append(v)
        return v

    def of(self, typ):
        return list(self._by_type.get(typ, ()))

    def has(self, typ):
        return bool(self._by_type.get(typ))

    def __len__(self):
        return self._count

    def __repr__(self):
        return 'Handles({})'.format(dict(self._by_type))

class Environment:
    '''Ordered mapping from symbolic handle to concrete value,
    owned by a single execution
    '''
    def __init__(self):
        self._values = collections.OrderedDict()

    def bind(self, var, value):
        log.debug('bind {} = {!r}'.format(var, value))
        self._values[var] = value

    def lookup(self, var):
        try:
            return self._values[var]
        except KeyError:
            raise UnresolvedReference(var) from None

    def resolve(self, obj):
        '''Substitute every Var inside `obj` with its concrete value
        '''
        if isinstance(obj, Var):
            return self.lookup(obj)
        elif isinstance(obj, tuple):
            if hasattr(obj, '_fields'):
                return type(obj)(*(self.resolve(o) for o in obj))
            return tuple(self.resolve(o) for o in obj)
        elif isinstance(obj, list):
            return [self.resolve(o) for o in obj]
        elif isinstance(obj, dict):
            return {self.resolve(k): self.resolve(v) for k, v in obj.items()}
        elif isinstance(obj, frozenset):
            return frozenset(self.resolve(o) for o in obj)
        elif isinstance(obj, set):
            return {self.resolve(o) for o in obj}
        return obj

    def __contains__(self, var):
        return var in self._values

    def __len__(self):
        return len(self._values)

    def items(self):
        return self._values.items()
