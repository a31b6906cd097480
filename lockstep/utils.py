import typing

from .symbolic import Var

def pretty_type(t):
    '''Pretty string of some type
    '''
    if t is None or t is type(None):
        return 'None'

    if t is Ellipsis:
        return '...'

    origin = typing.get_origin(t)
    args = typing.get_args(t)
    if origin is not None and args:
        name = getattr(origin, '__name__', None) or getattr(origin, '_name', None) or str(origin)
        return '{}[{}]'.format(name, ', '.join(map(pretty_type, args)))

    try:
        return t.__name__
    except AttributeError:
        return str(t)

def pretty_value(v):
    '''repr() for values, letter names for symbolic handles
    '''
    if isinstance(v, Var):
        return str(v)
    elif isinstance(v, tuple) and not hasattr(v, '_fields'):
        inner = ', '.join(map(pretty_value, v))
        return '({},)'.format(inner) if len(v) == 1 else '({})'.format(inner)
    elif isinstance(v, list):
        return '[{}]'.format(', '.join(map(pretty_value, v)))
    return repr(v)
