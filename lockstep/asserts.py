'''unittest style assertions for use inside postconditions

A postcondition may return a bool or fail through one of these,
the failure message is kept on the resulting divergence.
'''

from .error_types import Raised

__all__ = [
    'assertTrue',
    'assertFalse',
    'assertThat',
    'assertEqual',
    'assertNotEqual',
    'assertIs',
    'assertIsNot',
    'assertIsInstance',
    'assertIsNotInstance',
    'assertIn',
    'assertNotIn',
    'assertRaised',
]

def _assert(p, fail_m='_assert'):
    if not p:
        raise AssertionError(fail_m)

    return True

def assertThat(f, *args, fmt_fail='{name}({argv}) is false'):
    s_args = ', '.join(map(repr, args))

    try:
        name = f.__code__.co_name
    except AttributeError:
        name = str(f)

    return _assert(f(*args), fmt_fail.format(argv=s_args, name=name))

def assertTrue(a, fmt_fail='False'):
    return _assert(a, fmt_fail.format(a=a))

def assertFalse(a, fmt_fail='True'):
    return _assert(not a, fmt_fail.format(a=a))

def assertEqual(a, b, fmt_fail='{a!r} != {b!r}'):
    return _assert(a == b, fmt_fail.format(a=a, b=b))

def assertIs(a, b, fmt_fail='{a!r} is not {b!r}'):
    return _assert(a is b, fmt_fail.format(a=a, b=b))

def assertNotEqual(a, b, fmt_fail='{a!r} == {b!r}'):
    return _assert(a != b, fmt_fail.format(a=a, b=b))

def assertIsNot(a, b, fmt_fail='{a!r} is {b!r}'):
    return _assert(a is not b, fmt_fail.format(a=a, b=b))

def assertIsNotInstance(a, b, fmt_fail='isinstance({a!r}, {b})'):
    return _assert(not isinstance(a, b), fmt_fail.format(a=a, b=b))

def assertIsInstance(a, b, fmt_fail='not isinstance({a!r}, {b})'):
    return _assert(isinstance(a, b), fmt_fail.format(a=a, b=b))

def assertIn(a, b, fmt_fail='{a!r} not in {b!r}'):
    return _assert(a in b, fmt_fail.format(a=a, b=b))

def assertNotIn(a, b, fmt_fail='{a!r} in {b!r}'):
    return _assert(a not in b, fmt_fail.format(a=a, b=b))

def assertRaised(result, exc_type, fmt_fail='expected {t.__name__} to be raised, got {r!r}'):
    '''`result` is what a command returned, a tolerated exception shows up as a `Raised`
    '''
    ok = isinstance(result, Raised) and isinstance(result.exception, exc_type)
    return _assert(ok, fmt_fail.format(t=exc_type, r=result))
