'''Marker types which select a narrower default strategy than their base type
'''

class Nat:
    '''Natural numbers 0, 1, 2, ...
    '''

class Neg:
    '''Negated naturals 0, -1, -2, ...
    '''
