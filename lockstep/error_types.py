class LockstepError(Exception):
    pass

class MissingStrategyError(LockstepError):
    pass

class NoApplicableCommand(LockstepError):
    '''No command's precondition holds in the current model state
    '''
    def __init__(self, step, state):
        super().__init__('no applicable command at step {} (model state: {!r})'.format(step, state))
        self.step = step
        self.state = state

class UnresolvedReference(LockstepError):
    def __init__(self, var):
        super().__init__('symbolic value {} has no binding'.format(var))
        self.var = var

class InvalidCandidate(LockstepError):
    pass

class CounterexampleFound(AssertionError):
    def __init__(self, outcome):
        super().__init__(outcome.summary())
        self.outcome = outcome

class Raised:
    '''The result of a SUT call which raised an exception the command tolerates
    '''
    def __init__(self, exception):
        self.exception = exception

    def __eq__(self, other):
        if not isinstance(other, Raised):
            return NotImplemented
        return (type(self.exception) is type(other.exception)
                and self.exception.args == other.exception.args)

    def __hash__(self):
        return hash((type(self.exception), self.exception.args))

    def __repr__(self):
        return 'Raised({!r})'.format(self.exception)
