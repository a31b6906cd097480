import abc

from .error_types import CounterexampleFound

__all__ = [
    'Outcome',
    'Success',
    'Failure',
    'Counterexample',
    'GenerationFailure',
]

class Outcome(abc.ABC):
    '''Result of running a model

    'seed' is the master seed of the run, 'trials' how many trials were started
    '''
    def __init__(self, model, seed, trials):
        self.model = model
        self.seed = seed
        self.trials = trials

    @property
    @abc.abstractmethod
    def reason(self):
        '''Reason for Outcome

        The divergence or error behind a failure, or None
        '''

    def summary(self):
        return '{} after {} trial(s) of {} (seed {})'.format(
            self.__class__.__name__, self.trials, type(self.model).__name__, self.seed)

    def raise_for_failure(self):
        pass

    def __bool__(self):
        return isinstance(self, Success)

    def __repr__(self):
        return '<%s(%s, %r)>' % (self.__class__.__name__, type(self.model).__name__, self.reason)

class Success(Outcome):
    @property
    def reason(self):
        return None

class Failure(Outcome):
    def __init__(self, model, seed, trials, trial_seed):
        super().__init__(model, seed, trials)
        self.trial_seed = trial_seed

class Counterexample(Failure):
    '''The model and the system-under-test diverged

    'original' is the divergence of the generated sequence,
    'shrunk' the :class:`ShrinkResult` found from it.
    '''
    def __init__(self, model, seed, trials, trial_seed, original, shrunk):
        super().__init__(model, seed, trials, trial_seed)
        self.original = original
        self.shrunk = shrunk

    @property
    def reason(self):
        return self.shrunk.divergence

    @property
    def kind(self):
        return self.shrunk.divergence.kind

    @property
    def partials(self):
        return self.shrunk.partials

    def summary(self):
        return '{}: {} (replay with trial seed {})'.format(
            super().summary(), self.shrunk.divergence.describe(), self.trial_seed)

    def raise_for_failure(self):
        raise CounterexampleFound(self)

class GenerationFailure(Failure):
    '''No sequence of the requested shape could be generated

    A problem with the model's preconditions, not a bug in the system-under-test.
    '''
    def __init__(self, model, seed, trials, trial_seed, error):
        super().__init__(model, seed, trials, trial_seed)
        self.error = error

    @property
    def reason(self):
        return self.error

    def summary(self):
        return '{}: {}'.format(super().summary(), self.error)

    def raise_for_failure(self):
        raise self.error
