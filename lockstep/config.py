import attr

def _non_negative(instance, attribute, value):
    if value < 0:
        raise ValueError('{} must be non-negative, got {}'.format(attribute.name, value))

def _positive(instance, attribute, value):
    if value is not None and value <= 0:
        raise ValueError('{} must be positive, got {}'.format(attribute.name, value))

@attr.s
class Config:
    '''Configuration for a test run

    Settings:
    - min_length, max_length: int
        bounds (inclusive) on the length of generated command sequences
    - num_trials: int
        how many independent sequences to try
    - seed: int or None
        fixes the master random seed, one is drawn (and reported) when None
    - per_command_timeout: float or None
        seconds a single SUT call may take before the trial fails with a timeout
    - shrink_commands: bool
        once the sequence is locally minimal also simplify each command's arguments
    - max_shrink_iters: int
        bound on candidate executions while shrinking
    - size: int
        bound on the size of generated argument values
    - weights: dict
        command name -> weight, overriding the commands' own weights
    - graphviz: bool
        When True renders the counterexample's dataflow graph to `graphviz_file`
    '''
    min_length = attr.ib(default=1, validator=_non_negative)
    max_length = attr.ib(default=100)
    num_trials = attr.ib(default=100, validator=_positive)
    seed = attr.ib(default=None)
    per_command_timeout = attr.ib(default=None, validator=_positive)
    shrink_commands = attr.ib(default=True)
    max_shrink_iters = attr.ib(default=10000, validator=_positive)
    size = attr.ib(default=30, validator=_non_negative)
    weights = attr.ib(default=attr.Factory(dict))
    graphviz = attr.ib(default=False)
    graphviz_file = attr.ib(default='counterexample.gv')

    @max_length.validator
    def _check_max_length(self, attribute, value):
        if value < self.min_length:
            raise ValueError('max_length ({}) is less than min_length ({})'.format(value, self.min_length))
