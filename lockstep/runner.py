import sys
import random
import logging

from . import grapher
from .config import Config
from .executor import execute
from .generator import generate
from .shrinker import shrink
from .outcomes import Success, Counterexample, GenerationFailure
from .error_types import NoApplicableCommand

__all__ = [
    'run',
    'replay',
    'check',
]

log = logging.getLogger('runner')

def _instance(model):
    if isinstance(model, type):
        return model()
    return model

def _master_seed(config):
    if config.seed is not None:
        return config.seed

    return random.SystemRandom().getrandbits(64)

def run_trial(model, trial_seed, config):
    '''Generate and execute the sequence of the trial identified by 'trial_seed'
    '''
    rng = random.Random(trial_seed)
    length = rng.randint(config.min_length, config.max_length)
    partials = generate(model, rng, length, config.size, config.weights)
    log.debug('trial {}: {} commands'.format(trial_seed, len(partials)))
    return partials, execute(model, partials, config.per_command_timeout)

def _trial(model, seed, trial, trial_seed, config):
    try:
        partials, execution = run_trial(model, trial_seed, config)
    except NoApplicableCommand as e:
        log.error('trial {} (seed {}): {}'.format(trial, trial_seed, e))
        return GenerationFailure(model, seed, trial + 1, trial_seed, e)

    if execution.ok:
        return None

    original = execution.divergence
    log.info('trial {} (seed {}) failed after {} of {} commands, shrinking'.format(
        trial, trial_seed, original.index + 1, len(partials)))
    result = shrink(model, original, config)
    log.info('shrunk to {} commands in {} attempts'.format(len(result.partials), result.attempts))
    return Counterexample(model, seed, trial + 1, trial_seed, original, result)

def run(model, config=None, progress=None):
    '''Run up to `config.num_trials` trials of 'model'

    Returns the first failure found (shrunk), or :class:`Success`.
    'progress' is called with the trial number after each passing trial.
    '''
    model = _instance(model)
    config = config or Config()
    seed = _master_seed(config)
    master = random.Random(seed)
    log.info('running {} with seed {}'.format(type(model).__name__, seed))

    for trial in range(config.num_trials):
        trial_seed = master.getrandbits(64)
        outcome = _trial(model, seed, trial, trial_seed, config)
        if outcome is not None:
            return outcome

        if progress is not None:
            progress(trial)

    return Success(model, seed, config.num_trials)

def replay(model, trial_seed, config=None):
    '''Re-run the single trial identified by 'trial_seed'
    '''
    model = _instance(model)
    config = config or Config()
    outcome = _trial(model, config.seed, 0, trial_seed, config)
    return outcome if outcome is not None else Success(model, config.seed, 1)

def _print_partials(title, partials, trace, outfile):
    outfile.write(' {}:\n'.format(title))
    for i, p in enumerate(partials):
        if i < len(trace):
            outfile.write(' > {}\n'.format(trace[i]))
        else:
            outfile.write(' > {}\n'.format(p))

def _print_failure(outcome, outfile):
    outfile.write('=' * 80 + '\n')
    outfile.write('Failure\n')
    outfile.write('After {} trial(s), seed {}\n'.format(outcome.trials, outcome.seed))
    outfile.write('In model `{}`\n'.format(type(outcome.model).__name__))
    outfile.write('Replay with trial seed {}\n'.format(outcome.trial_seed))
    outfile.write('\n')

    if isinstance(outcome, GenerationFailure):
        outfile.write(' could not generate a sequence (model problem, not a SUT bug):\n')
        outfile.write(' {}\n'.format(outcome.error))
    else:
        original, shrunk = outcome.original, outcome.shrunk
        outfile.write(' original ({} commands):\n'.format(len(original.partials)))
        outfile.write(' > {}\n'.format(original.partials.pretty))
        outfile.write('\n')
        _print_partials('counterexample ({} commands)'.format(len(shrunk.partials)),
                        shrunk.partials, shrunk.divergence.trace, outfile)
        outfile.write('\n')
        outfile.write(' failure reason: {}\n'.format(shrunk.divergence.describe()))
        outfile.write(' shrinking: {} attempt(s), {} accepted\n'.format(shrunk.attempts, shrunk.accepted))

    outfile.write('\nFAIL\n')

def _print_success(outcome, outfile):
    outfile.write('-' * 80 + '\n')
    outfile.write('Found no counterexample\n')
    outfile.write('After {} trial(s), seed {}\n'.format(outcome.trials, outcome.seed))
    outfile.write('In model `{}`\n'.format(type(outcome.model).__name__))
    outfile.write('\nOK\n')

def check(model, config=None, outfile=sys.stdout):
    '''Run 'model', printing progress and a report to 'outfile'
    '''
    config = config or Config()
    n = 0

    def progress(trial):
        nonlocal n
        n += 1
        print('.', flush=True, end='', file=outfile)
        if n % 80 == 0:
            print('', file=outfile)

    outcome = run(model, config, progress=progress)

    if isinstance(outcome, GenerationFailure):
        print('E', file=outfile)
        _print_failure(outcome, outfile)
    elif isinstance(outcome, Counterexample):
        print('F', file=outfile)
        _print_failure(outcome, outfile)
        if config.graphviz:
            grapher.render(outcome.partials, outcome.shrunk.divergence, config.graphviz_file)
    else:
        print('', file=outfile)
        _print_success(outcome, outfile)

    return outcome
