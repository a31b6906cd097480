import io
import os
import importlib.util

import pytest

from lockstep import *

from machines import CounterModel, CappedCounterModel, ResetOnlyModel, PlanModel, SleepyModel

FAILING = Config(seed=7, max_length=50, weights={'inc': 4})

def test_correct_system_passes():
    outcome = run(CappedCounterModel, Config(seed=1, num_trials=20))
    assert isinstance(outcome, Success)
    assert outcome
    assert outcome.trials == 20
    assert outcome.seed == 1
    assert outcome.reason is None
    outcome.raise_for_failure()

def test_counterexample_found_and_shrunk():
    outcome = run(CounterModel, FAILING)
    assert isinstance(outcome, Counterexample)
    assert not outcome
    assert outcome.seed == 7
    assert outcome.kind is DivergenceKind.POSTCONDITION
    assert [p.command.name for p in outcome.partials] == ['inc'] * 11
    assert len(outcome.original.partials) >= 11

def test_same_seed_same_outcome():
    a, b = run(CounterModel, FAILING), run(CounterModel, FAILING)
    assert (a.trials, a.trial_seed) == (b.trials, b.trial_seed)
    assert a.original.partials == b.original.partials

def test_replay_trial_seed():
    outcome = run(CounterModel(), FAILING)
    again = replay(CounterModel(), outcome.trial_seed, FAILING)
    assert isinstance(again, Counterexample)
    assert again.original.partials == outcome.original.partials
    assert again.partials == outcome.partials

def test_raise_for_failure():
    outcome = run(CounterModel, FAILING)
    with pytest.raises(CounterexampleFound) as e:
        outcome.raise_for_failure()

    assert e.value.outcome is outcome
    assert str(outcome.trial_seed) in str(e.value)

def test_generation_failure():
    outcome = run(ResetOnlyModel, Config(seed=3, min_length=5, max_length=5))
    assert isinstance(outcome, GenerationFailure)
    assert outcome.trials == 1
    with pytest.raises(NoApplicableCommand):
        outcome.raise_for_failure()

def test_progress_called_per_passing_trial():
    seen = []
    run(CappedCounterModel, Config(seed=0, num_trials=5), progress=seen.append)
    assert seen == [0, 1, 2, 3, 4]

def test_check_report_ok():
    out = io.StringIO()
    outcome = check(CappedCounterModel, Config(seed=2, num_trials=10), outfile=out)
    text = out.getvalue()
    assert outcome
    assert text.startswith('.' * 10)
    assert 'Found no counterexample' in text
    assert text.rstrip().endswith('OK')

def test_check_report_failure():
    out = io.StringIO()
    outcome = check(CounterModel, FAILING, outfile=out)
    text = out.getvalue()
    assert 'Failure' in text
    assert 'Replay with trial seed {}'.format(outcome.trial_seed) in text
    assert 'counterexample (11 commands)' in text
    assert 'inc() -> 11 (expected 10)' in text
    assert text.rstrip().endswith('FAIL')

def test_check_report_generation_failure():
    out = io.StringIO()
    check(ResetOnlyModel, Config(seed=3, min_length=2, max_length=2), outfile=out)
    text = out.getvalue()
    assert text.startswith('E')
    assert 'could not generate a sequence' in text

def test_timeout_counterexample_shrinks():
    config = Config(seed=0, min_length=6, max_length=6, num_trials=1, per_command_timeout=0.05)
    outcome = run(SleepyModel, config)
    assert isinstance(outcome, Counterexample)
    assert outcome.kind is DivergenceKind.TIMEOUT
    assert len(outcome.original.partials) == 3
    assert [p.command.name for p in outcome.partials] == ['step'] * 3

def load_example(name):
    path = os.path.join(os.path.dirname(__file__), os.pardir, 'examples', name + '.py')
    module_spec = importlib.util.spec_from_file_location('example_' + name, path)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module

def test_cache_overwrite_bug_found():
    cache = load_example('cache')
    outcome = run(cache.CacheModel, Config(seed=4, max_length=40, num_trials=200))
    assert isinstance(outcome, Counterexample), outcome.summary()
    assert outcome.kind is DivergenceKind.POSTCONDITION

    names = [p.command.name for p in outcome.partials]
    assert names[-1] == 'get'
    assert names.count('set') >= 5
    assert len(names) <= len(outcome.original.partials)
