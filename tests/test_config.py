import pytest

from lockstep import Config

def test_defaults():
    c = Config()
    assert (c.min_length, c.max_length, c.num_trials) == (1, 100, 100)
    assert c.seed is None
    assert c.per_command_timeout is None
    assert c.shrink_commands
    assert c.max_shrink_iters == 10000
    assert c.weights == {}

def test_weights_not_shared():
    Config().weights['x'] = 1
    assert Config().weights == {}

@pytest.mark.parametrize('kws', [
    dict(min_length=5, max_length=4),
    dict(min_length=-1),
    dict(num_trials=0),
    dict(max_shrink_iters=0),
    dict(per_command_timeout=0),
    dict(size=-1),
])
def test_invalid(kws):
    with pytest.raises(ValueError):
        Config(**kws)

def test_equal_bounds_allowed():
    assert Config(min_length=3, max_length=3).max_length == 3
