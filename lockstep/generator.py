# generator.py - Random walks over a model producing command sequences
import logging

from .model import Partial, Partials
from .symbolic import Handles
from .error_types import NoApplicableCommand

__all__ = [
    'generate',
]

log = logging.getLogger('generator')

def _weight(cmd, weights):
    return weights.get(cmd.name, cmd.weight)

def generate(model, rng, length, size=30, weights=None):
    '''Generate a precondition-valid :class:`Partials` of exactly 'length' commands

    The walk keeps its own model state, separate from any executor's.
    Raises :class:`NoApplicableCommand` when at some step no command may be chosen.
    '''
    weights = dict(getattr(model, 'weights', None) or {}, **(weights or {}))
    commands = model.commands()
    state = model.initial_state()
    handles = Handles()
    partials = []

    for step in range(length):
        choices = [c for c in commands if c.applicable(state, handles) and _weight(c, weights) > 0]
        while True:
            if not choices:
                log.debug('step {}: nothing applicable in state {!r}'.format(step, state))
                raise NoApplicableCommand(step, state)

            cmd, = rng.choices(choices, weights=[_weight(c, weights) for c in choices])
            args = cmd.draw_args(state, rng, handles, size)
            if args is not None:
                break

            # no arguments valid_args accepts, the command is not applicable here
            choices.remove(cmd)

        var = handles.new(cmd.returns) if cmd.returns is not None else None
        state, _ = cmd.apply_model(state, args, var)

        partial = Partial(cmd, args, var)
        log.debug('step {}: {}'.format(step, partial))
        partials.append(partial)

    return Partials(partials)
