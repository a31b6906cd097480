# shrinker.py - Reduce a failing command sequence to a locally minimal one
import logging

import attr

from .executor import execute, validate
from .error_types import InvalidCandidate

__all__ = [
    'ShrinkResult',
    'shrink',
]

log = logging.getLogger('shrinker')

@attr.s
class ShrinkResult:
    partials = attr.ib()
    divergence = attr.ib()
    attempts = attr.ib(default=0)
    accepted = attr.ib(default=0)
    exhausted = attr.ib(default=False)

def _chunk_deletions(n):
    '''Index ranges to try deleting from a sequence of length 'n'

    Chunk sizes halve from n // 2 down to 1, positions go left to right.
    '''
    k = n // 2
    while k > 0:
        for i in range(0, n - k + 1, k):
            yield range(i, i + k)
        k //= 2

class Shrinker:
    '''Greedy search for a smaller sequence that still diverges

    The order in which reductions are tried is fixed, so for a given failing
    sequence the result is always the same:
    1. deletion of chunks (cascading to commands using handles of deleted ones),
       biggest chunks first; a sweep tries every chunk, the shortest sequence
       still diverging is accepted and the sweep restarts on it;
    2. per step, argument simplification offered by the command,
       repeated over the whole sequence until nothing is accepted.
    '''
    def __init__(self, model, config):
        self.model = model
        self.config = config
        self.attempts = 0
        self.accepted = 0

    @property
    def exhausted(self):
        return self.attempts >= self.config.max_shrink_iters

    def _try(self, candidate):
        '''Execute 'candidate', returning its divergence if it still fails
        '''
        if not validate(self.model, candidate):
            return None

        self.attempts += 1
        execution = execute(self.model, candidate, self.config.per_command_timeout)
        if execution.ok:
            return None

        if not validate(self.model, execution.divergence.partials):
            raise InvalidCandidate('a divergent prefix of a valid sequence failed to validate: {}'.format(
                execution.divergence.partials))

        return execution.divergence

    def _accept(self, divergence, what):
        self.accepted += 1
        log.info('* shrink: {} -> {} commands'.format(what, len(divergence.partials)))

    def shrink_length(self, divergence):
        while not self.exhausted:
            partials = divergence.partials
            best = None

            for chunk in _chunk_deletions(len(partials)):
                if self.exhausted:
                    break

                candidate = partials.without(chunk)
                if len(candidate) >= len(partials):
                    continue

                log.debug('try deleting {}..{}: {}'.format(chunk.start, chunk.stop - 1, candidate))
                d = self._try(candidate)
                if d is not None and (best is None or len(d.partials) < len(best[1].partials)):
                    best = (chunk, d)

            if best is None:
                break

            chunk, divergence = best
            self._accept(divergence, 'deleted steps {}..{}'.format(chunk.start, chunk.stop - 1))

        return divergence

    def shrink_args(self, divergence):
        progress = True
        while progress and not self.exhausted:
            progress = False
            i = 0
            while i < len(divergence.partials) and not self.exhausted:
                partials = divergence.partials
                p = partials[i]
                for args in p.command.shrink_args(p.args):
                    if self.exhausted:
                        break

                    if args == p.args:
                        continue

                    candidate = partials.with_args(i, args)
                    log.debug('try simplifying step {}: {}'.format(i, candidate[i]))
                    d = self._try(candidate)
                    if d is not None:
                        self._accept(d, 'simplified step {}'.format(i))
                        divergence = d
                        progress = True
                        break
                else:
                    # no simplification of this step left
                    i += 1

        return divergence

    def run(self, divergence):
        divergence = self.shrink_length(divergence)
        if self.config.shrink_commands:
            divergence = self.shrink_args(divergence)

        if self.exhausted:
            log.warning('shrinking stopped after {} attempts, the result may not be minimal'.format(self.attempts))

        return ShrinkResult(divergence.partials, divergence, self.attempts, self.accepted, self.exhausted)

def shrink(model, divergence, config):
    '''Shrink the sequence behind 'divergence'

    Starts from the executed prefix (the commands after the divergence never ran)
    and returns a :class:`ShrinkResult` whose divergence is reproduced by its sequence.
    '''
    return Shrinker(model, config).run(divergence)
