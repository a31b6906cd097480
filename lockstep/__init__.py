import logging
import logging.config

from . import default_strategies
from .model import *
from .strategy import *
from .asserts import *
from .symbolic import *
from .config import Config
from .executor import DivergenceKind, Divergence, execute, validate
from .generator import generate
from .shrinker import shrink
from .outcomes import *
from .runner import run, replay, check
from .error_types import (
    LockstepError,
    MissingStrategyError,
    NoApplicableCommand,
    UnresolvedReference,
    InvalidCandidate,
    CounterexampleFound,
    Raised,
)
from ._types import Nat, Neg

def enableLogging(debug=False):
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,

        'formatters': {
            'default': {
                'format': '[{asctime}] {levelname}, {name}: {message}',
                'datefmt': '%Y/%m/%d %H:%M:%S',
                'style': '{',
            },
        },

        'handlers': {
            'stdout': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
            },
        },

        'root': {
            'level': logging.DEBUG if debug else logging.INFO,
            'handlers': ['stdout'],
        },
    })
