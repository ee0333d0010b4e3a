"""bulky: defer error handling in bulk computations to a collecting step.

Map a sequence into thunks with ``lazy``, chain further steps with ``lift``,
then pick a collector to decide what happens when some of them raise.

Flat imports (preferred):
    from bulky import lazy, lift, sneaky
    from bulky import discarding, up_to, up_to_and_raise, raising_at_end

Submodule imports (for organization):
    from bulky.thunks import lazy, lift, to_thunk
    from bulky.collectors import Collector, discarding
    from bulky.errors import FailFastCollectError, WrappedError
"""

# Configuration
from bulky._config import BulkyConfig, get_config, init

# Logging
from bulky._logging import configure_logging, get_logger

# Collectors
from bulky.collectors import (
    Collector,
    FailAtEndAccumulator,
    ResultsAccumulator,
    discarding,
    discarding_failures,
    raising_at_end,
    raising_failures_at_end,
    up_to,
    up_to_and_raise,
    up_to_failure,
    up_to_failure_and_raise,
)

# Errors
from bulky.errors import (
    BulkyError,
    CollectError,
    ConfigurationError,
    FailAtEndCollect,
    FailAtEndCollectError,
    FailFastCollect,
    FailFastCollectError,
    WrappedError,
)

# Adapters
from bulky.sneaky import sneaky

# Deferred evaluation
from bulky.thunks import Thunk, lazy, lazylift, lift, to_thunk

__all__ = [
    # Errors
    'BulkyError',
    # Configuration
    'BulkyConfig',
    'CollectError',
    # Collectors
    'Collector',
    'ConfigurationError',
    'FailAtEndAccumulator',
    'FailAtEndCollect',
    'FailAtEndCollectError',
    'FailFastCollect',
    'FailFastCollectError',
    'ResultsAccumulator',
    # Deferred evaluation
    'Thunk',
    'WrappedError',
    # Logging
    'configure_logging',
    'discarding',
    'discarding_failures',
    'get_config',
    'get_logger',
    'init',
    'lazy',
    'lazylift',
    'lift',
    'raising_at_end',
    'raising_failures_at_end',
    # Adapters
    'sneaky',
    'to_thunk',
    'up_to',
    'up_to_and_raise',
    'up_to_failure',
    'up_to_failure_and_raise',
]
