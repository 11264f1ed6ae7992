"""Exponential backoff with jitter for retry delays.

Delays grow as ``min_delay * factor ** attempt``, are capped at ``max_delay``,
and are then drawn from the top half of the interval between ``min_delay`` and
the capped value so independent callers do not retry in lockstep.
"""

import random

DEFAULT_MAX_RETRIES = 3
DEFAULT_MIN_DELAY = 4.0
DEFAULT_MAX_DELAY = 60.0
DEFAULT_DELAY_FACTOR = 3.0


def backoff_delay(
    attempt: int,
    min_delay: float = DEFAULT_MIN_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    factor: float = DEFAULT_DELAY_FACTOR,
    rng: random.Random | None = None,
) -> float:
    """Return the number of seconds to wait before retry number ``attempt + 1``.

    The result always lies within [min_delay, max_delay].
    """
    rng = rng or random.Random()
    try:
        capped = min(min_delay * factor**attempt, max_delay)
    except OverflowError:
        capped = max_delay
    return min_delay + rng.uniform(0.5, 1.0) * (capped - min_delay)
