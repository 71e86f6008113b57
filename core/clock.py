import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Any zero-argument callable returning seconds works as a clock
Clock = Callable[[], float]

DEFAULT_PRECISION = 6  # microseconds
DEFAULT_CLAMP_FLOOR = 0.0


def wall_clock() -> float:
    """Seconds since the epoch. Not guaranteed to be monotonic."""
    return time.time()


def format_offset(
    value: float,
    floor: float = DEFAULT_CLAMP_FLOOR,
    precision: int = DEFAULT_PRECISION,
) -> float:
    """Clamp an offset to floor and round it to precision decimal places.

    The wall clock can step backwards between reads, which would make an
    offset negative. That is recovered from here rather than reported.
    """
    if value < floor:
        logger.debug("Clamping offset %.9f to %s (clock went backwards?)", value, floor)
        value = floor
    return round(float(value), precision)
