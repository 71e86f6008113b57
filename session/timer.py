from __future__ import annotations

from core.clock import Clock, format_offset
from core.types import MessageRecord


class TimerHandle:
    """Open interval in a record's timers section.

    Closing appends the end offset. A handle closes at most once; if the
    session finalized first, the timer already carries the session end and
    close() leaves it alone.
    """

    def __init__(
        self,
        record: MessageRecord,
        name: str,
        clock: Clock,
        clamp_floor: float = 0.0,
        precision: int = 6,
    ):
        self._record = record
        self._name = name
        self._clock = clock
        self._clamp_floor = clamp_floor
        self._precision = precision
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed or len(self._record.timers[self._name]) > 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        span = self._record.timers[self._name]
        if len(span) > 1:
            return  # force-closed by finalization

        offset = format_offset(self._clock() - self._record.start, self._clamp_floor, self._precision)
        # start offset was clamped the same way, but keep start <= end under a skewed clock
        span.append(max(offset, span[0]))

    def __enter__(self) -> TimerHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<TimerHandle {self._name!r} {state}>"
