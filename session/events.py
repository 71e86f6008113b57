from core.clock import Clock, format_offset
from core.errors import DuplicateNameError
from core.types import MessageRecord


class EventRecorder:
    """Writes zero-duration markers into a record's events section."""

    def __init__(self, record: MessageRecord, clock: Clock, clamp_floor: float = 0.0, precision: int = 6):
        self._record = record
        self._clock = clock
        self._clamp_floor = clamp_floor
        self._precision = precision

    def record(self, name: str) -> float:
        if name in self._record.events:
            raise DuplicateNameError("event", name)
        offset = format_offset(self._clock() - self._record.start, self._clamp_floor, self._precision)
        self._record.events[name] = offset
        return offset
