from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from core.errors import ConfigurationError


class Level(IntEnum):
    ERROR = 10
    WARN = 20
    INFO = 30
    DEBUG = 40


VERBOSITY_NAMES: dict[str, Level] = {level.name.lower(): level for level in Level}

# [start_offset] while open, [start_offset, end_offset] once closed
TimerSpan = list[float]


def resolve_verbosity(value: Any) -> int | float | None:
    """Turn a verbosity setting into a numeric threshold.

    None means unfiltered. Names are looked up in VERBOSITY_NAMES.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"verbosity must be a number or level name, got {value!r}")
    if isinstance(value, Level):
        return int(value)
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        level = VERBOSITY_NAMES.get(value.strip().lower())
        if level is None:
            known = ", ".join(VERBOSITY_NAMES)
            raise ConfigurationError(f"unknown verbosity {value!r} (expected a number or one of: {known})")
        return int(level)
    raise ConfigurationError(f"verbosity must be a number or level name, got {type(value).__name__}")


@dataclass
class MessageRecord:
    start: float
    end: float | None = None
    logs: list[list[Any]] = field(default_factory=list)
    timers: dict[str, TimerSpan] = field(default_factory=dict)
    events: dict[str, float] = field(default_factory=dict)
    data: dict[str, Any] | None = None

    @property
    def sealed(self) -> bool:
        return self.end is not None

    def open_timers(self) -> list[str]:
        return [name for name, span in self.timers.items() if len(span) == 1]

    def to_dict(self) -> dict[str, Any]:
        """Plain structure handed to an external encoder (JSON, MessagePack, ...).

        Sections the session never touched are left out.
        """
        out: dict[str, Any] = {"start": self.start}
        if self.end is not None:
            out["end"] = self.end
        out["logs"] = [list(entry) for entry in self.logs]
        if self.timers:
            out["timers"] = {name: list(span) for name, span in self.timers.items()}
        if self.events:
            out["events"] = dict(self.events)
        if self.data is not None:
            out["data"] = self.data
        return out
