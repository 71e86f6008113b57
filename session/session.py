"""
Deferred log session.

A LogSession gathers everything one transaction logs into a single
MessageRecord and hands that record to a callback exactly once, when the
last reference to the session is released. References are explicit: the
creator holds one, and every branch of work that needs the logger takes its
own with retain() and gives it back with release() (or a ``with`` block).
"""

from __future__ import annotations

import functools
import logging
import types
from collections.abc import Callable, Mapping
from typing import Any

from core.clock import Clock, format_offset, wall_clock
from core.config import SessionConfig
from core.errors import ConfigurationError, DuplicateNameError, SessionClosedError
from core.types import Level, MessageRecord, resolve_verbosity
from session.events import EventRecorder
from session.timer import TimerHandle

logger = logging.getLogger(__name__)

Callback = Callable[[MessageRecord], Any]

OPTION_KEYS = frozenset({"cb", "verbosity"})

# Only these count as a lazy payload; classes and other callables are logged as-is
LAZY_TYPES = (types.FunctionType, types.MethodType, functools.partial)


class LogSession:
    def __init__(
        self,
        callback: Callback | Mapping[str, Any] | None,
        verbosity: int | float | str | None = None,
        *,
        clock: Clock = wall_clock,
        config: SessionConfig | None = None,
    ):
        if isinstance(callback, Mapping):
            unknown = set(callback) - OPTION_KEYS
            if unknown:
                raise ConfigurationError(f"unknown LogSession options: {', '.join(sorted(unknown))}")
            if verbosity is None:
                verbosity = callback.get("verbosity")
            callback = callback.get("cb")

        if callback is None:
            raise ConfigurationError("must provide a callback to LogSession")
        if not callable(callback):
            raise ConfigurationError(f"callback must be callable, got {type(callback).__name__}")

        config = config or SessionConfig()
        if config.clamp_floor < 0:
            raise ConfigurationError(f"clamp_floor must be 0 or greater, got {config.clamp_floor}")
        if verbosity is None:
            verbosity = config.verbosity

        self._callback = callback
        self._verbosity = resolve_verbosity(verbosity)
        self._clock = clock
        self._clamp_floor = config.clamp_floor
        self._precision = config.precision

        self._record = MessageRecord(start=round(float(clock()), config.precision))
        self._events = EventRecorder(self._record, clock, self._clamp_floor, self._precision)
        self._refcount = 1
        self._owner_released = False
        self._finalized = False

    # --- properties ---

    @property
    def verbosity(self) -> int | float | None:
        return self._verbosity

    @property
    def start(self) -> float:
        return self._record.start

    @property
    def refcount(self) -> int:
        return self._refcount

    @property
    def finalized(self) -> bool:
        return self._finalized

    # --- logging ---

    def log(self, level: int | float, *items: Any) -> None:
        """Append ``[offset, level, *items]`` unless level is above the verbosity.

        A single function, method or partial is a lazy payload: it only runs once the entry
        has passed the filter. A tuple result becomes several items.
        """
        self._check_open()
        if self._verbosity is not None and level > self._verbosity:
            return

        offset = self._offset()
        if len(items) == 1 and isinstance(items[0], LAZY_TYPES):
            produced = items[0]()
            items = produced if isinstance(produced, tuple) else (produced,)

        self._record.logs.append([offset, level, *items])

    add_log = log

    def error(self, *items: Any) -> None:
        self.log(Level.ERROR.value, *items)

    def warn(self, *items: Any) -> None:
        self.log(Level.WARN.value, *items)

    def info(self, *items: Any) -> None:
        self.log(Level.INFO.value, *items)

    def debug(self, *items: Any) -> None:
        self.log(Level.DEBUG.value, *items)

    # --- timers, events, data ---

    def timer(self, name: str) -> TimerHandle:
        self._check_open()
        if name in self._record.timers:
            raise DuplicateNameError("timer", name)
        self._record.timers[name] = [self._offset()]
        return TimerHandle(self._record, name, self._clock, self._clamp_floor, self._precision)

    def event(self, name: str) -> float:
        self._check_open()
        return self._events.record(name)

    def data(self) -> dict[str, Any]:
        self._check_open()
        if self._record.data is None:
            self._record.data = {}
        return self._record.data

    # --- ownership ---

    def retain(self) -> SessionRef:
        """Take another reference, for a branch of work that outlives the caller's."""
        self._check_open()
        self._refcount += 1
        return SessionRef(self)

    def release(self) -> None:
        """Drop the creator's reference. Calling it again does nothing."""
        if self._owner_released:
            return
        self._owner_released = True
        self._drop_ref()

    def __enter__(self) -> LogSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else f"refs={self._refcount}"
        return f"<LogSession start={self._record.start} {state}>"

    # --- internals ---

    def _offset(self) -> float:
        return format_offset(self._clock() - self._record.start, self._clamp_floor, self._precision)

    def _check_open(self) -> None:
        if self._finalized:
            raise SessionClosedError("log session already finalized")

    def _drop_ref(self) -> None:
        self._refcount -= 1
        if self._refcount == 0:
            self._finalize()

    def _finalize(self) -> None:
        record = self._record
        end = self._offset()
        record.end = end
        for name in record.open_timers():
            span = record.timers[name]
            span.append(max(end, span[0]))

        # flip before the callback so a raising callback can't trigger a second delivery
        self._finalized = True
        logger.debug(
            "Finalized session: end=%s logs=%d timers=%d events=%d",
            end,
            len(record.logs),
            len(record.timers),
            len(record.events),
        )
        try:
            self._callback(record)
        except Exception:
            logger.exception("Log callback raised while delivering record")
            raise


class SessionRef:
    """One shared reference to a LogSession.

    Proxies the logging API so a branch can log through the reference it
    holds. Releasing twice is a no-op; the session finalizes when every
    reference, including the creator's, has been released.
    """

    def __init__(self, session: LogSession):
        self._session: LogSession | None = session

    @property
    def session(self) -> LogSession:
        if self._session is None:
            raise SessionClosedError("reference already released")
        return self._session

    @property
    def released(self) -> bool:
        return self._session is None

    def release(self) -> None:
        if self._session is None:
            return
        session, self._session = self._session, None
        session._drop_ref()

    def retain(self) -> SessionRef:
        return self.session.retain()

    def log(self, level: int | float, *items: Any) -> None:
        self.session.log(level, *items)

    def error(self, *items: Any) -> None:
        self.session.error(*items)

    def warn(self, *items: Any) -> None:
        self.session.warn(*items)

    def info(self, *items: Any) -> None:
        self.session.info(*items)

    def debug(self, *items: Any) -> None:
        self.session.debug(*items)

    def timer(self, name: str) -> TimerHandle:
        return self.session.timer(name)

    def event(self, name: str) -> float:
        return self.session.event(name)

    def data(self) -> dict[str, Any]:
        return self.session.data()

    def __enter__(self) -> SessionRef:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
