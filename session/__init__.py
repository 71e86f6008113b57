from typing import Any

from core.clock import Clock, wall_clock
from core.config import Config
from session.session import Callback, LogSession, SessionRef
from session.timer import TimerHandle

__all__ = ["LogSession", "SessionRef", "TimerHandle", "create_session"]


def create_session(
    callback: Callback,
    config: Config | None = None,
    clock: Clock = wall_clock,
    **overrides: Any,
) -> LogSession:
    """Create a session from the [session] config section.

    Keyword overrides (verbosity, precision, clamp_floor) win over the config.
    """
    session_config = (config or Config()).session
    if overrides:
        session_config = session_config.model_copy(update=overrides)
    return LogSession(callback, clock=clock, config=session_config)
