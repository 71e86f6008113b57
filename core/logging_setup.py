import logging
import os

from core.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    """stderr always; a log file too when config.log_file is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        path = os.path.expanduser(config.log_file)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        handlers.append(logging.FileHandler(path))
    return handlers


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Point the root logger at the handlers from [logging].

    Library modules only call logging.getLogger(__name__); this is for
    main.py and other applications.
    """
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in build_handlers(config):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
