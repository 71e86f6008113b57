import json
import logging
import sys
import time
from collections.abc import Iterable

from core.config import Config, load_config
from core.errors import LogDeferError
from core.logging_setup import setup_logging
from core.types import MessageRecord
from session import create_session
from viz import viz

logger = logging.getLogger(__name__)


def render_records(lines: Iterable[str], width: int = 80) -> list[str]:
    """Chart every JSON-encoded record (one per line) that carries timers."""
    charts = []
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Skipping line %d: not JSON (%s)", lineno, e)
            continue
        if not isinstance(record, dict) or not record.get("timers"):
            logger.debug("Skipping line %d: no timers", lineno)
            continue
        try:
            charts.append(viz(record["timers"], width=width))
        except (AttributeError, IndexError, TypeError, LogDeferError) as e:
            logger.warning("Skipping line %d: unusable timers (%s)", lineno, e)
    return charts


def demo(config: Config) -> MessageRecord:
    """Run a small session and print its record and timer chart."""
    delivered: list[MessageRecord] = []

    with create_session(delivered.append, config) as log:
        log.info("handling request")
        with log.timer("parse request"):
            time.sleep(0.01)
        fetch = log.timer("fetch results")
        worker = log.retain()
        with log.timer("cache lookup"):
            time.sleep(0.02)
        fetch.close()
        log.data()["user"] = "demo"
        log.debug(lambda: ("expensive dump", {"rows": 3}))
    # the session is still held by the worker branch
    worker.event("reply sent")
    worker.release()

    record = delivered[0]
    print(json.dumps(record.to_dict(), indent=2))
    print(viz(record.timers, width=config.viz.width), end="")
    return record


def main(argv: list[str]) -> int:
    config = load_config()
    setup_logging(config.logging)

    if "--demo" in argv:
        demo(config)
        return 0

    paths = [arg for arg in argv if not arg.startswith("--")]
    if paths:
        for path in paths:
            with open(path) as f:
                for chart in render_records(f, width=config.viz.width):
                    print(chart)
    else:
        for chart in render_records(sys.stdin, width=config.viz.width):
            print(chart)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
