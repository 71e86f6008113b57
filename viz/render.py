from collections.abc import Mapping, Sequence

from core.errors import ConfigurationError, MissingInputError

MIN_NAME_WIDTH = 11  # len("times in ms")
LEGEND_LABEL = "times in ms "
# Legend values closer than this fraction of the longest end are not printed
COLLISION_FRACTION = 0.05


def _span(timer: Sequence[float]) -> tuple[float, float]:
    # A timer that was never closed is drawn as an instant at its start
    start = timer[0]
    end = timer[1] if len(timer) > 1 else start
    return start, end


def viz(timers: Mapping[str, Sequence[float]] | None, width: int = 80) -> str:
    """Render timers as an ASCII bar chart with a millisecond legend.

    Rows are ordered by start offset. Each row is the timer name, padding
    proportional to its start, then ``|===|`` for its duration, or ``X`` when
    the interval is too short for a bar. Two legend lines follow a separator:
    start times, then end times, with labels that would overlap skipped.
    """
    if not timers:
        raise MissingInputError("need timers")

    spans = {name: _span(timer) for name, timer in timers.items()}
    by_start = sorted(spans, key=lambda name: (spans[name][0], name))
    by_end = sorted(spans, key=lambda name: (spans[name][1], name))

    max_time = max(0.0, *(end for _, end in spans.values()))
    name_width = max(MIN_NAME_WIDTH, *(len(name) + 1 for name in spans))

    if not isinstance(width, int) or width <= name_width + 8:
        raise ConfigurationError(f"width {width!r} leaves no room for bars (need more than {name_width + 8})")

    scaling = (width - name_width - 8) / max_time if max_time > 0 else 0.0

    lines = []
    for name in by_start:
        start, end = spans[name]
        row = name.rjust(name_width) + " " + " " * int(start * scaling)
        bar_width = int((end - start) * scaling) - 1
        if bar_width > 0:
            row += "|" + "=" * bar_width + "|"
        else:
            row += "X"
        lines.append(row + "\n")

    lines.append("_" * width + "\n")

    seen: set[str] = set()
    lines.append(
        LEGEND_LABEL
        + " " * (name_width - MIN_NAME_WIDTH)
        + _time_legend(max_time, scaling, [spans[name][0] for name in by_start], seen)
    )
    lines.append(" " * (name_width + 1) + _time_legend(max_time, scaling, [spans[name][1] for name in by_end], seen))

    return "".join(lines)


def _time_legend(max_time: float, scaling: float, values: list[float], seen: set[str]) -> str:
    """One legend row: each value in ms at its scaled column.

    ``seen`` is shared between rows so a label is printed only once.
    """
    out = ""
    last_time: float | None = None
    last_len = 0

    for value in values:
        if last_time is not None and (value == last_time or abs(last_time - value) < COLLISION_FRACTION * max_time):
            continue

        sep = int(scaling * (value - (last_time or 0))) - last_len
        if sep < 1 and last_time is not None:
            sep = 1
        out += " " * sep

        label = f"{value * 1000:.1f}"
        if label in seen:
            last_len = 0
        else:
            out += label
            last_len = len(label)
            seen.add(label)

        last_time = value

    return out + "\n"
