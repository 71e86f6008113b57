import json
import logging

from main import demo, render_records
from session import LogSession
from viz import viz


def test_render_records_from_session(clock, records):
    with LogSession(records.append, clock=clock) as log:
        with log.timer("db"):
            clock.advance(0.25)
        clock.advance(0.25)
    line = json.dumps(records[0].to_dict())

    charts = render_records([line])
    assert charts == [viz({"db": [0.0, 0.25]})]


def test_render_records_skips_bad_lines(caplog):
    lines = [
        "",
        "not json",
        json.dumps({"start": 1.0, "end": 0.1, "logs": []}),
        json.dumps([1, 2, 3]),
        json.dumps({"start": 1.0, "end": 0.1, "logs": [], "timers": {"a": [0.0, 0.1]}}),
    ]
    with caplog.at_level(logging.WARNING, logger="main"):
        charts = render_records(lines, width=60)
    assert len(charts) == 1
    assert charts[0].splitlines()[1] == "_" * 60
    assert "line 2" in caplog.text


def test_render_records_skips_malformed_timers(caplog):
    lines = [
        json.dumps({"timers": {"a": []}}),
        json.dumps({"timers": {"a": ["soon", "later"]}}),
        json.dumps({"timers": ["not", "a", "mapping"]}),
        json.dumps({"timers": {"ok": [0.0, 0.1]}}),
    ]
    with caplog.at_level(logging.WARNING, logger="main"):
        charts = render_records(lines)
    assert charts == [viz({"ok": [0.0, 0.1]})]
    assert caplog.text.count("unusable timers") == 3


def test_demo(config, capsys):
    record = demo(config)
    out = capsys.readouterr().out
    assert "parse request" in out
    assert "times in ms" in out
    assert record.sealed
    assert set(record.timers) == {"parse request", "fetch results", "cache lookup"}
    assert "reply sent" in record.events
    assert record.data == {"user": "demo"}
    # default config filters debug, so the lazy payload never ran
    assert [entry[1] for entry in record.logs] == [30]
