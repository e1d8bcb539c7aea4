import io
import json
import logging
from datetime import datetime
from unittest import mock

import pytest

from cloudpatterns.logdemo import (
    JSONFormatter,
    SamplingFilter,
    main,
    run_sampling_demo,
    run_structured_demo,
)


def record(msg="Testing sampling", levelno=logging.INFO, **extra):
    fields = {"msg": msg, "levelno": levelno, "levelname": logging.getLevelName(levelno)}
    fields.update(extra)
    return logging.makeLogRecord(fields)


def test_sampling_keeps_first_three_then_every_third():
    sampler = SamplingFilter(3, 3)
    with mock.patch("time.monotonic", return_value=10.0):
        kept = [i for i in range(1, 10) if sampler.filter(record(index=i))]
    assert kept == [1, 2, 3, 6, 9]


def test_sampling_reports_every_drop():
    dropped = []
    sampler = SamplingFilter(3, 3, dropped.append)
    with mock.patch("time.monotonic", return_value=10.0):
        kept = [i for i in range(1, 10) if sampler.filter(record(index=i))]
    dropped_indices = [r.index for r in dropped]
    assert len(kept) + len(dropped_indices) == 9
    assert set(kept).isdisjoint(dropped_indices)


def test_sampling_counts_messages_separately():
    sampler = SamplingFilter(1, 100)
    with mock.patch("time.monotonic", return_value=10.0):
        assert sampler.filter(record("first")) is True
        assert sampler.filter(record("second")) is True
        assert sampler.filter(record("first")) is False
        assert sampler.filter(record("first", levelno=logging.WARNING)) is True


def test_sampling_zero_thereafter_drops_rest():
    sampler = SamplingFilter(2, 0)
    with mock.patch("time.monotonic", return_value=10.0):
        decisions = [sampler.filter(record()) for _ in range(5)]
    assert decisions == [True, True, False, False, False]


def test_sampling_resets_each_second():
    sampler = SamplingFilter(1, 0)
    with mock.patch("time.monotonic") as clock:
        clock.return_value = 10.0
        assert sampler.filter(record()) is True
        assert sampler.filter(record()) is False
        clock.return_value = 15.0
        assert sampler.filter(record()) is True


def test_sampling_rejects_negative_counts():
    with pytest.raises(ValueError):
        SamplingFilter(-1, 3)


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(record("Hello", number=3))
    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["msg"] == "Hello"
    assert payload["number"] == 3
    assert datetime.fromisoformat(payload["time"]).tzinfo is not None


def test_json_formatter_names_level_between_presets():
    payload = json.loads(JSONFormatter().format(record("Hello, world!", levelno=22)))
    assert payload["level"] == "INFO+2"


def test_sampling_demo_output():
    stream = io.StringIO()
    run_sampling_demo(stream)
    lines = stream.getvalue().splitlines()
    logged = [line for line in lines if "Testing sampling" in line]
    dropped = [line for line in lines if line == "event dropped..."]
    assert len(logged) + len(dropped) == 9
    assert logged[0].startswith("INFO\tTesting sampling\t")
    indices = [json.loads(line.split("\t")[2])["index"] for line in logged]
    assert indices == sorted(indices)
    assert indices[0] == 1


def test_structured_demo_output():
    stream = io.StringIO()
    run_structured_demo(stream)
    lines = stream.getvalue().splitlines()
    assert any(line.endswith("url=https://example.com") for line in lines)
    payloads = [json.loads(line) for line in lines if line.startswith("{")]
    assert [p["msg"] for p in payloads] == ["Hello, world!", "Hello"]
    assert payloads[1]["number"] == 3
    assert any(" number=3" in line for line in lines if not line.startswith("{"))


def test_main_runs_chosen_demo(capsys):
    assert main(["sampling"]) == 0
    out = capsys.readouterr().out
    assert "Testing sampling" in out
    assert "Hello, world!" not in out