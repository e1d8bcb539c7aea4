"""Logging demonstrations: sampling of repeated events and structured output."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
import time
from collections.abc import Callable, MutableMapping
from datetime import datetime
from typing import Any, TextIO

_TICK = 1.0

_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

_LEVEL_NAMES = ((40, "ERROR"), (30, "WARN"), (20, "INFO"), (10, "DEBUG"))

# A level between INFO and WARNING that has no name of its own.
_INFO_PLUS_2 = logging.INFO + 2

_DROP_NOTICE = "event dropped..."


def _level_name(levelno: int) -> str:
    for base, name in _LEVEL_NAMES:
        if levelno >= base:
            offset = levelno - base
            return name if offset == 0 else f"{name}+{offset}"
    return f"DEBUG{levelno - logging.DEBUG:+d}"


def _attrs(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}


class SamplingFilter(logging.Filter):
    """Let through the first ``initial`` identical events in each second,
    then only every ``thereafter``-th one; ``thereafter`` of 0 drops the rest.

    Events are identical when they share level and message. ``on_drop`` is
    called with each record that is dropped.
    """

    def __init__(
        self,
        initial: int,
        thereafter: int,
        on_drop: Callable[[logging.LogRecord], None] | None = None,
    ) -> None:
        super().__init__()
        if initial < 0 or thereafter < 0:
            raise ValueError("initial and thereafter must not be negative")
        self.initial = initial
        self.thereafter = thereafter
        self.on_drop = on_drop
        self._lock = threading.Lock()
        self._tick: int | None = None
        self._counts: dict[tuple[int, str], int] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        tick = int(time.monotonic() // _TICK)
        key = (record.levelno, str(record.msg))
        with self._lock:
            if tick != self._tick:
                self._tick = tick
                self._counts.clear()
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count

        keep = count <= self.initial or (
            self.thereafter > 0 and (count - self.initial) % self.thereafter == 0
        )
        if not keep and self.on_drop is not None:
            self.on_drop(record)
        return keep


class JSONFormatter(logging.Formatter):
    """Format a record as one JSON object with time, level, msg and extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": _level_name(record.levelno),
            "msg": record.getMessage(),
        }
        payload.update(_attrs(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False, separators=(",", ":"))


def _text_value(value: Any) -> str:
    text = str(value)
    if not text or any(c.isspace() or c in '="' for c in text):
        return json.dumps(text, ensure_ascii=False)
    return text


class _TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%Y/%m/%d %H:%M:%S")
        parts = [stamp, _level_name(record.levelno), record.getMessage()]
        parts.extend(f"{k}={_text_value(v)}" for k, v in _attrs(record).items())
        return " ".join(parts)


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = f"{_level_name(record.levelno)}\t{record.getMessage()}"
        attrs = _attrs(record)
        if attrs:
            line += "\t" + json.dumps(attrs, default=str, ensure_ascii=False)
        return line


class _BoundLogger(logging.LoggerAdapter):
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


class _DropReporter:
    """Write a notice to a stream for each dropped record and count them."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.dropped = 0

    def __call__(self, record: logging.LogRecord) -> None:
        self.dropped += 1
        self.stream.write(_DROP_NOTICE + "\n")
        self.stream.flush()


def _make_logger(name: str, stream: TextIO, formatter: logging.Formatter) -> logging.Logger:
    logger = logging.Logger(name, logging.INFO)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def run_sampling_demo(stream: TextIO) -> None:
    """Log nine identical events through a 3-then-every-3rd sampler."""
    logger = _make_logger("cloudpatterns.sampling", stream, _ConsoleFormatter())
    logger.addFilter(SamplingFilter(3, 3, _DropReporter(stream)))
    for index in range(1, 10):
        logger.info("Testing sampling", extra={"index": index})


def run_structured_demo(stream: TextIO) -> None:
    """Write structured records as text and as JSON."""
    text = _make_logger("cloudpatterns.structured.text", stream, _TextFormatter())
    text.info("Hello, world!")
    text.log(_INFO_PLUS_2, "Hello, world!")
    text.info("Hello", extra={"number": 3})
    text.info("hello", extra={"number": 3})

    bound = _BoundLogger(text, {"url": "https://example.com"})
    bound.info("Hello, world!")

    as_json = _make_logger("cloudpatterns.structured.json", stream, JSONFormatter())
    as_json.info("Hello, world!")
    as_json.info("Hello", extra={"number": 3})


def main(argv: list[str] | None = None) -> int:
    """Run the chosen demonstration, or both, writing to standard output."""
    parser = argparse.ArgumentParser(description="Logging demonstrations.")
    parser.add_argument(
        "demo", nargs="?", choices=("sampling", "structured", "all"), default="all"
    )
    args = parser.parse_args(argv)
    if args.demo in ("sampling", "all"):
        run_sampling_demo(sys.stdout)
    if args.demo in ("structured", "all"):
        run_structured_demo(sys.stdout)
    return 0