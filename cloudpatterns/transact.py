"""Append-only transaction log of key-value store mutations."""

from __future__ import annotations

import enum
import queue
import re
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote_plus, unquote_plus

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class EventType(enum.IntEnum):
    """Kind of mutation recorded in the log."""

    DELETE = 1
    PUT = 2


@dataclass(frozen=True)
class Event:
    """One record of the transaction log."""

    sequence: int
    event_type: EventType
    key: str
    value: str = ""


class TransactionLogError(Exception):
    """Raised when the transaction log cannot be opened, read or written."""


class FileTransactionLogger:
    """Records PUT and DELETE events, one per line, in a file.

    Writes are queued and performed by a background thread started with
    :meth:`run`; :meth:`wait` blocks until every queued write is on disk.
    """

    def __init__(self, filename: str | Path) -> None:
        self.filename = Path(filename)
        try:
            self._file = open(self.filename, "a", encoding="utf-8", newline="")
        except OSError as exc:
            raise TransactionLogError(
                f"cannot open transaction log file: {exc}"
            ) from exc
        self.last_sequence = 0
        self._lock = threading.Lock()
        self._queue: queue.Queue[tuple[EventType, str, str] | None] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._error: OSError | None = None
        self._closed = False

    def write_put(self, key: str, value: str) -> None:
        """Queue a PUT of ``value`` under ``key``."""
        self._enqueue(EventType.PUT, key, value)

    def write_delete(self, key: str) -> None:
        """Queue a DELETE of ``key``."""
        self._enqueue(EventType.DELETE, key, "")

    def _enqueue(self, event_type: EventType, key: str, value: str) -> None:
        if self._worker is None or self._closed:
            raise RuntimeError("transaction logger is not running")
        self._queue.put((event_type, key, value))

    def run(self) -> None:
        """Start the background thread that writes queued events."""
        if self._worker is not None:
            return
        self._worker = threading.Thread(target=self._drain, daemon=True)
        self._worker.start()

    def _drain(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                if self._error is None:
                    event_type, key, value = item
                    with self._lock:
                        self.last_sequence += 1
                        sequence = self.last_sequence
                    try:
                        self._file.write(
                            f"{sequence}\t{int(event_type)}\t{key}\t{quote_plus(value)}\n"
                        )
                        self._file.flush()
                    except OSError as exc:
                        self._error = exc
            finally:
                self._queue.task_done()

    def read_events(self) -> Iterator[Event]:
        """Yield the events already in the log, in order.

        Raises :class:`TransactionLogError` on a malformed line, a sequence
        number that does not increase, or a value that cannot be decoded.
        """
        try:
            reader = open(self.filename, encoding="utf-8", newline="")
        except OSError as exc:
            raise TransactionLogError(f"transaction log read failure: {exc}") from exc

        with reader:
            for line in reader:
                yield self._parse(line.rstrip("\n"))

    def _parse(self, line: str) -> Event:
        parts = line.split("\t", 3)
        if len(parts) < 3:
            raise TransactionLogError(f"malformed transaction log line: {line!r}")
        try:
            sequence = int(parts[0])
            event_type = EventType(int(parts[1]))
        except ValueError as exc:
            raise TransactionLogError(
                f"malformed transaction log line: {line!r}"
            ) from exc

        with self._lock:
            if self.last_sequence >= sequence:
                raise TransactionLogError("transaction numbers out of sequence")

        raw_value = parts[3] if len(parts) == 4 else ""
        if _BAD_ESCAPE.search(raw_value):
            raise TransactionLogError(
                f"value decoding failure: invalid escape in {raw_value!r}"
            )
        try:
            value = unquote_plus(raw_value, errors="strict")
        except UnicodeDecodeError as exc:
            raise TransactionLogError(f"value decoding failure: {exc}") from exc

        with self._lock:
            self.last_sequence = sequence
        return Event(sequence, event_type, parts[2], value)

    def wait(self) -> None:
        """Block until every queued event is written.

        Raises :class:`TransactionLogError` if a write failed.
        """
        if self._worker is not None:
            self._queue.join()
        if self._error is not None:
            raise TransactionLogError(
                f"transaction log write failure: {self._error}"
            ) from self._error

    def close(self) -> None:
        """Flush pending events, stop the writer and close the file."""
        if self._closed:
            return
        try:
            self.wait()
        finally:
            self._closed = True
            if self._worker is not None:
                self._queue.put(None)
                self._worker.join()
            self._file.close()

    def __enter__(self) -> FileTransactionLogger:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()