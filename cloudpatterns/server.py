"""HTTP front end for the key-value store, served over WSGI."""

from __future__ import annotations

import argparse
import logging
import re
from collections.abc import Callable, Iterable
from http import HTTPStatus
from pathlib import Path
from typing import Any
from wsgiref.simple_server import make_server

from cloudpatterns.store import KeyValueStore, NoSuchKeyError
from cloudpatterns.transact import EventType, FileTransactionLogger

_log = logging.getLogger(__name__)

StartResponse = Callable[..., Any]
WSGIApp = Callable[[dict[str, Any], StartResponse], Iterable[bytes]]

_KEY_ROUTE = re.compile(r"^/v1/([^/]+)$")
_NOT_ALLOWED_ROUTES = frozenset({"/", "/v1"})


def initialize_transaction_log(
    store: KeyValueStore, filename: str | Path
) -> FileTransactionLogger:
    """Replay the log at ``filename`` into ``store`` and start logging to it.

    Returns the running logger; the caller must close it.
    """
    logger = FileTransactionLogger(filename)
    try:
        for event in logger.read_events():
            if event.event_type is EventType.DELETE:
                store.delete(event.key)
            elif event.event_type is EventType.PUT:
                store.put(event.key, event.value)
    except BaseException:
        logger.close()
        raise
    logger.run()
    return logger


def _respond(
    start_response: StartResponse,
    status: HTTPStatus,
    body: bytes = b"",
    *,
    error: bool = False,
) -> list[bytes]:
    headers = [
        ("Content-Type", "text/plain; charset=utf-8"),
        ("Content-Length", str(len(body))),
    ]
    if error:
        headers.append(("X-Content-Type-Options", "nosniff"))
    start_response(f"{status.value} {status.phrase}", headers)
    return [body]


def _error(
    start_response: StartResponse, message: str, status: HTTPStatus
) -> list[bytes]:
    return _respond(start_response, status, f"{message}\n".encode(), error=True)


def _request_uri(environ: dict[str, Any]) -> str:
    path = environ.get("PATH_INFO", "") or "/"
    query = environ.get("QUERY_STRING", "")
    return f"{path}?{query}" if query else path


def _read_body(environ: dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    if stream is None or length <= 0:
        return b""
    return stream.read(length)


def _with_request_logging(app: WSGIApp) -> WSGIApp:
    def logged(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        _log.info("%s %s", environ.get("REQUEST_METHOD", "GET"), _request_uri(environ))
        return app(environ, start_response)

    return logged


def make_hello_handler(message: str) -> WSGIApp:
    """Return a WSGI application that answers every request with ``message``."""
    body = message.encode()

    def hello(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        return _respond(start_response, HTTPStatus.OK, body)

    return hello


def make_key_value_handler(
    store: KeyValueStore, logger: FileTransactionLogger
) -> WSGIApp:
    """Return the WSGI application serving ``store`` under ``/v1/{key}``.

    PUT stores the request body, GET returns the stored value and DELETE
    removes the key; mutations are recorded through ``logger``.
    """

    def put(key: str, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        try:
            value = _read_body(environ).decode("utf-8", errors="replace")
        except OSError as exc:
            return _error(start_response, str(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
        store.put(key, value)
        logger.write_put(key, value)
        return _respond(start_response, HTTPStatus.CREATED)

    def get(key: str, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        try:
            value = store.get(key)
        except NoSuchKeyError as exc:
            return _error(start_response, str(exc), HTTPStatus.NOT_FOUND)
        return _respond(start_response, HTTPStatus.OK, value.encode())

    def delete(key: str, environ: dict[str, Any], start_response: StartResponse) -> list[bytes]:
        store.delete(key)
        logger.write_delete(key)
        _log.info("DELETE key=%s", key)
        return _respond(start_response, HTTPStatus.OK)

    methods = {"PUT": put, "GET": get, "DELETE": delete}

    def app(environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        path = environ.get("PATH_INFO", "") or "/"
        method = environ.get("REQUEST_METHOD", "GET").upper()

        if path in _NOT_ALLOWED_ROUTES:
            return _error(start_response, "Not Allowed", HTTPStatus.METHOD_NOT_ALLOWED)

        match = _KEY_ROUTE.match(path)
        if match is None:
            return _error(start_response, "404 page not found", HTTPStatus.NOT_FOUND)

        handler = methods.get(method)
        if handler is None:
            return _error(start_response, "Not Allowed", HTTPStatus.METHOD_NOT_ALLOWED)
        return handler(match.group(1), environ, start_response)

    return _with_request_logging(app)


def main(argv: list[str] | None = None) -> int:
    """Serve the key-value store, or a fixed greeting with ``--hello``."""
    parser = argparse.ArgumentParser(description="Key-value store HTTP server.")
    parser.add_argument("--host", default="", help="address to bind")
    parser.add_argument("--port", type=int, default=8080, help="port to bind")
    parser.add_argument(
        "--transaction-log",
        default="transaction.log",
        help="path of the transaction log file",
    )
    parser.add_argument(
        "--hello",
        metavar="MESSAGE",
        help="serve MESSAGE on every path instead of the store",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    logger: FileTransactionLogger | None = None
    if args.hello is not None:
        app = make_hello_handler(args.hello)
    else:
        store = KeyValueStore()
        logger = initialize_transaction_log(store, args.transaction_log)
        app = make_key_value_handler(store, logger)

    try:
        with make_server(args.host, args.port, app) as httpd:
            try:
                httpd.serve_forever()
            except KeyboardInterrupt:
                pass
    finally:
        if logger is not None:
            logger.close()
    return 0