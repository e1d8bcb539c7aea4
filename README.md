# cloudpatterns

Building blocks for services that have to keep working when their
dependencies do not, a small key-value HTTP server that keeps its state in a
transaction log, and two command-line demonstrations.

Requires Python 3.11 or later and nothing outside the standard library.

## Install

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Stability patterns

Each of these wraps a callable and hands back a new one. The wrapped
callables (`breaker`, `debounce_*`, `retry`, `throttle`) are coroutine
functions that take no arguments and return a string, so they are used from
inside a running asyncio event loop.

| Name | Module | What it does |
| --- | --- | --- |
| `breaker(circuit, threshold)` | `cloudpatterns.breaker` | After `threshold` failures in a row, calls raise `ServiceUnreachableError` until `2 << (failures - threshold)` seconds have passed since the last attempt. A success resets the count. |
| `debounce_first(circuit, duration)` | `cloudpatterns.debounce` | Calls `circuit` at most once per `duration` seconds; calls in between get the cached result, or the cached exception raised again. |
| `debounce_last(circuit, duration)` | `cloudpatterns.debounce` | Calls `circuit` only after `duration` seconds pass without a new call; a caller superseded by a later call gets `asyncio.CancelledError`. |
| `retry(effector, retries, delay)` | `cloudpatterns.retry` | Retries a failing call up to `retries` times, sleeping `delay` seconds between attempts and logging a warning each time; the last error is raised when retries run out. |
| `throttle(effector, max_tokens, refill, interval)` | `cloudpatterns.throttle` | Token bucket that starts full with `max_tokens`; `refill` tokens come back every `interval` seconds after the first call, capped at `max_tokens`. A call with an empty bucket raises `TooManyCallsError`. A non-positive `interval` raises `ValueError`. |
| `timeout(func)` | `cloudpatterns.timeout` | Turns a blocking `func(str) -> str` into a coroutine function that runs it in a worker thread. Bound it with `asyncio.timeout(...)`; past the deadline the caller gets `TimeoutError` while `func` finishes in the background. |
| `Future`, `slow_function(delay=2.0)` | `cloudpatterns.future` | `slow_function` starts a task that sleeps `delay` seconds and returns `"I slept for <delay> seconds"`. `await Future.result()` waits for it; later calls return the same outcome at once. |

```python
import asyncio
from cloudpatterns.throttle import throttle, TooManyCallsError

async def ping() -> str:
    return "pong"

async def demo() -> None:
    limited = throttle(ping, max_tokens=1, refill=1, interval=1.0)
    print(await limited())          # pong
    try:
        await limited()
    except TooManyCallsError:
        print("throttled")

asyncio.run(demo())
```

## Scalability

`ShardedMap(nshards)` in `cloudpatterns.sharding` is a thread-safe mapping
whose keys are spread over `nshards` independently locked shards, chosen by a
32-bit FNV-1a hash of `str(key)`. It has `get(key, default)`, `set`,
`delete` (a missing key is ignored), `keys()` and `shard_index(key)`.
A non-positive `nshards` raises `ValueError`.

```python
from cloudpatterns.sharding import ShardedMap

shards = ShardedMap(17)
shards.set("alpha", 1)
shards.get("alpha", None)   # 1
shards.delete("alpha")
shards.keys()               # []
```

## Timers

`timely_fixed(duration=5.0, interval=1.0)` in `cloudpatterns.timely` prints
`tick!` every `interval` seconds until `duration` has passed, then prints
`timer done!` and returns the number of ticks. The ticker thread is always
stopped before it returns.

## Key-value storage

- `KeyValueStore` in `cloudpatterns.store` is a thread-safe in-memory store
  of string keys and values with `put`, `get`, `delete` and `in`; `get` on a
  missing key raises `NoSuchKeyError`, `delete` of a missing key does not.
- `FileTransactionLogger(filename)` in `cloudpatterns.transact` appends
  numbered `PUT` and `DELETE` events (`EventType`) to a file, one
  tab-separated line each, with values URL-encoded. Call `run()` to start the
  background writer, then `write_put` / `write_delete`; `wait()` blocks until
  queued events are on disk. `read_events()` yields the `Event` records
  already in the file and raises `TransactionLogError` on a malformed line,
  a sequence number that does not increase, or a value that cannot be
  decoded. It works as a context manager, and `close()` flushes and stops
  the writer.

```python
from cloudpatterns.store import KeyValueStore, NoSuchKeyError

store = KeyValueStore()
store.put("colour", "blue")
store.get("colour")         # "blue"
store.delete("colour")
try:
    store.get("colour")
except NoSuchKeyError:
    pass
```

## Commands

### Key-value server

    cloudpatterns-server [--host HOST] [--port PORT] [--transaction-log PATH] [--hello MESSAGE]

Replays the transaction log (default `transaction.log`) into a fresh store,
then serves on port 8080 by default:

- `PUT /v1/{key}` stores the request body (201 Created)
- `GET /v1/{key}` returns the value, or 404 `no such key`
- `DELETE /v1/{key}` removes the key (200 OK)

Every change is appended to the transaction log, so the data survives a
restart. `/` and `/v1`, and other methods on `/v1/{key}`, answer
405 Method Not Allowed; any other path answers 404. Each request is logged.
With `--hello MESSAGE` the server answers every request with `MESSAGE`
instead of serving the store.

The same application is available in code: `initialize_transaction_log`,
`make_key_value_handler` and `make_hello_handler` in `cloudpatterns.server`
build WSGI applications.

### cng

    cng flags -s text -n 7 -b extra args
    cng hello [NAME]

`flags` prints the string (default `foo`), integer (default `42`) and
boolean (default `false`) options and the remaining arguments. `hello`
prints `Hello, NAME.`, or `Hello, World.` without a name. With no
subcommand, `cng` prints its help.

### Logging demo

    cloudpatterns-logdemo [sampling|structured|all]

`sampling` logs nine identical records through a `SamplingFilter(3, 3)`:
the first three pass, then one in every three, and `event dropped...` is
printed for each one dropped. `structured` prints records as text with
`key=value` attributes and as JSON lines from `JSONFormatter`. The default
runs both.

`SamplingFilter(initial, thereafter, on_drop)` counts records with the same
level and message within each second; `thereafter` of 0 drops everything
past `initial`.

## What it does not do

The server is the standard library's single-threaded WSGI reference server:
it has no TLS, no authentication, and keys are a single path segment. The
store lives in memory; its only persistence is replaying the transaction
log at start-up, which is never compacted.