# respcheck

Building blocks for checking servers that speak the Redis serialization protocol
(RESP2): values, a wire encoder and decoder, TCP connections that log their traffic,
and reference models for the data such checks need. The package uses only the
standard library.

## Modules

- `respcheck.value`: the frozen `Value` dataclass and its `ValueType` enum, with the
  constructors `simple_string`, `bulk_string`, `integer`, `error`, `array`,
  `string_array`, `nil` and `nil_array`. `Value.formatted_string()` renders a value for
  logs (arrays as indented JSON); `Value.to_serializable()` turns it into plain
  strings, ints and lists.
- `respcheck.formatter`: `prettify(json_text)` lays out JSON with two-space indents,
  keeping short arrays on one line.
- `respcheck.encoder`: `encode(value)` returns the wire bytes of a `Value`;
  `encode_full_resync_rdb_file(contents)` frames an RDB payload as sent after
  `FULLRESYNC` (length prefix, no trailing CRLF).
- `respcheck.decoder`: `decode(data)` returns the first value in `data` and the number
  of bytes it took; `decode_full_resync_rdb_file(data)` does the same for an RDB
  payload. Both raise `IncompleteInputError` when more bytes are needed and
  `InvalidInputError` when the bytes can never form a valid value. Both derive from
  `DecodeError`, whose message shows the received bytes with a marker under the
  offending offset.
- `respcheck.connection`: `RespConnection` wraps a connected socket. It sends commands,
  values or raw bytes, reads values (waiting up to two seconds by default, or
  `read_value_with_timeout(timeout)`), reads RDB payloads, keeps sent and received
  byte counters, and calls the hooks in `RespConnectionCallbacks`. `connect(addr,
  callbacks)` opens a connection to `host:port`, retrying for about five seconds.
  A connection is a context manager.
- `respcheck.instrumented`: `InstrumentedRespConnection` logs every command sent (as a
  `redis-cli` line), every value and every raw byte string through a `logging`
  logger, prefixing messages with the connection's identifier. Create one with
  `new_from_addr(logger, addr, identifier)` or `new_from_conn(logger, sock,
  identifier)`. `quote_cli_command` quotes arguments the way those log lines show them.
- `respcheck.hints`: `log_friendly_error` and `log_friendly_bind_error` log hints for
  common failures (EOF, connection reset, empty reply, address already in use).
- `respcheck.location`: `Coordinates`, `Location` and `LocationSet`. `geo_code()` gives
  the 52-bit geohash Redis stores as a sorted-set score, `decode_geo_code` returns the
  center of a geohash cell, and `distance_from` computes the haversine distance
  between cell centers. `generate_random_location_set(count)` builds random data.
- `respcheck.sorted_set`: `SortedSet` of `SortedSetMember`, ordered by score and then
  by name, and `generate_sorted_set_with_random_members(count, same_score_count)`.
- `respcheck.rdb`: `RDBFileCreator` writes an RDB file of `KeyValuePair` string keys
  (with optional millisecond expiries) into a fresh temporary directory;
  `formatted_hexdump(data)` renders bytes for debug logs.

## Example

```python
from respcheck import value
from respcheck.decoder import IncompleteInputError, decode
from respcheck.encoder import encode

wire = encode(value.string_array(["SET", "key", "hello"]))
decoded, consumed = decode(wire)
assert consumed == len(wire)
print(decoded.formatted_string())

try:
    decode(b"$5\r\nhel")
except IncompleteInputError as exc:
    print(exc)
```

```python
from respcheck.rdb import KeyValuePair, RDBFileCreator

with RDBFileCreator() as creator:
    creator.write([KeyValuePair("key", "value")])
    print(creator.path, len(creator.contents()))
```

## What it does not do

There is no command-line tool and no test runner. The package does not start or stop
the server under test, and it holds no sequence of checks for particular commands;
it provides the pieces such checks are written from.

## Running the tests

```
pip install -e .[test]
pytest
```