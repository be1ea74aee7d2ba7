# signalstash

A small HTTP service that receives sensor readings encoded as protobuf
messages and stores them in RedisTimeSeries.

## Installation

```
pip install .
```

A Redis server with the RedisTimeSeries module must be reachable.

## Running the server

```
signalstash
```

The command takes no options besides `--help`; it is configured through
environment variables:

| Variable              | Default                  | Meaning                                  |
|-----------------------|--------------------------|------------------------------------------|
| `BIND_ADDRESS`        | `0.0.0.0:20120`          | IP address and port to listen on         |
| `LOG_LEVEL`           | `INFO`                   | Log level name or number (see below)     |
| `REDIS_URL`           | `redis://localhost:6379` | Redis connection URL                     |
| `SENSOR_DATUM_PREFIX` | `signalstashrs`          | Prefix of the time-series keys           |

`LOG_LEVEL` accepts `trace`, `debug`, `info`, `warn` or `error` in any
letter case, or a number from 1 (error) to 5 (trace). Anything else makes
startup fail with `ValueError`.

`BIND_ADDRESS` must be a literal IP address and a port, such as
`127.0.0.1:8080` or `[::1]:8080`; host names are rejected when the server
starts.

## Endpoints

- `GET /healthz`: returns `ok` while the process is alive.
- `GET /readyz`: returns `ready` when Redis answers `PING`; otherwise
  responds with 500 and a correlation id that also appears in the log.
- `GET /startz`: returns `started`.
- `POST /ingest`: the body is one encoded `SensorData` message. On success
  the reading is written with `TS.ADD` to the key
  `<prefix>:<device_id>:<domain>`, with labels `device_id` and `domain`,
  and the response is 204 No Content. Malformed protobuf, a device id that
  is not UTF-8, or a Redis failure gives 500 with a correlation id.

The `SensorData` message has the fields `timestamp` (uint64), `datum`
(float), `domain` (enum: `UNSPECIFIED`, `SOUND_PRESSURE_LEVEL`) and
`device_id` (bytes). When it builds the key and labels, the service uses the
domain's name, or `UNKNOWN` for a domain value it does not recognise. The
sample is stored under the time, in whole seconds, at which the server
receives it; the `timestamp` in the message is not used.

## Library use

```python
from signalstash.sensor import Domain, SensorData

reading = SensorData(timestamp=1723839123, datum=42.5,
                     domain=Domain.SOUND_PRESSURE_LEVEL,
                     device_id=b"example-device")
payload = reading.encode()
assert SensorData.decode(payload) == reading
```

`SensorData.decode` and `SensorDataBatch.decode` raise
`signalstash.sensor.DecodeError` (a `ValueError`) for bytes that are not a
valid message. Unknown fields are skipped.

Other building blocks:

- `signalstash.config.Settings.from_env_vars(env)` reads the settings above
  from any mapping; `parse_log_level(value)` converts a level name or number.
- `signalstash.store.RedisStore(url)` offers `check_connectivity()` and
  `ts_add(key, timestamp, datum, device_id, domain)`.
- `signalstash.routes.health_routes(state)` and `ingest_routes(state)`
  return Starlette applications for an `AppState`; `series_key(prefix,
  device_id, domain)` gives the key a reading is stored under.
- `signalstash.application.Application.build(env)` assembles the service and
  `await app.run()` serves it with uvicorn.

## Generating a sample payload

```
signalstash-gen-sample
```

This writes an encoded sample reading to
`tests/http/sample_sensor_data.bin` (choose another file with
`--output PATH`), which you can then post to the service:

```
curl -X POST --data-binary @tests/http/sample_sensor_data.bin \
     -H "Content-Type: application/x-protobuf" http://localhost:20120/ingest
```

## What it does not do

- `/ingest` takes one `SensorData` message per request. `SensorDataBatch`
  can be encoded and decoded, but no endpoint accepts batches.
- The `Content-Type` header of ingest requests is not checked.
- Readings are never read back: there is no query endpoint.

## Tests

```
pip install .[test]
pytest
```