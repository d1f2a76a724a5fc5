# centrallog

Building blocks for a central station that collects measurements from a
fleet of edge data loggers. The loggers expose their sensors over Modbus
TCP. The package uses only the standard library and covers:

- **Modbus register map** (`centrallog.modbus_map`): decodes the header
  registers HR0–HR9 into a `ModbusHeader`, decodes the 8-register analog
  blocks (sensor id, flags, big-endian IEEE 754 float32) into
  `AnalogSample` objects, and unpacks discrete-input and coil payloads
  into booleans. `PollSnapshot` holds the result of one poll cycle.
- **Poll planning** (`centrallog.poll_plan`): `plan_poll_reads` lists the
  reads for one poll cycle as `PollPdu` values.
- **SQLite persistence** (`centrallog.database` and the repositories):
  opens the database, applies a schema script to a new file, migrates
  older files, and stores application settings, the sensor catalog,
  sensor readings and system events.
- **Helpers**: UTC ISO 8601 timestamps (`centrallog.datetimes`), event
  severity for display and chart limits (`centrallog.display`), and plain
  dataclass records (`centrallog.models`).

## Decoding a poll cycle

```python
from centrallog.poll_plan import plan_poll_reads
from centrallog.modbus_map import parse_header, parse_analog_chunk, unpack_discrete

header = parse_header([1, 0x03, 0x6650, 0x2A00, 2, 8, 4, 0, 0, 0])
if header.is_valid():          # map version HR0 must be 1
    plan = plan_poll_reads(header.na, header.ndi, header.ndo)

analogs = parse_analog_chunk(analog_registers)   # 8 registers per sensor
di_bits = unpack_discrete(di_registers, header.ndi)
```

The plan starts with an FC03 read of the 10 header registers, then FC03
reads of the analog blocks in chunks of at most 15 blocks (120
registers, under the FC03 limit of 125), then FC02 for the discrete
inputs and FC01 for the coils when their counts are positive.

`unpack_discrete` accepts both payload forms: one register per bit when
there are at least as many registers as bits, otherwise 16 bits per word,
least significant bit first.

## Storing data

```python
from centrallog.database import Database
from centrallog.settings_repo import SettingsRepository
from centrallog.readings_repo import SensorReadingRepository
from centrallog.catalog_repo import SensorCatalogRepository
from centrallog.models import SensorReading

with Database() as db:
    db.open(Database.default_path(), "schema.sql")
    conn = db.connection()

    settings = SettingsRepository(conn).get()
    sensor_id = SensorCatalogRepository(conn).ensure_exists(7, 0, "ANALOG")
    SensorReadingRepository(conn).insert_batch([SensorReading(sensor_id=sensor_id, value=21.5)])
```

`Database.open` takes the database path (`":memory:"` for an in-memory
database) and the path of the SQL schema script. The script is run,
statement by statement, only when the database is new; an existing file
is migrated to schema version 3 instead, and a file with a newer version
is refused. By default the database lives at
`~/.central-logger/central-logger.db`.

The repositories:

- `SettingsRepository`: `get()` and `update(settings)` for the single
  `app_settings` row.
- `SensorCatalogRepository`: `ensure_exists`, `upsert`,
  `find_by_logger_and_edge_id`, `list_by_logger_id` and
  `prune_orphan_sensors`, which marks sensors no longer on the wire as
  inactive without deleting their history.
- `SensorReadingRepository`: `insert_batch`, `purge_older_than` and
  `count_for_sensor`.
- `EventRepository`: `insert`, `list_recent` and
  `list_recent_with_logger_name`.

Database failures raise `DatabaseError`.

## What the package does not do

- It ships no schema script; the caller supplies the SQL file that
  creates the tables.
- It has no repository for the logger list itself (`logger_info`); the
  `LoggerInfo` record exists, but reading and writing those rows is left
  to the caller.
- It opens no network connections: there is no Modbus TCP client, no
  poll scheduler, and no client for the loggers' REST configuration API.
  It decodes and plans; the caller does the I/O.
- It has no command-line tool and no user interface.