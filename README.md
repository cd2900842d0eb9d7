# portwatch

Building blocks for keeping an eye on the network ports open on a host.
Each module covers one concern. Use them on their own or combine them in
your own monitoring loop. The package uses only the standard library.

## Installation

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install ".[test]"
pytest
```

## Modules

Most durations can be given as a `datetime.timedelta` or as a number of seconds.

- `portwatch.scanner`: `Port` holds a number, a protocol and an address. `str(port)` gives `address:number/protocol`. `Scanner(host, min_port, max_port, timeout)` defaults to ports 1 to 65535 and a 0.5 s timeout. `scan()` tries a TCP connection to every port in the range and returns the ports that accepted. It raises `ValueError` for an empty host or an invalid range.
- `portwatch.portmap`: `PortMap` is a thread-safe set of ports keyed by protocol and number. It has `set`, `delete`, `has`, `all` and `len()`. `sync(current)` makes the map match `current` and returns a `Delta` with the `opened` and `closed` ports.
- `portwatch.snapshot`: `save(path, ports)` writes a JSON snapshot stamped with the current UTC time. `load(path)` reads it back as a `Snapshot`. `diff(previous, current)` returns the pair `(opened, closed)`. `Manager(directory, retain_days)` creates the directory and offers `latest_path()` and a timestamped `archive_path()`. Its `prune()` deletes files older than `retain_days` by modification time, except `latest.json`. A `retain_days` of 0 keeps every file.
- `portwatch.topports`: `Counter.record(ports)` counts sightings. `top(n)` returns `Entry` items with the highest count first and lower port numbers first on a tie. `n <= 0` returns all entries. `reset()` clears the counts.
- `portwatch.reporter`: `Reporter(out, Format.TEXT | Format.JSON)` writes one line per `report_opened` or `report_closed` call. A text line looks like `[2024-01-01T12:00:00Z] + [opened] 127.0.0.1:8080/tcp`. A JSON line holds `timestamp`, `kind` and `port`.
- `portwatch.tui`: `Table` keeps port rows with `upsert(port, status)`, `remove(port)` and `len()`. `render(out)` writes a plain-text table with the columns PROTO, PORT, STATUS and SEEN.
- `portwatch.portping`: `Pinger(timeout)` dials ports on `127.0.0.1` over TCP or UDP. The default timeout is 2 s. `ping(port)` returns a `Result` with `alive`, `latency` and `error`. `ping_all(ports)` pings each port in turn. `pipeline(pinger, batches, stop)` yields the results for each batch.
- `portwatch.portschedule`: `Schedule` holds `Entry` windows. An entry has a label, a start and an end, a port range and an optional protocol, and it is active in the interval [start, end). `Gate(schedule).filter(ports)` keeps only the ports that match an active window. If no window is active, it returns every port. The module also has `pipeline`, `print_schedule(out, schedule)` and `summary(schedule)`.
- `portwatch.portstate`: `Tracker` records open ports with `open(port, now)` and `close(port)`. `get(port)` returns a `State` or `None`. It also has `all()` and `len()`.
- `portwatch.portwindow`: `Window(duration)` records sightings of ports keyed by protocol and address. It drops entries not seen within `duration`, and `active()` returns the entries that remain. The module also has `print_active(out, entries)` and `summary(entries)`.
- `portwatch.ratelimit`: `Limiter(cooldown)` has `allow(key)`, which lets a key through at most once per cooldown. `reset(key)` and `flush()` forget keys.
- `portwatch.rollup`: `Rollup(window)` collects `add_opened` and `add_closed` calls. An open and a later close of the same port cancel each other. Once no change has arrived for `window` seconds, it emits one `Event`. Read events with `get(timeout)` or `watch(handler, stop)`. `close()` stops further events.
- `portwatch.sampler`: `Sampler(scan, interval).run(stop)` calls `scan()` every interval and yields a `Sample` each time. A scan that raises an exception is skipped. `pipeline(scan, interval, stop)` does the same in one call.
- `portwatch.suppress`: `SuppressList` silences alerts for a port and protocol until a given time. It has `add`, `remove`, `is_suppressed`, `purge`, `active`, `save(path)` and `load(path)`. `load` ignores a missing file and skips expired entries. The helpers `add_window`, `list_windows` and `clear_expired` work on a stored file and print a confirmation to a stream.
- `portwatch.throttle`: `Throttle(min_gap)` enforces a minimum gap between ticks. Check it with `allow()`, or block until the next tick with `wait()`. It also has `reset()` and `remaining()`.
- `portwatch.trend`: `Tracker(window)` keeps the last `window` open-port counts, with a minimum of 2. `direction()` returns `Direction.RISING`, `FALLING` or `STABLE` by comparing the first and last kept counts. The module also has `pipeline`, `print_samples` and `summary`.
- `portwatch.uptime`: `Tracker(path)` loads saved records from `path` if the file exists. It has `opened`, `seen`, `closed`, `get` and `save()`. `Record.duration()` returns `last_seen - first_seen`.
- `portwatch.watchdog`: `Watchdog(scanner, interval, timeout)` counts heartbeats from `beat()`. `watch(stop)` marks the loop unhealthy when heartbeats go stale and logs a warning. `status()` returns a `HealthStatus`. `ScanLoop(scan, watchdog, out).run(stop)` scans repeatedly, beats the watchdog and puts each result on a queue.
- `portwatch.watcher`: `Watcher(scanner, interval).watch(stop)` yields a `WatchEvent` with `state` set to `"opened"` or `"closed"` whenever the set of open ports changes between scans. `new_pipeline(scanner, PipelineConfig(interval), stop)` does the same. The default interval is 5 s.

## Examples

Scan a range and report the changes:

```python
import sys

from portwatch.portmap import PortMap
from portwatch.reporter import Format, Reporter
from portwatch.scanner import Scanner

scanner = Scanner("127.0.0.1", 1, 1024, 0.2)
ports = PortMap()
reporter = Reporter(sys.stdout, Format.TEXT)

delta = ports.sync(scanner.scan())
for port in delta.opened:
    reporter.report_opened(port)
for port in delta.closed:
    reporter.report_closed(port)
```

Watch a range continuously until a stop event is set:

```python
import threading

from portwatch.scanner import Scanner
from portwatch.watcher import Watcher

stop = threading.Event()
watcher = Watcher(Scanner("127.0.0.1", 8000, 8100, 0.2), 5.0)
for event in watcher.watch(stop):
    print(event.state, event.port)
```

Silence a port for an hour during maintenance:

```python
import sys
from datetime import timedelta

from portwatch.suppress import add_window, list_windows

add_window("suppress.json", 8080, "tcp", timedelta(hours=1), sys.stdout)
list_windows("suppress.json", sys.stdout)
```

## What the package does not do

- It has no command-line program and does not run as a service. You write the loop that calls the scanner and feeds the results to the other modules.
- Scanning covers TCP connect checks on one host only. `Pinger` always dials `127.0.0.1`.
- No module sends alerts anywhere. The reporter and the table writers only write to a text stream that you pass in.
- `portstate.Tracker`, `ratelimit.Limiter` and `rollup.Rollup` are not connected to the scanner or to each other. You call their methods yourself.