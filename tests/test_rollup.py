import queue
import threading
import time

from portwatch.rollup import Rollup
from portwatch.scanner import Port


def make_port(proto, number):
    return Port(number=number, protocol=proto)


def test_flush_emits_batched_events():
    r = Rollup(0.03)
    r.add_opened(make_port("tcp", 8080))
    r.add_opened(make_port("tcp", 9090))
    r.add_closed(make_port("udp", 53))
    ev = r.get(timeout=0.5)
    assert ev is not None
    assert len(ev.opened) == 2
    assert len(ev.closed) == 1
    assert {p.number for p in ev.opened} == {8080, 9090}


def test_opposite_events_cancel():
    r = Rollup(0.03)
    r.add_opened(make_port("tcp", 8080))
    r.add_closed(make_port("tcp", 8080))
    ev = r.get(timeout=0.5)
    assert ev is not None
    assert len(ev.opened) == 0
    assert len(ev.closed) == 1
    assert ev.closed[0].number == 8080


def test_timer_resets_on_new_event():
    r = Rollup(0.04)
    start = time.monotonic()
    r.add_opened(make_port("tcp", 1111))
    time.sleep(0.02)
    r.add_opened(make_port("tcp", 2222))
    ev = r.get(timeout=1.0)
    elapsed = time.monotonic() - start
    assert ev is not None
    assert elapsed >= 0.05
    assert len(ev.opened) == 2


def test_get_times_out_without_events():
    r = Rollup(0.02)
    assert r.get(timeout=0.1) is None


def test_watch_consumes_events():
    r = Rollup(0.02)
    r.add_opened(make_port("tcp", 443))
    received = queue.Queue()
    stop = threading.Event()
    thread = threading.Thread(target=r.watch, args=(received.put, stop), daemon=True)
    thread.start()
    try:
        ev = received.get(timeout=1.0)
    finally:
        stop.set()
        thread.join(timeout=1.0)
    assert [p.number for p in ev.opened] == [443]
    assert ev.closed == [] or len(ev.closed) == 0
    assert r.get(timeout=0.05) is None


def test_watch_stops_on_stop_event():
    r = Rollup(0.05)
    stop = threading.Event()
    thread = threading.Thread(target=r.watch, args=(lambda ev: None, stop), daemon=True)
    thread.start()
    stop.set()
    thread.join(timeout=1.0)
    assert not thread.is_alive()


def test_close_stops_watch_and_cancels_pending_flush():
    r = Rollup(0.05)
    r.add_opened(make_port("tcp", 80))
    received = []
    thread = threading.Thread(target=r.watch, args=(received.append,), daemon=True)
    thread.start()
    r.close()
    thread.join(timeout=1.0)
    assert not thread.is_alive()
    time.sleep(0.1)
    assert received == []
    assert r.get(timeout=0.1) is None