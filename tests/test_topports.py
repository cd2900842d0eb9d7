from portwatch.scanner import Port
from portwatch.topports import Counter


def p(number, proto):
    return Port(number=number, protocol=proto)


def test_record_and_top_basic():
    c = Counter()
    c.record([p(80, "tcp"), p(443, "tcp")])
    c.record([p(80, "tcp")])
    top = c.top(0)
    assert len(top) == 2
    assert (top[0].port.number, top[0].count) == (80, 2)
    assert (top[1].port.number, top[1].count) == (443, 1)


def test_top_limits_results():
    c = Counter()
    for port in [22, 80, 443, 8080, 9090]:
        c.record([p(port, "tcp")])
    assert [e.port.number for e in c.top(3)] == [22, 80, 443]


def test_top_tie_break_by_port_number():
    c = Counter()
    c.record([p(443, "tcp"), p(80, "tcp")])
    assert c.top(0)[0].port.number == 80


def test_reset():
    c = Counter()
    c.record([p(80, "tcp")])
    c.reset()
    assert c.top(0) == []


def test_protocols_tracked_separately():
    c = Counter()
    c.record([p(53, "tcp"), p(53, "udp")])
    c.record([p(53, "udp")])
    top = c.top(0)
    assert len(top) == 2
    counts = {e.port.protocol: e.count for e in top}
    assert counts == {"udp": 2, "tcp": 1}


def test_top_returns_copies():
    c = Counter()
    c.record([p(80, "tcp")])
    c.top(0)[0].count = 99
    assert c.top(0)[0].count == 1