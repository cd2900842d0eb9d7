from portwatch.portmap import PortMap
from portwatch.scanner import Port


def p(proto, number):
    return Port(number=number, protocol=proto)


def test_set_and_has():
    m = PortMap()
    port = p("tcp", 8080)
    assert not m.has(port)
    m.set(port)
    assert m.has(port)


def test_delete():
    m = PortMap()
    port = p("tcp", 443)
    m.set(port)
    m.delete(port)
    assert not m.has(port)


def test_delete_missing_is_noop():
    m = PortMap()
    m.delete(p("tcp", 1))
    assert len(m) == 0


def test_len():
    m = PortMap()
    assert len(m) == 0
    m.set(p("tcp", 80))
    m.set(p("udp", 53))
    assert len(m) == 2


def test_all():
    m = PortMap()
    m.set(p("tcp", 22))
    m.set(p("tcp", 80))
    assert sorted(x.number for x in m.all()) == [22, 80]


def test_proto_distinction():
    m = PortMap()
    m.set(p("tcp", 53))
    m.set(p("udp", 53))
    assert len(m) == 2


def test_set_overwrites():
    m = PortMap()
    m.set(p("tcp", 8080))
    m.set(p("tcp", 8080))
    assert len(m) == 1


def test_sync_reports_opened_and_closed():
    m = PortMap()
    m.set(p("tcp", 22))
    m.set(p("tcp", 80))
    delta = m.sync([p("tcp", 80), p("tcp", 443)])
    assert [x.number for x in delta.opened] == [443]
    assert [x.number for x in delta.closed] == [22]
    assert sorted(x.number for x in m.all()) == [80, 443]


def test_sync_no_change():
    m = PortMap()
    m.set(p("tcp", 80))
    delta = m.sync([p("tcp", 80)])
    assert delta.opened == [] and delta.closed == []
    assert len(m) == 1