import os
import time

import pytest

from portwatch.scanner import Port
from portwatch.snapshot import Manager, diff, load, save


def make_ports(*nums):
    return [Port(number=n, protocol="tcp") for n in nums]


def test_save_and_load(tmp_path):
    path = tmp_path / "snap.json"
    ports = make_ports(80, 443, 8080)
    save(path, ports)
    snap = load(path)
    assert snap.ports == ports
    assert snap.timestamp.year >= 2024


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load(tmp_path / "nonexistent" / "snap.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("not json{")
    with pytest.raises(ValueError):
        load(path)


def test_diff_opened():
    opened, closed = diff(make_ports(80, 443), make_ports(80, 443, 8080))
    assert [p.number for p in opened] == [8080]
    assert closed == []


def test_diff_closed():
    opened, closed = diff(make_ports(80, 443, 8080), make_ports(80, 443))
    assert [p.number for p in closed] == [8080]
    assert opened == []


def test_diff_no_change():
    ports = make_ports(80, 443)
    assert diff(ports, ports) == ([], [])


def test_diff_both_opened_and_closed():
    opened, closed = diff(make_ports(80, 443, 8080), make_ports(80, 443, 9090))
    assert [p.number for p in opened] == [9090]
    assert [p.number for p in closed] == [8080]


def test_new_manager_creates_dir(tmp_path):
    d = tmp_path / "snaps"
    Manager(d, 0)
    assert d.is_dir()


def test_latest_path(tmp_path):
    m = Manager(tmp_path, 0)
    assert m.latest_path().name == "latest.json"


def test_archive_path_format(tmp_path):
    m = Manager(tmp_path, 0)
    name = m.archive_path().name
    assert name.startswith("snapshot_")
    assert name.endswith("Z.json")
    assert len(name) == len("snapshot_20060102T150405Z.json")


def _age(path, days):
    t = time.time() - days * 86400
    os.utime(path, (t, t))


def test_prune_removes_old_files(tmp_path):
    m = Manager(tmp_path, 7)
    old = tmp_path / "snapshot_old.json"
    old.write_text("{}")
    _age(old, 10)
    new = tmp_path / "snapshot_new.json"
    new.write_text("{}")
    m.prune()
    assert not old.exists()
    assert new.exists()


def test_prune_keeps_latest(tmp_path):
    m = Manager(tmp_path, 7)
    latest = m.latest_path()
    latest.write_text("{}")
    _age(latest, 30)
    m.prune()
    assert latest.exists()


def test_prune_zero_retain_keeps_all(tmp_path):
    m = Manager(tmp_path, 0)
    old = tmp_path / "snapshot_old.json"
    old.write_text("{}")
    _age(old, 100)
    m.prune()
    assert old.exists()