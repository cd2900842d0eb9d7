import time
from datetime import timedelta

from portwatch.ratelimit import Limiter


def test_allow_first_event_passes():
    limiter = Limiter(0.1)
    assert limiter.allow("tcp:8080") is True


def test_allow_second_event_suppressed():
    limiter = Limiter(0.1)
    limiter.allow("tcp:8080")
    assert limiter.allow("tcp:8080") is False


def test_allow_after_cooldown_passes():
    limiter = Limiter(0.02)
    limiter.allow("tcp:8080")
    time.sleep(0.03)
    assert limiter.allow("tcp:8080") is True


def test_different_keys_are_independent():
    limiter = Limiter(0.1)
    limiter.allow("tcp:8080")
    assert limiter.allow("udp:9090") is True


def test_reset_allows_immediate_retry():
    limiter = Limiter(0.1)
    limiter.allow("tcp:8080")
    limiter.reset("tcp:8080")
    assert limiter.allow("tcp:8080") is True


def test_flush_clears_all_keys():
    limiter = Limiter(0.1)
    limiter.allow("tcp:8080")
    limiter.allow("udp:53")
    limiter.flush()
    assert limiter.allow("tcp:8080") is True
    assert limiter.allow("udp:53") is True


def test_timedelta_cooldown_accepted():
    limiter = Limiter(timedelta(seconds=10))
    assert limiter.cooldown == 10.0
    limiter.allow("k")
    assert limiter.allow("k") is False