import io

import pytest

from basekit.log import MAX_LOG_LEN, BugError, Logger, LogLevel


class _Clock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def test_log_without_clock():
    out = io.StringIO()
    lg = Logger(out)
    lg.log(LogLevel.INFO, "hello")
    assert out.getvalue() == "<5> hello\n"


def test_log_with_clock_prefix():
    out = io.StringIO()
    lg = Logger(out, clock=_Clock(1_500_000))
    lg.log(LogLevel.ERR, "x")
    assert out.getvalue() == "[  1.500000] <2> x\n"


def test_filtered_by_level():
    out = io.StringIO()
    lg = Logger(out, max_level=LogLevel.WARN)
    assert lg.log(LogLevel.INFO, "quiet") is None
    assert out.getvalue() == ""
    assert lg.log(LogLevel.WARN, "loud") == "<3> loud"


def test_long_message_truncated():
    out = io.StringIO()
    lg = Logger(out)
    line = lg.log(LogLevel.INFO, "a" * 10000)
    assert len(line) < MAX_LOG_LEN
    assert line.startswith("<5> aaa")


def test_once():
    out = io.StringIO()
    lg = Logger(out)
    assert lg.once("k", LogLevel.INFO, "m") is True
    assert lg.once("k", LogLevel.INFO, "m") is False
    assert out.getvalue().count("\n") == 1


def test_first_n():
    out = io.StringIO()
    lg = Logger(out)
    results = [lg.first_n("k", 2, LogLevel.INFO, "m") for _ in range(4)]
    assert results == [True, True, False, False]
    assert out.getvalue().count("\n") == 2


def test_ratelimited_suppresses_and_reports():
    out = io.StringIO()
    clock = _Clock(2_000_000)
    lg = Logger(out, clock=clock)
    assert lg.ratelimited("k", LogLevel.INFO, "m") is True
    clock.now = 2_500_000
    assert lg.ratelimited("k", LogLevel.INFO, "m") is False
    clock.now = 3_100_000
    assert lg.ratelimited("k", LogLevel.INFO, "m") is True
    lines = out.getvalue().splitlines()
    assert len(lines) == 3
    assert lines[1].endswith("k suppressed 1 times")


def test_ratelimited_at_start_is_suppressed():
    lg = Logger(io.StringIO(), clock=_Clock(0))
    assert lg.ratelimited("k", LogLevel.INFO, "m") is False


def test_bug_on_raises():
    out = io.StringIO()
    lg = Logger(out)
    with pytest.raises(BugError, match="ASSERTION 'x > 1' FAILED"):
        lg.bug_on(True, "x > 1", "f.c:3")
    assert "FATAL: f.c:3" in out.getvalue()


def test_bug_on_false_is_silent():
    out = io.StringIO()
    lg = Logger(out)
    lg.bug_on(False, "never")
    assert out.getvalue() == ""


def test_warn_on_does_not_raise():
    out = io.StringIO()
    lg = Logger(out)
    assert lg.warn_on(True, "cond") is True
    assert "WARN:" in out.getvalue()
    assert "ASSERTION 'cond' FAILED" in out.getvalue()