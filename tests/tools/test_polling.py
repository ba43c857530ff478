import asyncio
import time

import httpx
import pytest

from errors import ErrorKind, PollTimeoutError, RemoteServiceError
from mobsf_client import REPORT_JSON_PATH
from tools.polling import PollState, ReportPoller, is_retryable
from tools_wait_for_report import wait_for_report


class _FakeClock:
    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _scripted_fetch(*outcomes):
    calls = []

    async def fetch(identifier):
        calls.append(identifier)
        outcome = outcomes[min(len(calls), len(outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    return fetch, calls


def test_retryable_statuses():
    for status in (400, 404, 425, 429, 503):
        assert is_retryable(RemoteServiceError("x", status=status))
    for status in (401, 403, 500):
        assert not is_retryable(RemoteServiceError("x", status=status))
    assert not is_retryable(RemoteServiceError("ConnectError: refused"))
    assert not is_retryable(ValueError("nope"))


def test_wait_for_report_ready_on_third_attempt(mobsf):
    report = {"app_name": "Demo", "package_name": "com.example"}
    mobsf.add(
        "POST",
        REPORT_JSON_PATH,
        (404, {"report": "Report not Found"}),
        (404, {"report": "Report not Found"}),
        (200, report),
    )

    session = asyncio.run(wait_for_report(mobsf.client(), "abc", interval_ms=10, timeout_ms=1000))

    assert session.state is PollState.READY
    assert session.payload == report
    assert session.attempts == 3
    assert len(mobsf.calls(REPORT_JSON_PATH)) == 3


def test_wait_for_report_times_out(mobsf):
    mobsf.add("POST", REPORT_JSON_PATH, (404, {"report": "Report not Found"}))

    started = time.monotonic()
    with pytest.raises(PollTimeoutError) as exc:
        asyncio.run(wait_for_report(mobsf.client(), "abc", interval_ms=10, timeout_ms=50))
    elapsed = time.monotonic() - started

    assert exc.value.error_kind == ErrorKind.TIMEOUT
    assert "abc" in exc.value.message
    assert isinstance(exc.value.__cause__, RemoteServiceError)
    assert elapsed < 2.0
    assert len(mobsf.calls(REPORT_JSON_PATH)) >= 2


def test_hard_failure_stops_on_first_attempt(mobsf):
    mobsf.add("POST", REPORT_JSON_PATH, (401, {"error": "You are unauthorized to make this request."}))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(wait_for_report(mobsf.client(), "abc", interval_ms=10, timeout_ms=1000))

    assert exc.value.status == 401
    assert len(mobsf.calls(REPORT_JSON_PATH)) == 1


def test_transport_failure_fails_session_with_same_error():
    refused = RemoteServiceError("ConnectError: connection refused")
    fetch, calls = _scripted_fetch(refused)
    poller = ReportPoller(fetch, interval_ms=10, timeout_ms=1000)

    async def _run():
        session = poller.start("abc")
        with pytest.raises(RemoteServiceError) as exc:
            await poller.step(session)
        return session, exc.value

    session, error = asyncio.run(_run())

    assert error is refused
    assert session.state is PollState.FAILED
    assert session.last_error is refused
    assert calls == ["abc"]


def test_rate_limited_then_ready():
    fetch, calls = _scripted_fetch(RemoteServiceError("x", status=429), {"ok": True})
    clock = _FakeClock()
    poller = ReportPoller(fetch, interval_ms=250, timeout_ms=1000, clock=clock, sleep=clock.sleep)

    session = asyncio.run(poller.run("abc"))

    assert session.state is PollState.READY
    assert session.attempts == 2
    assert clock.sleeps == [0.25]
    assert session.elapsed_ms == 250


def test_fake_clock_times_out_after_deadline():
    not_ready = RemoteServiceError("x", status=404)
    fetch, calls = _scripted_fetch(not_ready)
    clock = _FakeClock()
    poller = ReportPoller(fetch, interval_ms=250, timeout_ms=750, clock=clock, sleep=clock.sleep)

    async def _run():
        session = poller.start("abc")
        with pytest.raises(PollTimeoutError):
            while not session.finished:
                await poller.step(session)
        return session

    session = asyncio.run(_run())

    assert session.state is PollState.TIMED_OUT
    assert session.attempts == 4
    assert clock.sleeps == [0.25, 0.25, 0.25]
    assert session.last_error is not_ready


def test_zero_timeout_makes_exactly_one_attempt():
    fetch, calls = _scripted_fetch(RemoteServiceError("x", status=503))
    clock = _FakeClock()
    poller = ReportPoller(fetch, interval_ms=100, timeout_ms=0, clock=clock, sleep=clock.sleep)

    with pytest.raises(PollTimeoutError):
        asyncio.run(poller.run("abc"))

    assert calls == ["abc"]
    assert clock.sleeps == []


def test_step_after_finish_raises():
    fetch, _ = _scripted_fetch({"ok": True})
    poller = ReportPoller(fetch, interval_ms=10, timeout_ms=100)

    async def _run():
        session = await poller.run("abc")
        with pytest.raises(RuntimeError):
            await poller.step(session)

    asyncio.run(_run())


def test_probe_reports_pending_without_sleeping():
    fetch, calls = _scripted_fetch(RemoteServiceError("x", status=429))
    clock = _FakeClock()
    poller = ReportPoller(fetch, clock=clock, sleep=clock.sleep)

    session = asyncio.run(poller.probe("abc"))

    assert session.state is PollState.POLLING
    assert session.attempts == 1
    assert isinstance(session.last_error, RemoteServiceError)
    assert clock.sleeps == []


def test_concurrent_sessions_interleave():
    order = []

    async def fetch(identifier):
        order.append(identifier)
        if order.count(identifier) < 3:
            raise RemoteServiceError("x", status=404)
        return identifier

    poller = ReportPoller(fetch, interval_ms=5, timeout_ms=1000)

    async def _run():
        return await asyncio.gather(poller.run("a"), poller.run("b"))

    first, second = asyncio.run(_run())

    assert first.payload == "a"
    assert second.payload == "b"
    assert order[:2] == ["a", "b"]


def test_invalid_poller_arguments():
    fetch, _ = _scripted_fetch({})
    with pytest.raises(ValueError):
        ReportPoller(fetch, interval_ms=0)
    with pytest.raises(ValueError):
        ReportPoller(fetch, timeout_ms=-1)


def test_transport_exception_from_http_client_is_not_retried(mobsf):
    mobsf.add("POST", REPORT_JSON_PATH, httpx.ConnectError("connection refused"))

    with pytest.raises(RemoteServiceError) as exc:
        asyncio.run(wait_for_report(mobsf.client(), "abc", interval_ms=10, timeout_ms=1000))

    assert exc.value.error_kind == ErrorKind.TRANSPORT
    assert len(mobsf.calls(REPORT_JSON_PATH)) == 1
