"""Completion poller: wait for asynchronously produced MobSF output.

A ``PollSession`` moves through an explicit state machine::

    POLLING -> READY      fetch succeeded
    POLLING -> POLLING    retryable status, deadline not reached (sleep, retry)
    POLLING -> TIMED_OUT  retryable status, deadline reached
    POLLING -> FAILED     any other status, or no response at all

Sleeping uses ``asyncio.sleep`` so concurrent calls keep running while a
session waits.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from errors import PollTimeoutError, RemoteServiceError
from .schemas import DEFAULT_POLL_INTERVAL_MS, DEFAULT_POLL_TIMEOUT_MS

logger = logging.getLogger(__name__)

# Statuses meaning "not produced yet": bad request and not found while the
# scan is still running, too early, rate limited, service unavailable.
RETRYABLE_STATUSES: frozenset[int] = frozenset({400, 404, 425, 429, 503})

Fetcher = Callable[[str], Awaitable[Any]]


def is_retryable(exc: BaseException) -> bool:
    """Return whether *exc* means the artifact is simply not ready yet."""
    return isinstance(exc, RemoteServiceError) and exc.status in RETRYABLE_STATUSES


class PollState(Enum):
    POLLING = "polling"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass
class PollSession:
    """State of one wait on a single identifier; lives for one tool call."""

    identifier: str
    interval_ms: int
    timeout_ms: int
    started_at: float
    attempts: int = 0
    state: PollState = PollState.POLLING
    payload: Any = None
    last_error: Optional[BaseException] = None
    finished_at: Optional[float] = None

    @property
    def deadline(self) -> float:
        return self.started_at + self.timeout_ms / 1000.0

    @property
    def finished(self) -> bool:
        return self.state is not PollState.POLLING

    @property
    def elapsed_ms(self) -> int:
        if self.finished_at is None:
            return 0
        return int((self.finished_at - self.started_at) * 1000)


class ReportPoller:
    """Drives ``PollSession`` transitions against a fetch callable."""

    def __init__(
        self,
        fetch: Fetcher,
        *,
        interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        if timeout_ms < 0:
            raise ValueError("timeout_ms must not be negative")
        self._fetch = fetch
        self._interval_ms = interval_ms
        self._timeout_ms = timeout_ms
        self._clock = clock
        self._sleep = sleep

    def start(self, identifier: str) -> PollSession:
        return PollSession(
            identifier=identifier,
            interval_ms=self._interval_ms,
            timeout_ms=self._timeout_ms,
            started_at=self._clock(),
        )

    async def _attempt(self, session: PollSession) -> bool:
        """Fetch once. True when ready, False on a retryable failure; raises otherwise."""
        session.attempts += 1
        try:
            payload = await self._fetch(session.identifier)
        except Exception as exc:
            session.last_error = exc
            if is_retryable(exc):
                logger.debug(
                    "poll %s attempt %d not ready: %s",
                    session.identifier,
                    session.attempts,
                    exc,
                )
                return False
            self._finish(session, PollState.FAILED)
            logger.info("poll %s failed after %d attempts: %s", session.identifier, session.attempts, exc)
            raise
        session.payload = payload
        self._finish(session, PollState.READY)
        return True

    async def step(self, session: PollSession) -> PollSession:
        """Evaluate one transition of *session*."""
        if session.finished:
            raise RuntimeError(f"poll session for {session.identifier} already {session.state.value}")

        if await self._attempt(session):
            return session

        if self._clock() - session.started_at >= session.timeout_ms / 1000.0:
            self._finish(session, PollState.TIMED_OUT)
            raise PollTimeoutError(session.identifier, session.timeout_ms, session.attempts) from session.last_error

        await self._sleep(session.interval_ms / 1000.0)
        return session

    async def run(self, identifier: str) -> PollSession:
        """Poll until READY; raise on FAILED or TIMED_OUT."""
        session = self.start(identifier)
        while not session.finished:
            await self.step(session)
        return session

    async def probe(self, identifier: str) -> PollSession:
        """Single attempt without waiting.

        The returned session is READY, or still POLLING with ``last_error``
        set when the status was retryable. Hard failures raise.
        """
        session = self.start(identifier)
        await self._attempt(session)
        return session

    def _finish(self, session: PollSession, state: PollState) -> None:
        session.state = state
        session.finished_at = self._clock()


__all__ = [
    "Fetcher",
    "PollSession",
    "PollState",
    "RETRYABLE_STATUSES",
    "ReportPoller",
    "is_retryable",
]
