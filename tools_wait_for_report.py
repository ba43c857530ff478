"""Tools that wait for, or check on, a report that MobSF is still producing."""
from __future__ import annotations

from typing import Any, Dict

from mobsf_client import MobSFClient
from tools.polling import PollSession, PollState, ReportPoller
from tools.schemas import DEFAULT_POLL_INTERVAL_MS, DEFAULT_POLL_TIMEOUT_MS
from tools_report import project_metadata


def wait_for_report_tool_def() -> dict:
    return {
        "name": "wait_for_report",
        "description": (
            "Wait until the JSON report for `hash` is available, polling every `interval_ms` until "
            "`timeout_ms` elapses. Not-ready answers (400, 404, 425, 429, 503) are retried; any other "
            "failure is returned immediately."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "hash": {"type": "string", "description": "File hash of the scanned app"},
                "interval_ms": {
                    "type": "integer",
                    "minimum": 1,
                    "default": DEFAULT_POLL_INTERVAL_MS,
                    "description": "Delay between attempts in milliseconds",
                },
                "timeout_ms": {
                    "type": "integer",
                    "minimum": 0,
                    "default": DEFAULT_POLL_TIMEOUT_MS,
                    "description": "Give up after this many milliseconds",
                },
            },
            "required": ["hash"],
        },
    }


async def wait_for_report(
    client: MobSFClient,
    file_hash: str,
    *,
    interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
) -> PollSession:
    poller = ReportPoller(client.fetch_report, interval_ms=interval_ms, timeout_ms=timeout_ms)
    return await poller.run(file_hash)


async def wait_for_report_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    session = await wait_for_report(
        client,
        args["hash"],
        interval_ms=args["interval_ms"],
        timeout_ms=args["timeout_ms"],
    )
    return {
        "status": session.state.value,
        "hash": session.identifier,
        "attempts": session.attempts,
        "elapsed_ms": session.elapsed_ms,
        "report": session.payload,
    }


def get_scan_status_tool_def() -> dict:
    return {
        "name": "get_scan_status",
        "description": (
            "Check once, without waiting, whether the report for `hash` is ready. Returns `ready` with "
            "basic app metadata, or `pending` while MobSF is still working."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "hash": {"type": "string", "description": "File hash of the scanned app"},
            },
            "required": ["hash"],
        },
    }


async def get_scan_status_impl(client: MobSFClient, args: Dict[str, Any]) -> Dict[str, Any]:
    session = await ReportPoller(client.fetch_report).probe(args["hash"])
    if session.state is PollState.READY:
        return {
            "status": "ready",
            "hash": session.identifier,
            "metadata": project_metadata(session.payload),
        }
    return {
        "status": "pending",
        "hash": session.identifier,
        "detail": str(session.last_error),
    }


__all__ = [
    "get_scan_status_impl",
    "get_scan_status_tool_def",
    "wait_for_report",
    "wait_for_report_impl",
    "wait_for_report_tool_def",
]
