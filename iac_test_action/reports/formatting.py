"""Shared formatting helpers for the text-based report renderers."""

from collections.abc import Mapping
from datetime import datetime

from iac_test_action.models.report import TestReport
from iac_test_action.models.result import Status

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

STATUS_SYMBOLS: Mapping[Status, str] = {
    "PASS": "✅",
    "FAIL": "❌",
    "SKIP": "⏭️",
}


def format_timestamp(value: datetime) -> str:
    """Format a timestamp, e.g. ``2024-05-01 10:00:00 UTC``."""
    return value.strftime(TIMESTAMP_FORMAT).rstrip()


def format_duration(seconds: float) -> str:
    """Format seconds compactly, e.g. ``150ms``, ``2.5s``, ``1m30s``, ``1h0m5s``."""
    seconds = round(seconds, 3)
    if seconds == 0:
        return "0s"
    if seconds < 1:
        return f"{round(seconds * 1000, 3):g}ms"
    if seconds < 60:
        return f"{seconds:g}s"

    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    text = f"{int(minutes)}m{round(secs, 3):g}s"
    if hours:
        text = f"{int(hours)}h{text}"
    return text


def format_pass_rate(report: TestReport) -> str:
    """Format the pass rate to one decimal, ``0.0%`` for an empty run."""
    return f"{report.pass_rate:.1f}%"
