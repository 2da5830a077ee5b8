"""Condensed CI summary renderings: a Markdown step summary and a stats document."""

import json
import re
from collections.abc import Mapping
from typing import Any

from iac_test_action.models.report import TestReport
from iac_test_action.models.result import Status
from iac_test_action.reports.formatting import (
    STATUS_SYMBOLS,
    format_duration,
    format_pass_rate,
)

STATUS_LABELS: Mapping[Status, str] = {
    "PASS": "Pass",
    "FAIL": "Fail",
    "SKIP": "Skip",
}

PASSED_BADGE = "![Tests Passed](https://img.shields.io/badge/tests-passed-success)"
FAILED_BADGE = "![Tests Failed](https://img.shields.io/badge/tests-failed-critical)"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _emphasis(text: str) -> str:
    return re.sub(r"([\\*_`])", r"\\\1", text)


def _fence(text: str) -> str:
    """Backtick fence longer than any backtick run inside ``text``."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    return "`" * max(3, longest + 1)


def render_markdown(report: TestReport, title: str | None = None) -> str:
    """Render a Markdown summary suitable for a CI job summary page."""
    title = title or f"{report.test_suite} Results"
    lines = [
        f"## 🧪 {title}",
        "",
        PASSED_BADGE if report.success else FAILED_BADGE,
        "",
        "### 📊 Summary",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total Tests | {report.total_tests} |",
        f"| ✅ Passed | {report.passed_tests} |",
        f"| ❌ Failed | {report.failed_tests} |",
        f"| ⏭️ Skipped | {report.skipped_tests} |",
        f"| 📊 Pass Rate | {format_pass_rate(report)} |",
        f"| ⏱️ Duration | {format_duration(report.duration)} |",
        "",
        "### 📋 Test Details",
        "",
        "| Test Name | Status | Duration |",
        "|-----------|--------|----------|",
    ]
    for outcome in report.results:
        status = f"{STATUS_SYMBOLS[outcome.status]} {STATUS_LABELS[outcome.status]}"
        lines.append(
            f"| {_cell(outcome.name)} | {status} | {format_duration(outcome.duration)} |"
        )

    failures = [o for o in report.results if o.status == "FAIL" and o.error]
    if failures:
        lines.extend(["", "### ❌ Failed Tests", ""])
        for outcome in failures:
            error = outcome.error or ""
            fence = _fence(error)
            lines.extend([f"**{_emphasis(outcome.name)}**", fence, error, fence, ""])

    lines.extend(["", "### 📝 Summary", "", report.summary])
    return "\n".join(lines) + "\n"


def stats(report: TestReport) -> dict[str, Any]:
    """Aggregate counts for downstream automation."""
    return {
        "total": report.total_tests,
        "passed": report.passed_tests,
        "failed": report.failed_tests,
        "skipped": report.skipped_tests,
        "passRate": round(report.pass_rate, 1),
        "summary": report.summary,
    }


def render_stats(report: TestReport) -> str:
    """Render the aggregate counts as a compact JSON document."""
    return json.dumps(stats(report), ensure_ascii=False) + "\n"
