"""Plain-text console rendering of a report."""

from iac_test_action.models.report import TestReport
from iac_test_action.reports.formatting import (
    STATUS_SYMBOLS,
    format_duration,
    format_pass_rate,
    format_timestamp,
)

WIDTH = 80


def _section(lines: list[str], title: str) -> None:
    lines.extend(["", "-" * WIDTH, title, "-" * WIDTH])


def render_console(report: TestReport, title: str | None = None) -> str:
    """Render a report as fixed-width text for a terminal."""
    title = title or f"{report.test_suite.upper()} REPORT"
    lines = [
        "",
        "=" * WIDTH,
        f"🧪 {title}",
        "=" * WIDTH,
        f"📅 Test Suite: {report.test_suite}",
        f"⏰ Start Time: {format_timestamp(report.start_time)}",
        f"⏰ End Time:   {format_timestamp(report.end_time)}",
        f"⏱️  Duration:   {format_duration(report.duration)}",
    ]

    _section(lines, "📊 TEST STATISTICS")
    lines.extend(
        [
            f"📈 Total Tests:   {report.total_tests}",
            f"✅ Passed Tests:  {report.passed_tests}",
            f"❌ Failed Tests:  {report.failed_tests}",
            f"⏭️  Skipped Tests: {report.skipped_tests}",
        ]
    )
    if report.total_tests > 0:
        lines.append(f"📊 Pass Rate:     {format_pass_rate(report)}")

    _section(lines, "📋 DETAILED TEST RESULTS")
    for index, outcome in enumerate(report.results, start=1):
        symbol = STATUS_SYMBOLS[outcome.status]
        lines.append(
            f"{index}. {outcome.name} - {symbol} {outcome.status} "
            f"({format_duration(outcome.duration)})"
        )
        if outcome.error:
            lines.append(f"   Error: {outcome.error}")

    _section(lines, "📝 SUMMARY")
    lines.append(report.summary)

    if report.success:
        lines.extend(["", "🎉 Congratulations! All tests passed successfully!"])
    else:
        lines.extend(
            [
                "",
                "⚠️  Some tests failed. Please review the errors above and fix the issues.",
                "💡 Check the test logs for more detailed error information.",
            ]
        )

    lines.extend(["", "=" * WIDTH])
    return "\n".join(lines) + "\n"
