"""Tests for console rendering."""

from iac_test_action.models.report import TestReport
from iac_test_action.reports.console import render_console


def test_header_and_statistics(mixed_report: TestReport) -> None:
    """Renders the banner, header block and statistics."""
    text = render_console(mixed_report)
    lines = text.splitlines()

    assert lines[1] == "=" * 80
    assert lines[2] == "🧪 SES TESTS REPORT"
    assert "📅 Test Suite: SES Tests" in lines
    assert "⏰ Start Time: 2024-05-01 10:00:00 UTC" in lines
    assert "⏰ End Time:   2024-05-01 10:00:03 UTC" in lines
    assert "⏱️  Duration:   3s" in lines
    assert "📈 Total Tests:   3" in lines
    assert "✅ Passed Tests:  1" in lines
    assert "❌ Failed Tests:  1" in lines
    assert "⏭️  Skipped Tests: 1" in lines
    assert "📊 Pass Rate:     33.3%" in lines


def test_outcome_listing(mixed_report: TestReport) -> None:
    """Lists every outcome with a 1-based index and errors underneath."""
    lines = render_console(mixed_report).splitlines()

    index = lines.index("1. A - ✅ PASS (2s)")
    assert lines[index + 1] == "2. B - ❌ FAIL (1s)"
    assert lines[index + 2] == "   Error: boom"
    assert lines[index + 3] == "3. C - ⏭️ SKIP (0s)"


def test_failure_closing(mixed_report: TestReport) -> None:
    """Ends with the summary and remedial advice when checks failed."""
    text = render_console(mixed_report)

    assert "❌ 1/3 tests failed, 1 passed" in text
    assert "Some tests failed" in text
    assert "Congratulations" not in text
    assert text.endswith("=" * 80 + "\n")


def test_success_closing(passing_report: TestReport) -> None:
    """Congratulates when nothing failed."""
    text = render_console(passing_report)

    assert "✅ ALL TESTS PASSED! 2/2 tests successful" in text
    assert "🎉 Congratulations! All tests passed successfully!" in text
    assert "Some tests failed" not in text
    assert "1. EmailIdentityPlan - ✅ PASS (250ms)" in text
    assert "2. DomainIdentityPlan - ✅ PASS (1m30s)" in text


def test_empty_report_omits_pass_rate(empty_report: TestReport) -> None:
    """Omits the pass rate line when no checks ran."""
    text = render_console(empty_report)

    assert "Pass Rate" not in text
    assert "📈 Total Tests:   0" in text


def test_custom_title(mixed_report: TestReport) -> None:
    """Uses the given banner title."""
    assert "🧪 TERRAFORM AWS SES TEST REPORT" in render_console(
        mixed_report, title="TERRAFORM AWS SES TEST REPORT"
    )


def test_is_byte_stable(mixed_report: TestReport) -> None:
    """Renders identical output for identical input."""
    assert render_console(mixed_report) == render_console(mixed_report)
