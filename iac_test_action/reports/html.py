"""Self-contained HTML rendering of a report."""

import html
from collections.abc import Mapping

from iac_test_action.models.report import TestReport
from iac_test_action.models.result import Status, TestOutcome
from iac_test_action.reports.formatting import (
    STATUS_SYMBOLS,
    format_duration,
    format_pass_rate,
    format_timestamp,
)

STATUS_CLASSES: Mapping[Status, str] = {
    "PASS": "pass",
    "FAIL": "fail",
    "SKIP": "skip",
}

STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; background-color: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .header { text-align: center; border-bottom: 2px solid #007bff; padding-bottom: 20px; margin-bottom: 30px; }
        .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; margin-bottom: 30px; }
        .stat-card { background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center; border-left: 4px solid #007bff; }
        .stat-number { font-size: 2em; font-weight: bold; color: #007bff; }
        .stat-label { color: #6c757d; margin-top: 5px; }
        .test-item { display: flex; justify-content: space-between; align-items: center; padding: 15px; margin: 10px 0; border-radius: 5px; }
        .test-pass { background-color: #d4edda; border-left: 4px solid #28a745; }
        .test-fail { background-color: #f8d7da; border-left: 4px solid #dc3545; }
        .test-skip { background-color: #fff3cd; border-left: 4px solid #ffc107; }
        .status { font-weight: bold; padding: 5px 10px; border-radius: 3px; color: white; }
        .status-pass { background-color: #28a745; }
        .status-fail { background-color: #dc3545; }
        .status-skip { background-color: #ffc107; }
        .duration { color: #6c757d; font-size: 0.9em; }
        .error-details { color: #dc3545; font-size: 0.9em; margin-top: 5px; white-space: pre-wrap; }
        .summary { background: #e9ecef; padding: 20px; border-radius: 8px; margin-top: 30px; text-align: center; }
        .progress-bar { width: 100%; height: 20px; background-color: #e9ecef; border-radius: 10px; overflow: hidden; margin: 10px 0; }
        .progress-fill { height: 100%; background-color: #28a745; }
"""


def _stat_card(value: int, label: str, color: str | None = None) -> str:
    style = f' style="color: {color};"' if color else ""
    return f"""
            <div class="stat-card">
                <div class="stat-number"{style}>{value}</div>
                <div class="stat-label">{label}</div>
            </div>"""


def _outcome_item(outcome: TestOutcome) -> str:
    css = STATUS_CLASSES[outcome.status]
    error = (
        f'\n                    <div class="error-details">Error: {html.escape(outcome.error)}</div>'
        if outcome.error
        else ""
    )
    return f"""
            <div class="test-item test-{css}">
                <div>
                    <strong>{html.escape(outcome.name)}</strong>
                    <div class="duration">Duration: {format_duration(outcome.duration)}</div>{error}
                </div>
                <span class="status status-{css}">{STATUS_SYMBOLS[outcome.status]} {outcome.status}</span>
            </div>"""


def render_html(report: TestReport, title: str | None = None) -> str:
    """Render a report as a standalone HTML page."""
    title = html.escape(title or f"{report.test_suite} Report")
    pass_rate = format_pass_rate(report)
    cards = "".join(
        [
            _stat_card(report.total_tests, "Total Tests"),
            _stat_card(report.passed_tests, "Passed", "#28a745"),
            _stat_card(report.failed_tests, "Failed", "#dc3545"),
            _stat_card(report.skipped_tests, "Skipped", "#ffc107"),
        ]
    )
    items = "".join(_outcome_item(outcome) for outcome in report.results)
    if not items:
        items = "\n            <p>No tests were recorded.</p>"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{STYLE}    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🧪 {title}</h1>
            <p><strong>Test Suite:</strong> {html.escape(report.test_suite)}</p>
            <p><strong>Execution Time:</strong> {format_timestamp(report.start_time)} to {format_timestamp(report.end_time)}</p>
            <p><strong>Duration:</strong> {format_duration(report.duration)}</p>
        </div>

        <div class="stats">{cards}
        </div>

        <div>
            <h3>Pass Rate: {pass_rate}</h3>
            <div class="progress-bar">
                <div class="progress-fill" style="width: {pass_rate};"></div>
            </div>
        </div>

        <div class="test-results">
            <h2>📋 Test Results</h2>{items}
        </div>

        <div class="summary">
            <h2>📝 Summary</h2>
            <p><strong>{html.escape(report.summary)}</strong></p>
        </div>
    </div>
</body>
</html>
"""
