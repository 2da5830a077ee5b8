"""Structured JSON rendering of a report."""

from iac_test_action.models.report import TestReport


def render_json(report: TestReport) -> str:
    """Serialize every report field, including each outcome."""
    return report.model_dump_json(indent=2) + "\n"


def parse_json(text: str | bytes) -> TestReport:
    """Rebuild a report from ``render_json`` output."""
    return TestReport.model_validate_json(text)
