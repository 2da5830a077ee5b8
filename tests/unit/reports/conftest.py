"""Fixtures for report rendering tests."""

from datetime import datetime, timedelta, timezone

import pytest

from iac_test_action.aggregator import build_report
from iac_test_action.models.report import TestReport
from iac_test_action.models.result import TestOutcome

START = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mixed_report() -> TestReport:
    """One passed, one failed and one skipped check."""
    outcomes = [
        TestOutcome(name="A", status="PASS", duration=2.0),
        TestOutcome(name="B", status="FAIL", duration=1.0, error="boom"),
        TestOutcome(name="C", status="SKIP", duration=0.0),
    ]
    return build_report(outcomes, "SES Tests", START, START + timedelta(seconds=3))


@pytest.fixture
def passing_report() -> TestReport:
    """Two passed checks."""
    outcomes = [
        TestOutcome(name="EmailIdentityPlan", status="PASS", duration=0.25),
        TestOutcome(name="DomainIdentityPlan", status="PASS", duration=90.0),
    ]
    return build_report(outcomes, "SES Tests", START, START + timedelta(minutes=2))


@pytest.fixture
def empty_report() -> TestReport:
    """A run with no outcomes."""
    return build_report([], "SES Tests", START, START)
