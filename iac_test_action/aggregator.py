"""Result aggregator for collecting check outcomes into a report."""

import threading
from collections.abc import Sequence
from datetime import datetime

from iac_test_action.models.report import TestReport
from iac_test_action.models.result import TestOutcome


def summarize(passed: int, failed: int, total: int) -> str:
    """Build the one-line run summary."""
    if failed == 0:
        return f"✅ ALL TESTS PASSED! {passed}/{total} tests successful"
    return f"❌ {failed}/{total} tests failed, {passed} passed"


def build_report(
    outcomes: Sequence[TestOutcome],
    suite_name: str,
    start_time: datetime,
    end_time: datetime,
) -> TestReport:
    """Tally outcomes into a report.

    Pure: the same outcomes and timestamps always produce an equal report.
    """
    passed = failed = skipped = 0
    for outcome in outcomes:
        match outcome.status:
            case "PASS":
                passed += 1
            case "FAIL":
                failed += 1
            case "SKIP":
                skipped += 1

    total = len(outcomes)
    return TestReport(
        test_suite=suite_name,
        start_time=start_time,
        end_time=end_time,
        duration=max((end_time - start_time).total_seconds(), 0.0),
        total_tests=total,
        passed_tests=passed,
        failed_tests=failed,
        skipped_tests=skipped,
        results=list(outcomes),
        summary=summarize(passed, failed, total),
    )


class ResultAggregator:
    """Collects outcomes from a battery of checks for one run.

    ``record`` may be called concurrently from threads or tasks. ``finalize``
    must only be called after every check has been joined; the aggregator
    does not track in-flight checks.
    """

    def __init__(self) -> None:
        """Initialize an empty aggregator."""
        self._outcomes: list[TestOutcome] = []
        self._lock = threading.Lock()

    def record(self, outcome: TestOutcome) -> None:
        """Append an outcome."""
        with self._lock:
            self._outcomes.append(outcome)

    @property
    def outcomes(self) -> Sequence[TestOutcome]:
        """Snapshot of the recorded outcomes in completion order."""
        with self._lock:
            return tuple(self._outcomes)

    def failed(self) -> Sequence[TestOutcome]:
        """Outcomes with FAIL status."""
        return [o for o in self.outcomes if o.status == "FAIL"]

    def finalize(
        self, suite_name: str, start_time: datetime, end_time: datetime
    ) -> TestReport:
        """Build the report for everything recorded so far."""
        return build_report(self.outcomes, suite_name, start_time, end_time)
