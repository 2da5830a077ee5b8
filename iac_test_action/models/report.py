"""Aggregate report over a completed run."""

from collections.abc import Sequence
from datetime import datetime
from typing import Self

from pydantic import model_validator

from iac_test_action.errors import AggregationInconsistency
from iac_test_action.models.base import Model
from iac_test_action.models.result import TestOutcome


class TestReport(Model):
    """Statistics and outcomes for one run of a check battery.

    Field names match the keys of the JSON report document, so dumping and
    re-validating reproduces the report exactly.
    """

    __test__ = False

    test_suite: str
    start_time: datetime
    end_time: datetime
    duration: float
    total_tests: int
    passed_tests: int
    failed_tests: int
    skipped_tests: int
    results: Sequence[TestOutcome]
    summary: str

    @model_validator(mode="after")
    def _counts_add_up(self) -> Self:
        counted = self.passed_tests + self.failed_tests + self.skipped_tests
        if self.total_tests != counted:
            raise AggregationInconsistency(
                f"total_tests={self.total_tests} but passed+failed+skipped={counted}"
            )
        return self

    @property
    def success(self) -> bool:
        """Whether no check failed."""
        return self.failed_tests == 0

    @property
    def pass_rate(self) -> float:
        """Percentage of passed checks, 0.0 for an empty run."""
        if self.total_tests == 0:
            return 0.0
        return self.passed_tests / self.total_tests * 100
