"""Models for check outcomes."""

from typing import Literal

from pydantic import Field

from iac_test_action.models.base import Model

type Status = Literal["PASS", "FAIL", "SKIP"]


class TestOutcome(Model):
    """Terminal result of a single named check."""

    __test__ = False

    name: str
    status: Status
    duration: float = Field(..., ge=0, description="Elapsed wall time in seconds")
    error: str | None = None
