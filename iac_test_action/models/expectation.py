"""Models for plan expectations loaded from expectations YAML files."""

import re
from collections.abc import Sequence
from typing import Any, Literal, Self

from pydantic import Field, model_validator

from iac_test_action.models.base import StrictModel
from iac_test_action.plan_validator import (
    AttributePredicate,
    contains,
    equals,
    first_item,
    matches,
    non_empty,
)

PREDICATE_KEYS = ("equals", "contains", "matches", "non_empty", "first_item_contains")


class AttributeExpectation(StrictModel):
    """One attribute assertion. Exactly one predicate key must be set."""

    key: str = Field(..., description="Attribute name in the resource values")
    on: Literal["values", "record"] = Field(
        default="values",
        description="Look the key up in the resource values or on the record itself",
    )
    equals: Any = None
    contains: str | None = None
    matches: str | None = None
    non_empty: bool | None = None
    first_item_contains: str | None = None

    @model_validator(mode="after")
    def _exactly_one_predicate(self) -> Self:
        given = [name for name in PREDICATE_KEYS if name in self.model_fields_set]
        if len(given) != 1:
            raise ValueError(
                f"attribute {self.key!r} needs exactly one of {PREDICATE_KEYS}, "
                f"got {given or 'none'}"
            )
        if "non_empty" in given and self.non_empty is not True:
            raise ValueError("non_empty can only be set to true")
        if self.matches is not None:
            try:
                re.compile(self.matches)
            except re.error as e:
                raise ValueError(f"invalid matches pattern {self.matches!r}: {e}") from e
        return self

    def to_predicate(self) -> AttributePredicate:
        """Build the predicate this expectation describes."""
        if "equals" in self.model_fields_set:
            return equals(self.equals)
        if self.contains is not None:
            return contains(self.contains)
        if self.matches is not None:
            return matches(self.matches)
        if self.first_item_contains is not None:
            return first_item(contains(self.first_item_contains))
        return non_empty()


class ResourceSelector(StrictModel):
    """Which resource in a module an expectation is about."""

    type: str = Field(..., description="Resource type, e.g. aws_route53_record")
    name_contains: str | None = Field(
        default=None, description="Substring of the resource's logical name"
    )


class ResourceExpectation(StrictModel):
    """A named plan check: a module, optionally a resource, and its attributes."""

    name: str = Field(..., description="Check name reported in the results")
    module: str = Field(..., description="Module address, e.g. module.ses")
    resource: ResourceSelector | None = None
    optional: bool = Field(
        default=False,
        description="Skip instead of fail when the resource is absent "
        "(feature disabled by configuration)",
    )
    attributes: Sequence[AttributeExpectation] = Field(default_factory=list)


class PlanExpectations(StrictModel):
    """Complete expectations document."""

    version: str = Field(..., description="Expectations schema version")
    suite: str = Field(default="Terraform Plan Tests", description="Suite name")
    checks: Sequence[ResourceExpectation] = Field(default_factory=list)
