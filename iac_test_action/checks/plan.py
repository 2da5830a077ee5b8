"""Checks that validate a decoded plan against declared expectations."""

from collections.abc import Callable, Sequence

from iac_test_action.errors import ResourceNotFound, SkipCheck
from iac_test_action.models.expectation import PlanExpectations, ResourceExpectation
from iac_test_action.models.plan import PlanTree
from iac_test_action.plan_validator import (
    assert_attribute,
    assert_record_field,
    find_resource,
    require_module,
)
from iac_test_action.runner import Check


def plan_check(tree: PlanTree, expectation: ResourceExpectation) -> Callable[[], None]:
    """Build the check function for one expectation."""

    def check() -> None:
        module = require_module(tree, expectation.module)
        if expectation.resource is None:
            return

        selector = expectation.resource
        record = find_resource(module, selector.type, selector.name_contains)
        if record is None:
            if expectation.optional:
                raise SkipCheck(
                    f"{selector.type} not planned in {expectation.module}; "
                    "feature presumably disabled"
                )
            raise ResourceNotFound(module.address, selector.type, selector.name_contains)

        for attribute in expectation.attributes:
            if attribute.on == "record":
                assert_record_field(record, attribute.key, attribute.to_predicate())
            else:
                assert_attribute(record, attribute.key, attribute.to_predicate())

    return check


def build_plan_checks(
    tree: PlanTree, expectations: PlanExpectations, timeout: float | None = None
) -> Sequence[Check]:
    """Turn every expectation into a named check over the same plan tree."""
    return [
        Check(name=expectation.name, func=plan_check(tree, expectation), timeout=timeout)
        for expectation in expectations.checks
    ]
