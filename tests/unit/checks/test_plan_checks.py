"""Tests for expectation-driven plan checks."""

import pytest

from iac_test_action.aggregator import ResultAggregator
from iac_test_action.checks.plan import build_plan_checks, plan_check
from iac_test_action.errors import (
    AttributeMismatch,
    ResourceNotFound,
    SkipCheck,
    StructuralMismatch,
)
from iac_test_action.models.expectation import PlanExpectations, ResourceExpectation
from iac_test_action.models.plan import PlanTree, load_plan
from iac_test_action.runner import CheckRunner
from iac_test_action.testing.plans import ses_domain_plan


@pytest.fixture
def tree() -> PlanTree:
    """Decoded domain-verification plan."""
    return load_plan(ses_domain_plan())


def expectation(**kwargs: object) -> ResourceExpectation:
    return ResourceExpectation.model_validate({"name": "check", "module": "module.ses", **kwargs})


def test_module_only_expectation(tree: PlanTree) -> None:
    """Passes when the module exists."""
    plan_check(tree, expectation())()


def test_missing_module(tree: PlanTree) -> None:
    """Fails with StructuralMismatch for an unplanned module."""
    check = plan_check(tree, expectation(module="module.route53"))

    with pytest.raises(StructuralMismatch):
        check()


def test_resource_attributes(tree: PlanTree) -> None:
    """Applies every attribute predicate to the selected record."""
    check = plan_check(
        tree,
        expectation(
            resource={"type": "aws_route53_record", "name_contains": "dmarc"},
            attributes=[
                {"key": "name", "contains": "_dmarc"},
                {"key": "type", "equals": "TXT"},
                {"key": "ttl", "equals": 300},
                {"key": "records", "first_item_contains": "v=DMARC1"},
            ],
        ),
    )

    check()


def test_attribute_mismatch(tree: PlanTree) -> None:
    """Fails on the first attribute that does not hold."""
    check = plan_check(
        tree,
        expectation(
            resource={"type": "aws_ses_domain_identity"},
            attributes=[{"key": "domain", "equals": "other.com"}],
        ),
    )

    with pytest.raises(AttributeMismatch, match="other.com"):
        check()


def test_record_field_attribute(tree: PlanTree) -> None:
    """Checks record fields when the attribute targets the record."""
    check = plan_check(
        tree,
        expectation(
            resource={"type": "aws_ses_domain_identity"},
            attributes=[{"key": "type", "on": "record", "contains": "dmarc"}],
        ),
    )

    with pytest.raises(AttributeMismatch) as exc_info:
        check()

    assert exc_info.value.actual == "aws_ses_domain_identity"


def test_missing_resource_fails(tree: PlanTree) -> None:
    """Fails with ResourceNotFound for a required resource."""
    check = plan_check(tree, expectation(resource={"type": "aws_ses_email_identity"}))

    with pytest.raises(ResourceNotFound):
        check()


def test_missing_optional_resource_skips() -> None:
    """Skips when an optional resource is absent."""
    tree = load_plan(ses_domain_plan(with_dmarc=False))
    check = plan_check(
        tree,
        expectation(
            resource={"type": "aws_route53_record", "name_contains": "dmarc"},
            optional=True,
        ),
    )

    with pytest.raises(SkipCheck, match="feature presumably disabled"):
        check()


async def test_build_plan_checks_runs_every_expectation(tree: PlanTree) -> None:
    """Builds one named check per expectation."""
    expectations = PlanExpectations.model_validate(
        {
            "version": "1",
            "checks": [
                {"name": "ModuleExists", "module": "module.ses"},
                {
                    "name": "DMARCPlanned",
                    "module": "module.ses",
                    "resource": {"type": "aws_route53_record", "name_contains": "dmarc"},
                },
                {
                    "name": "EmailIdentityPlanned",
                    "module": "module.ses",
                    "resource": {"type": "aws_ses_email_identity"},
                    "optional": True,
                },
                {"name": "Route53Module", "module": "module.route53"},
            ],
        }
    )
    checks = build_plan_checks(tree, expectations, timeout=5.0)
    aggregator = ResultAggregator()

    await CheckRunner(aggregator=aggregator).run_all(checks)

    assert [c.name for c in checks] == [
        "ModuleExists",
        "DMARCPlanned",
        "EmailIdentityPlanned",
        "Route53Module",
    ]
    assert all(c.timeout == 5.0 for c in checks)
    statuses = {o.name: o.status for o in aggregator.outcomes}
    assert statuses == {
        "ModuleExists": "PASS",
        "DMARCPlanned": "PASS",
        "EmailIdentityPlanned": "SKIP",
        "Route53Module": "FAIL",
    }
