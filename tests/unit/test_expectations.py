"""Tests for loading expectations files."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from iac_test_action.expectations import load_expectations
from iac_test_action.models.expectation import AttributeExpectation
from iac_test_action.plan_validator import Contains, Equals, FirstItem, Matches, NonEmpty

EXPECTATIONS = """
version: "1"
suite: Terraform AWS SES Tests
checks:
  - name: DomainIdentityPlanned
    module: module.ses
    resource:
      type: aws_ses_domain_identity
    attributes:
      - key: domain
        non_empty: true
  - name: DMARCRecordPlanned
    module: module.ses
    optional: true
    resource:
      type: aws_route53_record
      name_contains: dmarc
    attributes:
      - key: records
        first_item_contains: v=DMARC1
"""


async def test_load_expectations(tmp_path: Path) -> None:
    """Loads and validates a YAML expectations file."""
    path = tmp_path / "expectations.yaml"
    path.write_text(EXPECTATIONS)

    expectations = await load_expectations(path)

    assert expectations.suite == "Terraform AWS SES Tests"
    assert [c.name for c in expectations.checks] == [
        "DomainIdentityPlanned",
        "DMARCRecordPlanned",
    ]
    dmarc = expectations.checks[1]
    assert dmarc.optional
    assert dmarc.resource is not None
    assert dmarc.resource.name_contains == "dmarc"


async def test_empty_file_is_invalid(tmp_path: Path) -> None:
    """Requires a version."""
    path = tmp_path / "expectations.yaml"
    path.write_text("")

    with pytest.raises(ValidationError, match="version"):
        await load_expectations(path)


async def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    """Rejects misspelled keys."""
    path = tmp_path / "expectations.yaml"
    path.write_text('version: "1"\nchecks:\n  - name: x\n    modul: module.ses\n')

    with pytest.raises(ValidationError):
        await load_expectations(path)


async def test_invalid_yaml(tmp_path: Path) -> None:
    """Propagates YAML syntax errors."""
    path = tmp_path / "expectations.yaml"
    path.write_text("checks: [unterminated")

    with pytest.raises(yaml.YAMLError):
        await load_expectations(path)


async def test_missing_file(tmp_path: Path) -> None:
    """Propagates a missing file."""
    with pytest.raises(FileNotFoundError):
        await load_expectations(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    ("data", "predicate_type"),
    [
        ({"key": "type", "equals": "TXT"}, Equals),
        ({"key": "enabled", "equals": None}, Equals),
        ({"key": "name", "contains": "_dmarc"}, Contains),
        ({"key": "name", "matches": "^_dmarc"}, Matches),
        ({"key": "domain", "non_empty": True}, NonEmpty),
        ({"key": "records", "first_item_contains": "v=DMARC1"}, FirstItem),
    ],
)
def test_attribute_predicate(data: dict[str, object], predicate_type: type) -> None:
    """Builds the predicate named by the single predicate key."""
    assert isinstance(AttributeExpectation.model_validate(data).to_predicate(), predicate_type)


@pytest.mark.parametrize(
    "data",
    [
        {"key": "type"},
        {"key": "type", "equals": "TXT", "contains": "T"},
        {"key": "domain", "non_empty": False},
        {"key": "type", "on": "state", "equals": "TXT"},
    ],
)
def test_invalid_attribute(data: dict[str, object]) -> None:
    """Rejects attributes without exactly one valid predicate."""
    with pytest.raises(ValidationError):
        AttributeExpectation.model_validate(data)


def test_invalid_matches_pattern() -> None:
    """Rejects a regular expression that does not compile when loading."""
    with pytest.raises(ValidationError, match="invalid matches pattern"):
        AttributeExpectation.model_validate({"key": "name", "matches": "(_dmarc"})
