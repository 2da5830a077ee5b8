"""Typed plan tree decoded from ``terraform show -json`` output.

The raw document is validated once by ``load_plan``; every lookup after that
works on ``PlanTree``/``PlanNode``/``ResourceRecord`` instead of nested dicts.
"""

import json
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Self

from pydantic import Field, ValidationError, field_validator, model_validator

from iac_test_action.errors import PlanDecodeError
from iac_test_action.models.base import Model


class ResourceRecord(Model):
    """One infrastructure object with its configured attribute values."""

    type: str = Field(..., description="Resource kind, e.g. aws_ses_domain_identity")
    name: str | None = Field(default=None, description="Logical name in the module")
    address: str | None = Field(default=None, description="Full resource address")
    mode: str | None = Field(default=None, description="managed or data")
    values: Mapping[str, Any] = Field(default_factory=dict)

    @field_validator("values", mode="before")
    @classmethod
    def _null_values_are_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class PlanNode(Model):
    """A module in the plan tree.

    The root module carries no address; child modules are addressed with
    their dotted path (``module.ses``).
    """

    address: str | None = None
    resources: Sequence[ResourceRecord] = Field(default_factory=list)
    child_modules: Sequence["PlanNode"] = Field(default_factory=list)

    @field_validator("resources", "child_modules", mode="before")
    @classmethod
    def _null_lists_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_child_addresses(self) -> Self:
        seen: set[str | None] = set()
        for child in self.child_modules:
            if child.address in seen:
                raise ValueError(
                    f"duplicate module address {child.address!r} "
                    f"under {self.address or '<root>'}"
                )
            seen.add(child.address)
        return self

    def iter_resources(self) -> Iterator[ResourceRecord]:
        """Yield this module's resources, then those of nested modules."""
        yield from self.resources
        for child in self.child_modules:
            yield from child.iter_resources()


class PlanTree(Model):
    """A decoded plan (or post-apply state) document."""

    format_version: str | None = None
    terraform_version: str | None = None
    root_module: PlanNode

    @property
    def modules(self) -> Sequence[PlanNode]:
        """Top-level modules, i.e. the root module's children."""
        return self.root_module.child_modules

    def resource_count(self) -> int:
        """Count resources across the whole tree."""
        return sum(1 for _ in self.root_module.iter_resources())

    def is_empty(self) -> bool:
        """Check whether the tree holds no resources at all."""
        return self.resource_count() == 0


def _extract_root_module(document: Mapping[str, Any]) -> Any:
    """Locate the root module in a plan, state or bare module document."""
    for section in ("planned_values", "values"):
        block = document.get(section)
        if isinstance(block, Mapping) and "root_module" in block:
            return block["root_module"]
    if "root_module" in document:
        return document["root_module"]
    raise PlanDecodeError(
        "Document has no planned_values.root_module, values.root_module "
        "or root_module"
    )


def load_plan(document: Mapping[str, Any] | str | bytes) -> PlanTree:
    """Decode a plan document into a typed tree.

    Args:
        document: Parsed JSON mapping, or raw JSON text of
            ``terraform show -json`` for a plan file or a state.

    Returns:
        The validated plan tree

    Raises:
        PlanDecodeError: If the document is not valid JSON, has no root
            module, or the module tree is malformed

    """
    if isinstance(document, str | bytes):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise PlanDecodeError(f"Plan is not valid JSON: {e}") from e

    if not isinstance(document, Mapping):
        raise PlanDecodeError(
            f"Plan document must be an object, got {type(document).__name__}"
        )

    root_module = _extract_root_module(document)

    try:
        return PlanTree.model_validate(
            {
                "format_version": document.get("format_version"),
                "terraform_version": document.get("terraform_version"),
                "root_module": root_module,
            }
        )
    except ValidationError as e:
        raise PlanDecodeError(f"Malformed plan tree: {e}") from e


def load_plan_file(path: Path) -> PlanTree:
    """Read and decode a plan document from disk."""
    return load_plan(path.read_bytes())
