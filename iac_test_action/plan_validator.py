"""Lookups and assertions over a decoded plan tree.

Every function here is pure: it reads the typed tree and either returns what
it found or raises a ``ValidationFailure``. ``find_*`` functions report
absence with ``None`` so callers can decide whether a missing resource is
fatal (it may be gated behind a disabled feature); ``require_*`` functions
raise instead.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from iac_test_action.errors import (
    AttributeMismatch,
    ResourceNotFound,
    StructuralMismatch,
)
from iac_test_action.models.plan import PlanNode, PlanTree, ResourceRecord

RECORD_FIELDS = ("type", "name", "address", "mode")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


class AttributePredicate(ABC):
    """A named test applied to one attribute value."""

    #: Shape reported when ``accepts`` rejects a value.
    shape: str = "any value"

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable statement of what is expected."""

    def accepts(self, value: Any) -> bool:
        """Check that the value has a shape this predicate can evaluate."""
        return True

    @abstractmethod
    def __call__(self, value: Any) -> bool:
        """Evaluate the predicate against a value of an accepted shape."""


@dataclass(frozen=True)
class Equals(AttributePredicate):
    """Value equals the expected value."""

    expected: Any

    @property
    def description(self) -> str:
        return f"equal to {self.expected!r}"

    def __call__(self, value: Any) -> bool:
        return bool(value == self.expected)


@dataclass(frozen=True)
class Contains(AttributePredicate):
    """String contains a substring, or a sequence/mapping contains an item."""

    item: Any
    shape = "string, sequence or mapping"

    @property
    def description(self) -> str:
        return f"containing {self.item!r}"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str | Mapping) or _is_sequence(value)

    def __call__(self, value: Any) -> bool:
        if isinstance(value, str):
            return isinstance(self.item, str) and self.item in value
        return self.item in value


@dataclass(frozen=True)
class NonEmpty(AttributePredicate):
    """String, sequence or mapping has at least one element."""

    shape = "string, sequence or mapping"

    @property
    def description(self) -> str:
        return "a non-empty value"

    def accepts(self, value: Any) -> bool:
        return value is None or isinstance(value, str | Mapping) or _is_sequence(value)

    def __call__(self, value: Any) -> bool:
        return value is not None and len(value) > 0


@dataclass(frozen=True)
class Matches(AttributePredicate):
    """String matches a regular expression (``re.search`` semantics)."""

    pattern: str
    shape = "string"

    @property
    def description(self) -> str:
        return f"matching /{self.pattern}/"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def __call__(self, value: Any) -> bool:
        return re.search(self.pattern, value) is not None


@dataclass(frozen=True)
class FirstItem(AttributePredicate):
    """First element of a sequence satisfies an inner predicate."""

    inner: AttributePredicate
    shape = "sequence"

    @property
    def description(self) -> str:
        return f"a sequence whose first item is {self.inner.description}"

    def accepts(self, value: Any) -> bool:
        return _is_sequence(value)

    def __call__(self, value: Any) -> bool:
        if not value:
            return False
        first = value[0]
        return self.inner.accepts(first) and self.inner(first)


def equals(expected: Any) -> AttributePredicate:
    """Expect an exact value."""
    return Equals(expected)


def contains(item: Any) -> AttributePredicate:
    """Expect a substring (for strings) or a member (for sequences/mappings)."""
    return Contains(item)


def non_empty() -> AttributePredicate:
    """Expect a non-empty string, sequence or mapping."""
    return NonEmpty()


def matches(pattern: str) -> AttributePredicate:
    """Expect a string matching a regular expression."""
    return Matches(pattern)


def first_item(inner: AttributePredicate) -> AttributePredicate:
    """Expect a sequence whose first element satisfies ``inner``."""
    return FirstItem(inner)


def find_module(tree: PlanTree | PlanNode, address: str) -> PlanNode | None:
    """Find a top-level module by exact address.

    Only the immediate module list is searched, not nested child modules.

    Args:
        tree: Plan tree, or a module whose children should be searched
        address: Module address, e.g. ``module.ses`` (case-sensitive)

    Returns:
        The first module with that address, or None

    """
    modules = tree.modules if isinstance(tree, PlanTree) else tree.child_modules
    for module in modules:
        if module.address == address:
            return module
    return None


def require_module(tree: PlanTree | PlanNode, address: str) -> PlanNode:
    """Find a top-level module or raise ``StructuralMismatch``."""
    module = find_module(tree, address)
    if module is None:
        raise StructuralMismatch(address)
    return module


def _resource_matches(
    record: ResourceRecord, type_: str, name_contains: str | None
) -> bool:
    if record.type != type_:
        return False
    if name_contains is None:
        return True
    return record.name is not None and name_contains in record.name


def find_resources(
    module: PlanNode, type_: str, name_contains: str | None = None
) -> Sequence[ResourceRecord]:
    """Return every resource of a type (optionally filtered by name) in listed order."""
    return [
        record
        for record in module.resources
        if _resource_matches(record, type_, name_contains)
    ]


def find_resource(
    module: PlanNode, type_: str, name_contains: str | None = None
) -> ResourceRecord | None:
    """Return the first resource of a type, optionally filtered by name substring.

    Several resources of one type are legal (e.g. multiple route53 records),
    so pass ``name_contains`` to pick a specific one.
    """
    for record in module.resources:
        if _resource_matches(record, type_, name_contains):
            return record
    return None


def require_resource(
    module: PlanNode, type_: str, name_contains: str | None = None
) -> ResourceRecord:
    """Find a resource or raise ``ResourceNotFound``."""
    record = find_resource(module, type_, name_contains)
    if record is None:
        raise ResourceNotFound(module.address, type_, name_contains)
    return record


def assert_value(key: str, value: Any, predicate: AttributePredicate) -> Any:
    """Assert a predicate on a value that has already been looked up.

    Raises:
        AttributeMismatch: If the value has the wrong shape or fails the predicate

    """
    if not predicate.accepts(value):
        raise AttributeMismatch(
            key,
            f"{predicate.description} ({predicate.shape})",
            value,
            reason="has unexpected shape",
        )
    if not predicate(value):
        raise AttributeMismatch(key, predicate.description, value)
    return value


def assert_attribute(
    record: ResourceRecord, key: str, predicate: AttributePredicate
) -> Any:
    """Assert a predicate on one of the record's attribute values.

    Returns:
        The attribute value

    Raises:
        AttributeMismatch: If the attribute is missing, has the wrong shape,
            or fails the predicate

    """
    if key not in record.values:
        raise AttributeMismatch(key, predicate.description, None, reason="is missing")
    return assert_value(key, record.values[key], predicate)


def assert_record_field(
    record: ResourceRecord, field: str, predicate: AttributePredicate
) -> Any:
    """Assert a predicate on the record's own type, name, address or mode."""
    if field not in RECORD_FIELDS:
        raise ValueError(f"Unknown record field {field!r}, expected one of {RECORD_FIELDS}")
    value = getattr(record, field)
    if value is None:
        raise AttributeMismatch(field, predicate.description, None, reason="is missing")
    return assert_value(field, value, predicate)
