"""Error taxonomy for plan validation, check execution and report rendering."""

from pathlib import Path
from typing import Any


class ValidationFailure(AssertionError):
    """Base for plan validation failures.

    Subclasses AssertionError so a failed validation inside a check is
    reported against that check exactly like a plain ``assert``.
    """


class StructuralMismatch(ValidationFailure):
    """The plan tree does not contain an expected module."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Module not found in plan: {address}")
        self.address = address


class ResourceNotFound(ValidationFailure):
    """A module does not contain a resource of the expected type/name."""

    def __init__(
        self,
        module_address: str | None,
        resource_type: str,
        name_contains: str | None = None,
    ) -> None:
        target = resource_type
        if name_contains is not None:
            target = f"{resource_type} (name containing {name_contains!r})"
        super().__init__(
            f"Resource {target} not found in module {module_address or '<root>'}"
        )
        self.module_address = module_address
        self.resource_type = resource_type
        self.name_contains = name_contains


class AttributeMismatch(ValidationFailure):
    """A resource attribute is missing, has the wrong shape or fails its predicate."""

    def __init__(
        self, key: str, expected: str, actual: Any, reason: str = "mismatch"
    ) -> None:
        super().__init__(
            f"Attribute {key!r} {reason}: expected {expected}, actual {actual!r}"
        )
        self.key = key
        self.expected = expected
        self.actual = actual
        self.reason = reason


class PlanDecodeError(ValueError):
    """The raw plan document cannot be decoded into a plan tree."""


class AggregationInconsistency(RuntimeError):
    """Report counters do not add up; indicates a defect in outcome recording."""


class RenderIOFailure(OSError):
    """A report target could not be written."""

    def __init__(self, target: str, path: Path, cause: BaseException) -> None:
        super().__init__(f"Failed to write {target} report to {path}: {cause}")
        self.target = target
        self.path = path
        self.cause = cause


class SkipCheck(Exception):
    """Raised from inside a check to record it as skipped."""
