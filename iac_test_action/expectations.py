"""Loader for plan expectations YAML files."""

import asyncio
from pathlib import Path

import yaml

from iac_test_action.models.expectation import PlanExpectations


async def load_expectations(path: Path) -> PlanExpectations:
    """Load and validate an expectations file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the document does not match the schema

    """
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    data = yaml.safe_load(text) or {}
    return PlanExpectations.model_validate(data)
