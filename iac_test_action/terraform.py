"""Thin async wrapper around the terraform CLI."""

import asyncio
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


class TerraformError(RuntimeError):
    """A terraform command exited with a non-zero status."""

    def __init__(self, command: Sequence[str], exit_code: int, stderr: str) -> None:
        super().__init__(
            f"terraform {' '.join(command)} failed with exit code {exit_code}: {stderr}"
        )
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


def var_args(variables: Mapping[str, Any]) -> Sequence[str]:
    """Render variables as ``-var`` arguments; non-strings are JSON encoded."""
    args: list[str] = []
    for key, value in variables.items():
        rendered = value if isinstance(value, str) else json.dumps(value, sort_keys=True)
        args.extend(["-var", f"{key}={rendered}"])
    return args


@dataclass(frozen=True, kw_only=True)
class Terraform:
    """Runs terraform commands in one working directory."""

    working_dir: Path
    variables: Mapping[str, Any] = field(default_factory=dict)
    binary: str = "terraform"

    async def _run(self, *args: str) -> str:
        log.info("Running terraform %s in %s", args[0], self.working_dir)
        process = await asyncio.create_subprocess_exec(
            self.binary,
            *args,
            cwd=self.working_dir,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            raise TerraformError(args, process.returncode or 1, stderr.decode().strip())

        return stdout.decode()

    async def init(self) -> None:
        """Initialize the working directory."""
        await self._run("init", "-input=false", "-no-color")

    async def plan(self, plan_file: Path) -> None:
        """Write a plan file."""
        await self._run(
            "plan", "-input=false", "-no-color", f"-out={plan_file}", *var_args(self.variables)
        )

    async def show_json(self, plan_file: Path | None = None) -> str:
        """Return ``terraform show -json`` output for a plan file or the current state."""
        args = ["show", "-json", "-no-color"]
        if plan_file is not None:
            args.append(str(plan_file))
        return await self._run(*args)

    async def apply(self) -> None:
        """Apply changes without prompting."""
        await self._run(
            "apply", "-input=false", "-no-color", "-auto-approve", *var_args(self.variables)
        )

    async def destroy(self) -> None:
        """Destroy everything this configuration created."""
        await self._run(
            "destroy", "-input=false", "-no-color", "-auto-approve", *var_args(self.variables)
        )
