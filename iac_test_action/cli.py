"""CLI entry point for the infrastructure deployment test action."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path

import yaml

from iac_test_action.aggregator import ResultAggregator
from iac_test_action.checks.plan import build_plan_checks
from iac_test_action.checks.ses import SesInspector, build_ses_checks
from iac_test_action.config import DEFAULT_HTML_FILE, DEFAULT_REPORT_FILE, Settings
from iac_test_action.expectations import load_expectations
from iac_test_action.models.plan import load_plan
from iac_test_action.models.report import TestReport
from iac_test_action.models.result import TestOutcome
from iac_test_action.reports import ReportTargets, render_console, write_reports
from iac_test_action.reports.formatting import STATUS_SYMBOLS, format_duration
from iac_test_action.runner import Check, CheckRunner
from iac_test_action.terraform import Terraform, TerraformError

DEFAULT_SUITE_NAME = "Terraform Deployment Tests"
PLAN_FILE_NAME = "iac-test.tfplan"


def log_results_summary(log: logging.Logger, report: TestReport) -> None:
    """Log a formatted summary of check outcomes."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for outcome in report.results:
        log.info(
            "%s %s: %s (%s)",
            STATUS_SYMBOLS[outcome.status],
            outcome.name,
            outcome.status,
            format_duration(outcome.duration),
        )
        if outcome.error:
            log.info("  Error: %s", outcome.error)

    log.info(report.summary)


def positive_int(value: str) -> int:
    """Argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_variables(pairs: Sequence[str]) -> Mapping[str, str]:
    """Parse repeated ``key=value`` arguments."""
    variables: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid variable {pair!r}, expected key=value")
        variables[key.strip()] = value
    return variables


async def read_plan_document(
    plan_file: Path | None, terraform: Terraform | None
) -> str | bytes:
    """Read a plan document from a file, or produce one with terraform."""
    if plan_file is not None:
        return await asyncio.to_thread(plan_file.read_bytes)
    if terraform is None:
        raise ValueError("Either a plan file or a terraform directory is required")

    plan_path = terraform.working_dir / PLAN_FILE_NAME
    await terraform.init()
    await terraform.plan(plan_path)
    return await terraform.show_json(plan_path)


async def collect_plan_checks(
    aggregator: ResultAggregator,
    expectations_file: Path,
    plan_file: Path | None,
    terraform: Terraform | None,
    check_timeout: float | None,
) -> tuple[Sequence[Check], str | None]:
    """Load expectations and the plan, and build the plan checks.

    Loading problems are recorded as a failed ``LoadPlan`` outcome instead of
    aborting the run.

    Returns:
        The checks, and the suite name declared by the expectations file

    """
    log = logging.getLogger("iac_test_action")

    try:
        expectations = await load_expectations(expectations_file)
        document = await read_plan_document(plan_file, terraform)
        tree = load_plan(document)
    except (OSError, ValueError, yaml.YAMLError, TerraformError) as e:
        log.error("Failed to load plan or expectations: %s", e)
        aggregator.record(
            TestOutcome(name="LoadPlan", status="FAIL", duration=0.0, error=str(e))
        )
        return [], None

    log.info(
        "Loaded plan with %d resource(s) and %d expectation(s)",
        tree.resource_count(),
        len(expectations.checks),
    )
    return build_plan_checks(tree, expectations, check_timeout), expectations.suite


async def apply_changes(terraform: Terraform, aggregator: ResultAggregator) -> bool:
    """Apply the configuration; a failure is recorded as a failed outcome."""
    log = logging.getLogger("iac_test_action")
    started = datetime.now(timezone.utc)
    try:
        await terraform.init()
        await terraform.apply()
    except (TerraformError, OSError) as e:
        log.error("Terraform apply failed: %s", e)
        aggregator.record(
            TestOutcome(
                name="TerraformApply",
                status="FAIL",
                duration=(datetime.now(timezone.utc) - started).total_seconds(),
                error=str(e),
            )
        )
        return False
    return True


async def run(
    *,
    expectations_file: Path | None = None,
    plan_file: Path | None = None,
    terraform_dir: Path | None = None,
    variables: Mapping[str, str] | None = None,
    apply: bool = False,
    email: str | None = None,
    domain: str | None = None,
    region: str | None = None,
    suite_name: str | None = None,
    generate_report: bool = False,
    report_file: Path = DEFAULT_REPORT_FILE,
    html_file: Path = DEFAULT_HTML_FILE,
    max_concurrency: int = 4,
    check_timeout: float | None = None,
) -> int:
    """Run plan and live checks, report the results and return an exit code."""
    log = logging.getLogger("iac_test_action")
    settings = Settings()
    aggregator = ResultAggregator()
    start_time = datetime.now(timezone.utc)

    terraform = (
        Terraform(working_dir=terraform_dir, variables=variables or {})
        if terraform_dir is not None
        else None
    )

    checks: list[Check] = []
    declared_suite: str | None = None
    if expectations_file is not None:
        plan_checks, declared_suite = await collect_plan_checks(
            aggregator, expectations_file, plan_file, terraform, check_timeout
        )
        checks.extend(plan_checks)

    applied = False
    if apply and terraform is not None:
        applied = await apply_changes(terraform, aggregator)

    if (email or domain) and (applied or not apply):
        inspector = SesInspector.from_region(region or settings.aws_region)
        checks.extend(build_ses_checks(inspector, email, domain, check_timeout))

    runner = CheckRunner(
        aggregator=aggregator,
        max_concurrency=max_concurrency,
        default_timeout=check_timeout,
    )
    await runner.run_all(checks)

    report = aggregator.finalize(
        suite_name or declared_suite or DEFAULT_SUITE_NAME,
        start_time,
        datetime.now(timezone.utc),
    )
    log_results_summary(log, report)
    print(render_console(report), end="")

    if generate_report:
        targets = ReportTargets.from_settings(settings, report_file, html_file)
        failures = write_reports(report, targets)
        if failures:
            log.warning("%d report target(s) could not be written", len(failures))

    exit_code = 0 if report.success else 1

    if apply and terraform is not None:
        try:
            await terraform.destroy()
        except (TerraformError, OSError) as e:
            log.error("Terraform destroy failed, resources may be left behind: %s", e)
            exit_code = 1

    return exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate a Terraform deployment plan and live resources"
    )
    parser.add_argument(
        "--expectations",
        type=Path,
        help="YAML file declaring the resources expected in the plan",
    )
    parser.add_argument(
        "--plan-file",
        type=Path,
        help="Output of 'terraform show -json' for a plan or state",
    )
    parser.add_argument(
        "--terraform-dir",
        type=Path,
        help="Terraform configuration to plan (and apply with --apply)",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        help="Terraform variable as key=value (repeatable)",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply the configuration before live checks and destroy it afterwards",
    )
    parser.add_argument("--email", help="SES email identity to verify")
    parser.add_argument("--domain", help="SES domain identity (and DMARC record) to verify")
    parser.add_argument("--region", help="AWS region for live checks")
    parser.add_argument("--suite-name", help="Suite name shown in the reports")
    parser.add_argument(
        "--report",
        action="store_true",
        help="Generate test report files",
    )
    parser.add_argument(
        "--report-file",
        type=Path,
        default=DEFAULT_REPORT_FILE,
        help="Test report JSON file",
    )
    parser.add_argument(
        "--html-file",
        type=Path,
        default=DEFAULT_HTML_FILE,
        help="Test report HTML file",
    )
    parser.add_argument(
        "--max-concurrency",
        type=positive_int,
        default=4,
        help="Maximum number of checks running at once",
    )
    parser.add_argument(
        "--check-timeout",
        type=float,
        default=None,
        help="Per-check timeout in seconds",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        variables = parse_variables(args.var)
    except ValueError as e:
        parser.error(str(e))

    exit_code = asyncio.run(
        run(
            expectations_file=args.expectations,
            plan_file=args.plan_file,
            terraform_dir=args.terraform_dir,
            variables=variables,
            apply=args.apply,
            email=args.email,
            domain=args.domain,
            region=args.region,
            suite_name=args.suite_name,
            generate_report=args.report,
            report_file=args.report_file,
            html_file=args.html_file,
            max_concurrency=args.max_concurrency,
            check_timeout=args.check_timeout,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
