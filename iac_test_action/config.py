"""Settings read from the environment."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REPORT_FILE = Path("test-report.json")
DEFAULT_HTML_FILE = Path("test-report.html")
DEFAULT_SUMMARY_FILE = Path("test-summary.md")
DEFAULT_STATS_FILE = Path("test-results.json")
DEFAULT_AWS_REGION = "ap-southeast-1"


class Settings(BaseSettings):
    """Environment configuration.

    ``summary_file`` follows ``GITHUB_STEP_SUMMARY`` so the Markdown summary
    lands on the job page when running under GitHub Actions.
    """

    model_config = SettingsConfigDict(
        env_prefix="IAC_TEST_",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    summary_file: Path = Field(
        default=DEFAULT_SUMMARY_FILE,
        validation_alias=AliasChoices("GITHUB_STEP_SUMMARY", "IAC_TEST_SUMMARY_FILE"),
    )
    stats_file: Path = DEFAULT_STATS_FILE
    aws_region: str = Field(
        default=DEFAULT_AWS_REGION,
        validation_alias=AliasChoices("IAC_TEST_AWS_REGION", "AWS_REGION"),
    )
