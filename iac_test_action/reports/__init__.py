"""Report renderers and the file writer that persists them."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field

from iac_test_action.config import (
    DEFAULT_HTML_FILE,
    DEFAULT_REPORT_FILE,
    DEFAULT_STATS_FILE,
    DEFAULT_SUMMARY_FILE,
    Settings,
)
from iac_test_action.errors import RenderIOFailure
from iac_test_action.models.base import Model
from iac_test_action.models.report import TestReport
from iac_test_action.reports.ci_summary import render_markdown, render_stats
from iac_test_action.reports.console import render_console
from iac_test_action.reports.document import parse_json, render_json
from iac_test_action.reports.html import render_html

__all__ = [
    "ReportTargets",
    "ReportWriter",
    "parse_json",
    "render_console",
    "render_html",
    "render_json",
    "render_markdown",
    "render_stats",
    "write_reports",
]

log = logging.getLogger(__name__)


class ReportTargets(Model):
    """Output paths for the file-based renderings."""

    report_file: Path = Field(default=DEFAULT_REPORT_FILE)
    html_file: Path = Field(default=DEFAULT_HTML_FILE)
    summary_file: Path = Field(default=DEFAULT_SUMMARY_FILE)
    stats_file: Path = Field(default=DEFAULT_STATS_FILE)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        report_file: Path = DEFAULT_REPORT_FILE,
        html_file: Path = DEFAULT_HTML_FILE,
    ) -> "ReportTargets":
        """Combine CLI-provided paths with environment-provided ones."""
        return cls(
            report_file=report_file,
            html_file=html_file,
            summary_file=settings.summary_file,
            stats_file=settings.stats_file,
        )


@dataclass(frozen=True, kw_only=True)
class ReportWriter:
    """One rendering target: a renderer and where its output goes."""

    name: str
    path: Path
    render: Callable[[TestReport], str]

    def write(self, report: TestReport) -> None:
        """Render and write; raises ``RenderIOFailure`` if the file cannot be written."""
        content = self.render(report)
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise RenderIOFailure(self.name, self.path, e) from e


def write_reports(
    report: TestReport, targets: ReportTargets
) -> Sequence[RenderIOFailure]:
    """Write every file-based rendering, attempting each target independently.

    Returns:
        Failures for targets that could not be written (empty on success)

    """
    writers = [
        ReportWriter(name="JSON", path=targets.report_file, render=render_json),
        ReportWriter(name="HTML", path=targets.html_file, render=render_html),
        ReportWriter(
            name="Markdown summary", path=targets.summary_file, render=render_markdown
        ),
        ReportWriter(name="stats", path=targets.stats_file, render=render_stats),
    ]

    failures: list[RenderIOFailure] = []
    for writer in writers:
        try:
            writer.write(report)
        except RenderIOFailure as e:
            log.error("%s", e, exc_info=e.cause)
            failures.append(e)
        else:
            log.info("%s report saved to: %s", writer.name, writer.path)
    return failures
