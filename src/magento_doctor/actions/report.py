"""Report Action - Render review results.

CONTRACT:
- read_only: True
- prerequisites: a finished review (or an analyzer listing)
"""

from rich.console import Console

from magento_doctor.actions.reporters.base import BaseReporter
from magento_doctor.actions.reporters.json_reporter import JsonReporter
from magento_doctor.actions.reporters.plain_reporter import PlainReporter
from magento_doctor.actions.reporters.rich_reporter import RichReporter
from magento_doctor.model.issue import Issue

REPORTERS: dict[str, type[BaseReporter]] = {
    "rich": RichReporter,
    "plain": PlainReporter,
    "json": JsonReporter,
}


class ReportAction:
    """Render issues and analyzer listings in the requested format.

    This action is completely read-only; it only writes to its console.
    """

    def __init__(
        self,
        console: Console | None = None,
        format_mode: str = "rich",
        show_details: bool = False,
    ) -> None:
        self.console = console or Console()
        self.format_mode = format_mode
        try:
            reporter_class = REPORTERS[format_mode]
        except KeyError:
            raise ValueError(f"Unknown report format: {format_mode}") from None
        self.reporter = reporter_class(self.console, show_details=show_details)

    def report_issues(self, issues: list[Issue]) -> int:
        """Print all issues grouped by category; returns the exit code."""
        return self.reporter.report_issues(issues)

    def report_analyzers(self, rows: list[dict[str, str]]) -> None:
        self.reporter.report_analyzers(rows)
