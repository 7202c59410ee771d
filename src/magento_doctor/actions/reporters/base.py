"""Base Reporter Interface."""

from abc import ABC, abstractmethod
from typing import Iterable

from rich.console import Console

from magento_doctor.model.issue import Issue, Priority

CATEGORY_ORDER = (
    "Config",
    "Database",
    "Indexing",
    "Frontend",
    "Modules",
    "Third-party",
    "Codebase",
    "API",
    "PHP",
    "MySQL",
    "Redis",
)


def group_issues(issues: Iterable[Issue]) -> list[tuple[str, list[Issue]]]:
    """Group issues by category in report order.

    Known categories come first in ``CATEGORY_ORDER``, the rest follow in
    the order they were first seen. Inside a group issues are sorted high
    to low, keeping analyzer order for equal priorities.
    """
    groups: dict[str, list[Issue]] = {}
    for issue in issues:
        groups.setdefault(issue.category, []).append(issue)

    known = [name for name in CATEGORY_ORDER if name in groups]
    others = [name for name in groups if name not in CATEGORY_ORDER]
    return [
        (name, sorted(groups[name], key=lambda issue: issue.priority.rank))
        for name in known + others
    ]


def count_by_priority(issues: Iterable[Issue]) -> dict[Priority, int]:
    counts = {priority: 0 for priority in Priority}
    for issue in issues:
        counts[issue.priority] += 1
    return counts


class BaseReporter(ABC):
    """Abstract base class for all review reporters."""

    def __init__(self, console: Console, show_details: bool = False) -> None:
        self.console = console
        self.show_details = show_details

    @abstractmethod
    def report_issues(self, issues: list[Issue]) -> int:
        """Report review issues; returns the exit code they imply."""
        pass

    @abstractmethod
    def report_analyzers(self, rows: list[dict[str, str]]) -> None:
        """Display the available analyzers."""
        pass

    @staticmethod
    def exit_code(issues: list[Issue]) -> int:
        return 1 if any(issue.is_high for issue in issues) else 0
