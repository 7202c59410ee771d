"""Issue collection and its fluent builder.

Analyzers never construct ``Issue`` objects directly. They ask the
collection for a builder, set fields, and call ``finalize()``:

    >>> collection.create_issue() \\
    ...     .set_priority("high") \\
    ...     .set_category("Redis") \\
    ...     .set_issue("Redis not configured") \\
    ...     .finalize()
"""

import threading
from typing import Any, Iterator

from magento_doctor.model.issue import Issue, Priority


class IssueBuildError(ValueError):
    """Raised when a builder is misused or finalized with missing fields."""


class IssueCollection:
    """Append-only, ordered sink for the issues found during one run."""

    def __init__(self) -> None:
        self._issues: list[Issue] = []
        self._lock = threading.Lock()

    def create_issue(self) -> "IssueBuilder":
        """Start a new issue. Nothing is added until ``finalize()``."""
        return IssueBuilder(self)

    def add_issue(self, issue: Issue) -> None:
        """Append a finished issue."""
        if not isinstance(issue, Issue):
            raise TypeError(f"Expected Issue, got {type(issue).__name__}")
        with self._lock:
            self._issues.append(issue)

    def extend(self, other: "IssueCollection") -> None:
        """Append every issue of *other*, keeping its order."""
        staged = other.issues
        with self._lock:
            self._issues.extend(staged)

    @property
    def issues(self) -> tuple[Issue, ...]:
        with self._lock:
            return tuple(self._issues)

    def count(self, priority: Priority | str | None = None) -> int:
        """Number of issues, optionally only those of one priority."""
        if priority is None:
            return len(self)
        wanted = Priority(priority)
        return sum(1 for issue in self.issues if issue.priority == wanted)

    def has_issues(self) -> bool:
        return len(self) > 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(self.issues)


class IssueBuilder:
    """Fluent, single-use construction helper for one ``Issue``."""

    _MANDATORY = ("priority", "category", "issue")

    def __init__(self, collection: IssueCollection) -> None:
        self._collection = collection
        self._fields: dict[str, Any] = {}
        self._extra: dict[str, Any] = {}
        self._finalized = False

    def set_priority(self, priority: Priority | str) -> "IssueBuilder":
        try:
            value = Priority(priority)
        except ValueError as e:
            raise IssueBuildError(
                f"Unknown priority {priority!r}; expected high, medium or low"
            ) from e
        return self._set("priority", value)

    def set_category(self, category: str) -> "IssueBuilder":
        return self._set("category", str(category))

    def set_issue(self, issue: str) -> "IssueBuilder":
        return self._set("issue", str(issue))

    def set_details(self, details: str) -> "IssueBuilder":
        return self._set("details", str(details))

    def set_current_value(self, value: Any) -> "IssueBuilder":
        return self._set("current_value", value)

    def set_recommended_value(self, value: Any) -> "IssueBuilder":
        return self._set("recommended_value", value)

    def set_data(self, key: str, value: Any) -> "IssueBuilder":
        """Attach one piece of auxiliary data."""
        self._check_open()
        self._extra[str(key)] = value
        return self

    def set_extra_data(self, data: dict[str, Any]) -> "IssueBuilder":
        self._check_open()
        self._extra.update({str(k): v for k, v in data.items()})
        return self

    def finalize(self) -> Issue:
        """Create the issue and append it to the parent collection.

        Raises:
            IssueBuildError: If already finalized or a mandatory field
                (priority, category, issue) is missing or empty.
        """
        self._check_open()
        missing = [name for name in self._MANDATORY if not self._fields.get(name)]
        if missing:
            raise IssueBuildError(f"Cannot finalize issue, missing: {', '.join(missing)}")

        issue = Issue(extra_data=dict(self._extra), **self._fields)
        self._finalized = True
        self._collection.add_issue(issue)
        return issue

    def _set(self, name: str, value: Any) -> "IssueBuilder":
        self._check_open()
        self._fields[name] = value
        return self

    def _check_open(self) -> None:
        if self._finalized:
            raise IssueBuildError("Issue builder already finalized")
