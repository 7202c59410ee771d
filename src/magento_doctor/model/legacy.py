"""Legacy issue shape returned by pre-plugin analyzers.

Legacy analyzers build these through an ``IssueFactory`` and return them
as a list from ``analyze()``. The legacy adapter converts them into
``Issue`` objects on a collection.
"""

from typing import Any

# Keys with a dedicated field; everything else is extra data.
ISSUE_FIELDS = (
    "priority",
    "category",
    "issue",
    "details",
    "current_value",
    "recommended_value",
)


class LegacyIssue:
    """Dictionary-backed issue with legacy defaults."""

    DEFAULT_PRIORITY = "medium"
    DEFAULT_CATEGORY = "configuration"

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})
        self.data.setdefault("priority", self.DEFAULT_PRIORITY)
        self.data.setdefault("category", self.DEFAULT_CATEGORY)

    @property
    def priority(self) -> str:
        return str(self.data.get("priority") or "")

    @property
    def category(self) -> str:
        return str(self.data.get("category") or "")

    @property
    def issue(self) -> str:
        return str(self.data.get("issue") or "")

    @property
    def details(self) -> str:
        return str(self.data.get("details") or "")

    @property
    def current_value(self) -> Any:
        return self.data.get("current_value")

    @property
    def recommended_value(self) -> Any:
        return self.data.get("recommended_value")

    @property
    def extra(self) -> dict[str, Any]:
        return {k: v for k, v in self.data.items() if k not in ISSUE_FIELDS}

    def __repr__(self) -> str:
        return f"LegacyIssue({self.priority!r}, {self.category!r}, {self.issue!r})"


class IssueFactory:
    """Creates ``LegacyIssue`` objects for legacy analyzers."""

    def create(self, data: dict[str, Any] | None = None) -> LegacyIssue:
        return LegacyIssue(data)

    def create_issue(
        self,
        priority: str,
        category: str,
        issue: str,
        details: str,
        current_value: Any = None,
        recommended_value: Any = None,
        extra: dict[str, Any] | None = None,
    ) -> LegacyIssue:
        """Create an issue with all fields; *extra* never overrides them."""
        data = dict(extra or {})
        data.update(
            priority=priority,
            category=category,
            issue=issue,
            details=details,
            current_value=current_value,
            recommended_value=recommended_value,
        )
        return self.create(data)
