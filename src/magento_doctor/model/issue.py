"""Issue dataclass - One prioritized finding from an analyzer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class Priority(str, Enum):
    """Priority levels for issues."""

    HIGH = "high"  # Address before going live
    MEDIUM = "medium"  # Noticeable performance cost
    LOW = "low"  # Advisory, nice to fix

    @property
    def rank(self) -> int:
        """Sort key: high first."""
        return {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}[self]


@dataclass(frozen=True)
class Issue:
    """A single finding produced during a review.

    Issues are only created by ``IssueBuilder.finalize()`` and are never
    modified afterwards.

    Attributes:
        priority: How urgent the finding is.
        category: Short label used to group the report (e.g. "Database").
        issue: Short human-readable title.
        details: Longer explanation of why it matters.
        current_value: Observed state, string or structured.
        recommended_value: Target state or remediation command.
        extra_data: Auxiliary structured data (e.g. affected table names).
    """

    priority: Priority
    category: str
    issue: str
    details: str = ""
    current_value: Any = None
    recommended_value: Any = None
    extra_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "extra_data", MappingProxyType(dict(self.extra_data)))

    @property
    def is_high(self) -> bool:
        return self.priority == Priority.HIGH

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "priority": self.priority.value,
            "category": self.category,
            "issue": self.issue,
            "details": self.details,
            "current_value": self.current_value,
            "recommended_value": self.recommended_value,
            "extra_data": dict(self.extra_data),
        }
