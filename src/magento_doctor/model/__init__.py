"""Model package - Core data structures for magento-doctor."""

from magento_doctor.model.collection import IssueBuildError, IssueBuilder, IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.model.issue import Issue, Priority
from magento_doctor.model.legacy import IssueFactory, LegacyIssue

__all__ = [
    "Dependencies",
    "Issue",
    "IssueBuildError",
    "IssueBuilder",
    "IssueCollection",
    "IssueFactory",
    "LegacyIssue",
    "Priority",
]
