"""Pytest configuration and fixtures for magento-doctor tests."""

import pytest
from unittest.mock import MagicMock

from magento_doctor.checks import Checkable, Configurable, DependencyAware
from magento_doctor.connector.base import CommandResult, Connector
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.legacy import IssueFactory
from magento_doctor.scanner.database import ResourceConnection


def ok(stdout: str = "", command: str = "test") -> CommandResult:
    return CommandResult(command=command, stdout=stdout, stderr="", exit_code=0)


def failed(stderr: str = "error", command: str = "test") -> CommandResult:
    return CommandResult(command=command, stdout="", stderr=stderr, exit_code=1)


def mock_db(counts=None, rows=None, tables=()):
    """ResourceConnection answering by SQL substring."""
    db = MagicMock(spec=ResourceConnection)
    db.schema_name = "magento"
    db.table_name.side_effect = lambda name: name
    db.table_exists.side_effect = lambda name: name in tables

    def lookup(mapping, sql, default):
        for fragment, value in (mapping or {}).items():
            if fragment in sql:
                return value
        return default

    db.fetch_int.side_effect = lambda sql: lookup(counts, sql, 0)
    db.fetch_all.side_effect = lambda sql: lookup(rows, sql, [])
    return db


@pytest.fixture
def mock_connector():
    """Create a mock connector for testing."""
    connector = MagicMock(spec=Connector)

    # Default behavior: commands succeed
    connector.run.return_value = ok()
    connector.check.return_value = ok()
    connector.file_exists.return_value = True
    connector.dir_exists.return_value = True
    connector.list_dir.return_value = []
    connector.read_file.return_value = None

    return connector


@pytest.fixture
def collection():
    return IssueCollection()


@pytest.fixture
def issue_factory():
    return IssueFactory()


class StaticAnalyzer(Checkable):
    """Native analyzer reporting one fixed issue; counts its invocations."""

    calls = 0

    def __init__(self, priority="medium", category="Test", issue="Static issue"):
        self.priority = priority
        self.category = category
        self.issue = issue

    def analyze(self, collection):
        type(self).calls += 1
        (
            collection.create_issue()
            .set_priority(self.priority)
            .set_category(self.category)
            .set_issue(self.issue)
            .finalize()
        )


class FailingAnalyzer(Checkable):
    def analyze(self, collection):
        raise RuntimeError("boom")


class RedisCheckAnalyzer(Checkable, Configurable, DependencyAware):
    """Reports a missing Redis cache backend, the way a site-specific check would."""

    def __init__(self):
        self.config = {}
        self.dependencies = None

    def set_config(self, config):
        self.config = config

    def set_dependencies(self, dependencies):
        self.dependencies = dependencies

    def analyze(self, collection):
        deployment_config = self.dependencies.get("deployment_config")
        backend = deployment_config.get("cache/frontend/default/backend") if deployment_config else None
        if not backend or "Redis" not in backend:
            (
                collection.create_issue()
                .set_priority(self.config.get("priority", "high"))
                .set_category("Redis")
                .set_issue("Redis not configured")
                .set_details("Cache backend is not Redis")
                .finalize()
            )


class LegacyPair:
    """Legacy analyzer recording its constructor arguments."""

    created_with = None

    def __init__(self, first, second):
        type(self).created_with = (first, second)

    def analyze(self):
        return [{"priority": "low", "category": "Legacy", "issue": "Pair checked"}]


class LegacyBroken:
    def __init__(self, issue_factory):
        self.issue_factory = issue_factory

    def analyze(self):
        raise ValueError("legacy exploded")
