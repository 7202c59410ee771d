"""Legacy Adapter - Run pre-plugin analyzers through the plugin contract.

A legacy analyzer is a plain class whose constructor takes its
collaborators positionally and whose ``analyze()`` returns a list of
issue-like objects. The adapter builds it from the dependency bag using
the static ``LEGACY_DEPENDENCIES`` table and converts its results into
issues on the shared collection.
"""

import logging
from collections.abc import Mapping
from typing import Any

from magento_doctor.checks import (
    Checkable,
    Configurable,
    DependencyAware,
    class_identifier,
    resolve_class,
)
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.model.issue import Priority
from magento_doctor.model.legacy import ISSUE_FIELDS, LegacyIssue

logger = logging.getLogger(__name__)

_CORE = "magento_doctor.analyzer"

# Legacy class -> constructor dependencies, in positional order
LEGACY_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    f"{_CORE}.configuration.ConfigurationAnalyzer": (
        "deployment_config",
        "app_state",
        "cache_type_list",
        "scope_config",
        "issue_factory",
    ),
    f"{_CORE}.database.DatabaseAnalyzer": (
        "resource_connection",
        "issue_factory",
    ),
    f"{_CORE}.modules.ModuleAnalyzer": (
        "module_list",
        "component_registrar",
        "issue_factory",
    ),
    f"{_CORE}.codebase.CodebaseAnalyzer": (
        "filesystem",
        "component_registrar",
        "issue_factory",
    ),
    f"{_CORE}.frontend.FrontendAnalyzer": (
        "scope_config",
        "issue_factory",
    ),
    f"{_CORE}.indexer_cron.IndexerCronAnalyzer": (
        "indexer_registry",
        "resource_connection",
        "issue_factory",
    ),
    f"{_CORE}.php_config.PhpConfigurationAnalyzer": (
        "php_runtime",
        "issue_factory",
    ),
    f"{_CORE}.mysql_config.MysqlConfigurationAnalyzer": (
        "resource_connection",
        "issue_factory",
    ),
    f"{_CORE}.redis_config.RedisConfigurationAnalyzer": (
        "deployment_config",
        "issue_factory",
    ),
    f"{_CORE}.api.ApiAnalyzer": (
        "scope_config",
        "resource_connection",
        "issue_factory",
    ),
    f"{_CORE}.third_party.ThirdPartyAnalyzer": (
        "module_list",
        "product_metadata",
        "issue_factory",
    ),
}


def register_legacy_dependencies(identifier: str, keys: list[str] | tuple[str, ...]) -> None:
    """Declare the constructor dependencies of a third-party legacy analyzer."""
    LEGACY_DEPENDENCIES[class_identifier(identifier)] = tuple(keys)


def required_dependencies(identifier: str) -> tuple[str, ...]:
    return LEGACY_DEPENDENCIES.get(class_identifier(identifier), ())


class MissingDependencyError(LookupError):
    """A legacy analyzer cannot be built without one of its collaborators."""

    def __init__(self, key: str, analyzer_class: str) -> None:
        self.key = key
        self.analyzer_class = analyzer_class
        super().__init__(f'Required dependency "{key}" not provided for {analyzer_class}')


class LegacyAnalyzerAdapter(Checkable, Configurable, DependencyAware):
    """Wraps a legacy analyzer class so the runner can drive it uniformly."""

    def __init__(self, analyzer_class: str) -> None:
        self.analyzer_class = analyzer_class
        self.config: dict[str, Any] = {}
        self._legacy_analyzer: Any = None

    @property
    def name(self) -> str:
        """Short display name: class name without the ``Analyzer`` suffix."""
        class_name = class_identifier(self.analyzer_class).rpartition(".")[2]
        return class_name.replace("Analyzer", "") or class_name

    def set_config(self, config: dict[str, Any]) -> None:
        self.config = dict(config or {})

    def set_dependencies(self, dependencies: Dependencies) -> None:
        """Build the legacy analyzer from the bag.

        Raises:
            MissingDependencyError: A required collaborator is absent.
            AnalyzerResolutionError: The legacy class cannot be resolved.
        """
        args = []
        for key in required_dependencies(self.analyzer_class):
            value = dependencies.get(key)
            if value is None:
                raise MissingDependencyError(key, self.analyzer_class)
            args.append(value)

        cls = resolve_class(self.analyzer_class)
        legacy = cls(*args)
        if isinstance(legacy, Configurable) and self.config:
            legacy.set_config(self.config)
        self._legacy_analyzer = legacy

    def analyze(self, collection: IssueCollection) -> None:
        if self._legacy_analyzer is None:
            raise RuntimeError("Legacy analyzer not initialized. Dependencies must be set first.")

        try:
            legacy_issues = list(self._legacy_analyzer.analyze() or [])
        except Exception as e:
            logger.info("Legacy analyzer %s failed: %s", self.analyzer_class, e)
            self._report_failure(collection, e)
            return

        # Records convert independently of each other
        failures = []
        for legacy_issue in legacy_issues:
            try:
                self._convert(legacy_issue, collection)
            except Exception as e:
                logger.info("Could not convert issue from %s: %s", self.analyzer_class, e)
                failures.append(e)
        if failures:
            self._report_failure(collection, failures[0], len(failures))

    def _report_failure(self, collection: IssueCollection, error: Exception, skipped: int = 0) -> None:
        details = str(error) or type(error).__name__
        if skipped:
            details = f"{details} ({skipped} of its issues could not be converted)"
        (
            collection.create_issue()
            .set_priority(Priority.LOW)
            .set_category("System")
            .set_issue(f"Analyzer {self.name} failed")
            .set_details(details)
            .finalize()
        )

    @staticmethod
    def _convert(legacy_issue: Any, collection: IssueCollection) -> None:
        data = _issue_data(legacy_issue)
        builder = (
            collection.create_issue()
            .set_priority(_priority(data.get("priority")))
            .set_category(data.get("category") or LegacyIssue.DEFAULT_CATEGORY)
            .set_issue(data.get("issue") or "")
            .set_details(data.get("details") or "")
        )

        if data.get("current_value") is not None:
            builder.set_current_value(data["current_value"])
        if data.get("recommended_value") is not None:
            builder.set_recommended_value(data["recommended_value"])

        for key, value in data.items():
            if key not in ISSUE_FIELDS:
                builder.set_data(key, value)

        builder.finalize()


def _priority(value: Any) -> Priority:
    """Legacy priority string as a ``Priority``; unknown values get the default."""
    if isinstance(value, Priority):
        return value
    try:
        return Priority(str(value or "").strip().lower())
    except ValueError:
        if value:
            logger.info("Unknown legacy priority %r, using %s", value, LegacyIssue.DEFAULT_PRIORITY)
        return Priority(LegacyIssue.DEFAULT_PRIORITY)


def _issue_data(legacy_issue: Any) -> dict[str, Any]:
    """Flatten a legacy issue-like object into one dictionary.

    Accepts mappings, objects with a ``data`` mapping, and objects that
    only expose the issue fields as attributes.
    """
    if isinstance(legacy_issue, Mapping):
        return dict(legacy_issue)

    data: dict[str, Any] = {}
    raw = getattr(legacy_issue, "data", None)
    if isinstance(raw, Mapping):
        data.update(raw)
    for name in ISSUE_FIELDS:
        if name not in data and hasattr(legacy_issue, name):
            data[name] = getattr(legacy_issue, name)
    return data
