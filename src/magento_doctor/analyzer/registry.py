"""Analyzer registry - Turns layered configuration into runnable descriptors.

The loader starts from the fixed list of core analyzers, drops the ones
disabled under ``analyzers.core.<id>.enabled``, then adds every custom
analyzer declared in a list-valued group under ``analyzers``. A custom
entry with the same id as a core analyzer replaces it.

Configuration is hand-edited, so loading is tolerant: a malformed or
unresolvable entry is skipped with an INFO diagnostic and never stops
the rest from loading.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from magento_doctor.checks import AnalyzerResolutionError, Checkable, Configurable, resolve_class

logger = logging.getLogger(__name__)

CORE_GROUP = "core"
DEFAULT_GROUP = "custom"


@dataclass
class AnalyzerDescriptor:
    """One runnable analyzer.

    Exactly one of ``instance`` (native analyzer) or ``legacy_class``
    (identifier wrapped by the legacy adapter at run time) is set.
    """

    id: str
    name: str
    category: str
    description: str = ""
    group: str = CORE_GROUP
    instance: Checkable | None = None
    legacy_class: str | None = None
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (self.instance is None) == (self.legacy_class is None):
            raise ValueError("Descriptor needs exactly one of instance or legacy_class")

    @property
    def kind(self) -> str:
        return "native" if self.instance is not None else "legacy"

    def summary(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "kind": self.kind,
        }


def _core(id: str, name: str, description: str, category: str, legacy_class: str) -> AnalyzerDescriptor:
    return AnalyzerDescriptor(
        id=id,
        name=name,
        description=description,
        category=category,
        group=CORE_GROUP,
        legacy_class=f"magento_doctor.analyzer.{legacy_class}",
    )


CORE_ANALYZERS: tuple[AnalyzerDescriptor, ...] = (
    _core("configuration", "Configuration Analysis",
          "Check application mode, cache configuration, and settings",
          "config", "configuration.ConfigurationAnalyzer"),
    _core("database", "Database Analysis",
          "Analyze database size, table optimization, and data volumes",
          "database", "database.DatabaseAnalyzer"),
    _core("modules", "Module Analysis",
          "Check installed modules and their impact",
          "modules", "modules.ModuleAnalyzer"),
    _core("codebase", "Codebase Analysis",
          "Examine code structure and custom code volume",
          "codebase", "codebase.CodebaseAnalyzer"),
    _core("frontend", "Frontend Analysis",
          "Check frontend optimization settings",
          "frontend", "frontend.FrontendAnalyzer"),
    _core("indexing", "Indexer & Cron Analysis",
          "Review indexer status and cron job health",
          "indexing", "indexer_cron.IndexerCronAnalyzer"),
    _core("php", "PHP Configuration",
          "Review PHP configuration and extensions",
          "php", "php_config.PhpConfigurationAnalyzer"),
    _core("mysql", "MySQL Configuration",
          "Check MySQL/MariaDB configuration settings",
          "mysql", "mysql_config.MysqlConfigurationAnalyzer"),
    _core("redis", "Redis Configuration",
          "Analyze Redis configuration and usage",
          "redis", "redis_config.RedisConfigurationAnalyzer"),
    _core("api", "API Analysis",
          "Check API integrations and OAuth tokens",
          "api", "api.ApiAnalyzer"),
    _core("thirdparty", "Third-party Analysis",
          "Identify problematic third-party extensions",
          "thirdparty", "third_party.ThirdPartyAnalyzer"),
)


class AnalyzerLoader:
    """Builds the ``id -> descriptor`` map for one run."""

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        core: tuple[AnalyzerDescriptor, ...] | list[AnalyzerDescriptor] = CORE_ANALYZERS,
    ) -> None:
        self.config = config or {}
        self.core = core

    @property
    def analyzer_config(self) -> Mapping[str, Any]:
        section = self.config.get("analyzers")
        return section if isinstance(section, Mapping) else {}

    def load(self) -> dict[str, AnalyzerDescriptor]:
        """Return core + custom descriptors in run order, keyed by id."""
        descriptors: dict[str, AnalyzerDescriptor] = {}

        for descriptor in self.core:
            if self._core_enabled(descriptor.id):
                descriptors[descriptor.id] = _copy(descriptor)
            else:
                logger.info("Core analyzer disabled by configuration: %s", descriptor.id)

        for analyzer_id, descriptor in self.load_custom().items():
            if analyzer_id in descriptors:
                logger.info("Custom analyzer %s overrides core analyzer", analyzer_id)
            descriptors[analyzer_id] = descriptor

        return descriptors

    def load_custom(self) -> dict[str, AnalyzerDescriptor]:
        """Resolve every custom entry; later groups win on id collisions."""
        entries: dict[str, tuple[str, Mapping[str, Any]]] = {}
        for group, group_entries in self.analyzer_config.items():
            if group == CORE_GROUP or not isinstance(group_entries, list):
                continue
            for entry in group_entries:
                if not isinstance(entry, Mapping):
                    logger.info("Skipping malformed analyzer entry in group %s: %r", group, entry)
                    continue
                analyzer_id = entry.get("id")
                if not analyzer_id:
                    logger.info("Skipping analyzer entry without id in group %s", group)
                    continue
                entries[str(analyzer_id)] = (str(group), entry)

        custom: dict[str, AnalyzerDescriptor] = {}
        for analyzer_id, (group, entry) in entries.items():
            descriptor = self._build(analyzer_id, group, entry)
            if descriptor is not None:
                custom[analyzer_id] = descriptor
        return custom

    def _core_enabled(self, analyzer_id: str) -> bool:
        core = self.analyzer_config.get(CORE_GROUP)
        if not isinstance(core, Mapping):
            return True
        settings = core.get(analyzer_id)
        if not isinstance(settings, Mapping):
            return True
        return settings.get("enabled", True) is not False

    def _build(self, analyzer_id: str, group: str, entry: Mapping[str, Any]) -> AnalyzerDescriptor | None:
        if entry.get("enabled", True) is False:
            logger.info("Custom analyzer disabled by configuration: %s", analyzer_id)
            return None

        class_name = entry.get("class")
        if not class_name:
            logger.info("Skipping analyzer %s: no class configured", analyzer_id)
            return None

        try:
            cls = resolve_class(str(class_name))
        except AnalyzerResolutionError as e:
            logger.info("Skipping analyzer %s: %s", analyzer_id, e)
            return None

        config = entry.get("config")
        config = dict(config) if isinstance(config, Mapping) else {}
        meta = {
            "id": analyzer_id,
            "name": str(entry.get("name") or entry.get("description") or analyzer_id),
            "description": str(entry.get("description") or ""),
            "category": str(entry.get("category") or group),
            "group": group,
            "config": config,
        }

        if not issubclass(cls, Checkable):
            return AnalyzerDescriptor(legacy_class=str(class_name), **meta)

        try:
            instance = cls()
            if isinstance(instance, Configurable) and "config" in entry:
                instance.set_config(config)
        except Exception as e:
            logger.info("Skipping analyzer %s: could not create %s (%s)", analyzer_id, class_name, e)
            return None
        return AnalyzerDescriptor(instance=instance, **meta)


def _copy(descriptor: AnalyzerDescriptor) -> AnalyzerDescriptor:
    return AnalyzerDescriptor(
        id=descriptor.id,
        name=descriptor.name,
        category=descriptor.category,
        description=descriptor.description,
        group=descriptor.group,
        instance=descriptor.instance,
        legacy_class=descriptor.legacy_class,
        config=dict(descriptor.config),
    )
