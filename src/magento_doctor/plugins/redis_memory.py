"""Redis Memory Analyzer - Fragmentation, memory use and evictions of the cache server."""

import logging
from typing import Any

from magento_doctor.checks import Checkable, Configurable, DependencyAware
from magento_doctor.connector.base import CommandError
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.scanner.redis import RedisInfo

logger = logging.getLogger(__name__)

DEFAULTS = {
    "fragmentation_threshold": 1.5,
    "memory_limit_mb": 1024,
    "evicted_keys_threshold": 1000,
}


class RedisMemoryAnalyzer(Checkable, Configurable, DependencyAware):
    """Checks the Redis server behind the default cache frontend.

    Config keys: ``fragmentation_threshold`` (RSS / used memory ratio),
    ``memory_limit_mb`` and ``evicted_keys_threshold``.
    """

    CATEGORY = "Redis"

    def __init__(self) -> None:
        self.config: dict[str, Any] = dict(DEFAULTS)
        self.dependencies = Dependencies()

    def set_config(self, config: dict[str, Any]) -> None:
        self.config = {**DEFAULTS, **(config or {})}

    def set_dependencies(self, dependencies: Dependencies) -> None:
        self.dependencies = dependencies

    def analyze(self, collection: IssueCollection) -> None:
        deployment_config = self.dependencies.get("deployment_config")
        connector = self.dependencies.get("connector")
        if deployment_config is None or connector is None:
            return

        options = deployment_config.get("cache/frontend/default/backend_options")
        if not isinstance(options, dict) or not options.get("server"):
            logger.debug("Default cache frontend has no Redis server, skipping")
            return

        try:
            info = RedisInfo.load(
                connector,
                options["server"],
                options.get("port") or 6379,
                options.get("password") or None,
            )
        except CommandError as e:
            (
                collection.create_issue()
                .set_priority("low")
                .set_category(self.CATEGORY)
                .set_issue("Could not connect to Redis for analysis")
                .set_details(str(e))
                .finalize()
            )
            return

        self.check_fragmentation(info, collection)
        self.check_memory_usage(info, collection)
        self.check_evictions(info, collection)

    def check_fragmentation(self, info: RedisInfo, collection: IssueCollection) -> None:
        used = info.get_int("used_memory")
        if used <= 0:
            return
        threshold = float(self.config["fragmentation_threshold"])
        fragmentation = info.get_int("used_memory_rss") / used
        if fragmentation <= threshold:
            return
        (
            collection.create_issue()
            .set_priority("high")
            .set_category(self.CATEGORY)
            .set_issue("High Redis memory fragmentation")
            .set_details(
                "Memory fragmentation indicates wasted memory. "
                "This can be caused by frequent key deletions or varying key sizes."
            )
            .set_current_value(f"{fragmentation:.2f}")
            .set_recommended_value(f"< {threshold:.1f}")
            .set_data("used_memory", used)
            .finalize()
        )

    def check_memory_usage(self, info: RedisInfo, collection: IssueCollection) -> None:
        limit_mb = int(self.config["memory_limit_mb"])
        used_mb = info.get_int("used_memory") / 1024 / 1024
        if used_mb <= limit_mb:
            return
        (
            collection.create_issue()
            .set_priority("medium")
            .set_category(self.CATEGORY)
            .set_issue("Redis memory usage exceeds limit")
            .set_details(
                "High memory usage may lead to evictions and performance degradation. "
                "Consider increasing maxmemory or optimizing cache usage."
            )
            .set_current_value(f"{used_mb:.0f} MB")
            .set_recommended_value(f"< {limit_mb} MB")
            .finalize()
        )

    def check_evictions(self, info: RedisInfo, collection: IssueCollection) -> None:
        evicted = info.get_int("evicted_keys")
        if evicted <= int(self.config["evicted_keys_threshold"]):
            return
        (
            collection.create_issue()
            .set_priority("high")
            .set_category(self.CATEGORY)
            .set_issue("Redis is evicting keys")
            .set_details(
                "Key eviction indicates memory pressure. "
                "This severely impacts cache effectiveness."
            )
            .set_current_value(f"{evicted:,} keys evicted")
            .set_recommended_value("0 evictions")
            .finalize()
        )
