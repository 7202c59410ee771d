"""Redis Configuration Analyzer - Redis usage for cache, page cache and sessions."""

from typing import Any

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.deployment import DeploymentConfig

REDIS_BACKENDS = ("Magento\\Framework\\Cache\\Backend\\Redis", "Cm_Cache_Backend_Redis")
LOCAL_HOSTS = ("", "localhost", "127.0.0.1")

# Conventional database number per usage
RECOMMENDED_DATABASES = {"cache": 0, "page_cache": 1, "session": 2}


class RedisConfigurationAnalyzer:
    CATEGORY = "Redis"

    def __init__(self, deployment_config: DeploymentConfig, issue_factory: IssueFactory) -> None:
        self.deployment_config = deployment_config
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        usage = self.redis_usage()
        if not usage:
            return [self._issue(
                "high",
                "Redis not configured",
                "Redis provides significant performance improvements for cache and sessions.",
                "Not configured",
                "Redis for cache and sessions",
            )]
        return [
            *self.check_connections(usage),
            *self.check_database_separation(usage),
            *self.check_compression_library(),
        ]

    def _issue(self, priority: str, title: str, details: str, current, recommended) -> LegacyIssue:
        return self.issue_factory.create_issue(priority, self.CATEGORY, title, details, current, recommended)

    def _options(self, path: str) -> dict[str, Any]:
        options = self.deployment_config.get(path)
        return options if isinstance(options, dict) else {}

    def redis_usage(self) -> dict[str, dict[str, Any]]:
        """Usage type -> Redis connection options, for every usage backed by Redis."""
        usage = {}
        if self.deployment_config.get("cache/frontend/default/backend") in REDIS_BACKENDS:
            usage["cache"] = self._options("cache/frontend/default/backend_options")
        if self.deployment_config.get("cache/frontend/page_cache/backend") in REDIS_BACKENDS:
            usage["page_cache"] = self._options("cache/frontend/page_cache/backend_options")
        if self.deployment_config.get("session/save") == "redis":
            usage["session"] = self._options("session/redis")
        return usage

    def check_connections(self, usage: dict[str, dict[str, Any]]) -> list[LegacyIssue]:
        issues = []
        on_localhost = any(str(options.get("server") or "") in LOCAL_HOSTS for options in usage.values())
        if on_localhost and len(usage) > 1:
            issues.append(self._issue(
                "low",
                "Redis on localhost",
                "Consider using a dedicated Redis server for better performance and scalability.",
                "localhost",
                "Dedicated Redis server",
            ))

        for usage_type, options in usage.items():
            if not options.get("persistent"):
                issues.append(self._issue(
                    "low",
                    f"Persistent connections disabled for {usage_type}",
                    "Persistent connections reduce connection overhead.",
                    "Disabled",
                    "Enabled",
                ))
            if usage_type in ("cache", "page_cache") and str(options.get("compress_data", "")) != "1":
                issues.append(self._issue(
                    "medium",
                    f"Compression disabled for {usage_type}",
                    "Compression reduces memory usage and network traffic.",
                    "Disabled",
                    "Enabled",
                ))

        if "page_cache" in usage and "cache" not in usage:
            issues.append(self._issue(
                "medium",
                "Default cache not using Redis",
                "Using Redis for all cache types provides consistent performance.",
                "File/Database cache",
                "Redis cache",
            ))
        if "session" not in usage:
            issues.append(self._issue(
                "medium",
                "Sessions not using Redis",
                "Redis sessions provide better performance and scalability than file-based sessions.",
                "File/Database sessions",
                "Redis sessions",
            ))
        return issues

    def check_database_separation(self, usage: dict[str, dict[str, Any]]) -> list[LegacyIssue]:
        issues = []
        databases: dict[int, list[str]] = {}
        for usage_type, options in usage.items():
            databases.setdefault(_database(options), []).append(usage_type)

        for db, types in databases.items():
            if len(types) > 1:
                issues.append(self._issue(
                    "medium",
                    "Shared Redis database",
                    "Using separate databases prevents cache conflicts and improves management.",
                    f"DB {db}: {', '.join(types)}",
                    "Separate databases",
                ))

        for usage_type, options in usage.items():
            recommended = RECOMMENDED_DATABASES.get(usage_type)
            db = _database(options)
            if recommended is not None and db != recommended:
                issues.append(self._issue(
                    "low",
                    f"Non-standard database for {usage_type}",
                    "Using standard database numbers improves maintainability.",
                    f"DB {db}",
                    f"DB {recommended}",
                ))
        return issues

    def check_compression_library(self) -> list[LegacyIssue]:
        options = self._options("cache/frontend/default/backend_options")
        library = options.get("compression_lib") or ""
        if options and not library:
            return [self._issue(
                "low",
                "No compression library specified",
                "Specify compression library for better compression performance.",
                "Not specified",
                "gzip, lzf, or snappy",
            )]
        if library == "gzip":
            return [self._issue(
                "low",
                "Using gzip compression",
                "Consider using lzf or snappy for better performance.",
                "gzip",
                "lzf or snappy",
            )]
        return []


def _database(options: dict[str, Any]) -> int:
    try:
        return int(options.get("database") or 0)
    except (TypeError, ValueError):
        return 0
