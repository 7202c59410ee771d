"""MySQL Configuration Analyzer - Server version and tuning variables."""

import re

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.units import abbreviate, format_bytes, version_lt

MB = 1024**2
GB = 1024**3


class MysqlConfigurationAnalyzer:
    CATEGORY = "MySQL"

    # name -> (kind, minimum, recommended, description)
    SIZE_VARIABLES = {
        "innodb_buffer_pool_size": (
            "bytes", 1 * GB, 4 * GB, "InnoDB buffer pool size should be 50-80% of available RAM"),
        "max_connections": ("number", 150, 500, "Maximum concurrent connections"),
        "thread_cache_size": ("number", 8, 64, "Thread cache reduces connection overhead"),
        "table_open_cache": ("number", 2000, 4000, "Number of open tables for all threads"),
        "tmp_table_size": (
            "bytes", 64 * MB, 256 * MB, "Maximum size of internal in-memory temporary tables"),
        "max_heap_table_size": ("bytes", 64 * MB, 256 * MB, "Maximum size for MEMORY tables"),
        "innodb_log_file_size": ("bytes", 128 * MB, 512 * MB, "Size of InnoDB redo log files"),
    }

    def __init__(self, resource_connection: ResourceConnection, issue_factory: IssueFactory) -> None:
        self.db = resource_connection
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        variables = self.db.fetch_pairs("SHOW GLOBAL VARIABLES")
        return [
            *self.check_version(),
            *self.check_variables(variables),
            *self.check_storage_engine(),
            *self.check_slow_query_log(variables),
            *self.check_binary_log(variables),
        ]

    def _issue(self, priority: str, title: str, details: str, current, recommended, extra=None) -> LegacyIssue:
        return self.issue_factory.create_issue(priority, self.CATEGORY, title, details, current, recommended, extra)

    def check_version(self) -> list[LegacyIssue]:
        version = self.db.fetch_value("SELECT VERSION()") or ""
        match = re.match(r"(\d+\.\d+\.\d+)", version)
        number = match.group(1) if match else ""

        if "mariadb" in version.lower():
            if version_lt(number, "10.4"):
                return [self._issue(
                    "medium",
                    "MariaDB version outdated",
                    "Newer MariaDB versions provide better performance and features.",
                    version,
                    "MariaDB 10.4 or higher",
                )]
            return []
        if version_lt(number, "5.7"):
            return [self._issue(
                "high",
                "MySQL version too old",
                "MySQL 5.6 and older are not supported by Magento 2.4+",
                version,
                "MySQL 5.7 or higher",
            )]
        if version_lt(number, "8.0"):
            return [self._issue(
                "low",
                "Consider upgrading to MySQL 8.0",
                "MySQL 8.0 provides better performance and features.",
                version,
                "MySQL 8.0 or higher",
            )]
        return []

    def check_variables(self, variables: dict[str, str | None]) -> list[LegacyIssue]:
        issues = []
        for name, (kind, minimum, recommended, description) in self.SIZE_VARIABLES.items():
            raw = variables.get(name)
            if raw is None or not raw.isdigit():
                continue
            value = int(raw)
            if kind == "bytes":
                if value < minimum:
                    issues.append(self._issue(
                        "high", f"{name} too low", description, format_bytes(value), format_bytes(recommended)))
                elif value < recommended:
                    issues.append(self._issue(
                        "medium", f"{name} below recommended", description,
                        format_bytes(value), format_bytes(recommended)))
            elif value < minimum:
                issues.append(self._issue("medium", f"{name} too low", description, str(value), str(recommended)))

        query_cache = variables.get("query_cache_size")
        if query_cache and query_cache.isdigit() and int(query_cache) > 0:
            issues.append(self._issue(
                "medium",
                "query_cache_size should be disabled",
                "Query cache is deprecated and should be disabled in MySQL 5.7+",
                query_cache,
                "0",
            ))

        flush = variables.get("innodb_flush_log_at_trx_commit")
        if flush is not None and flush != "2":
            issues.append(self._issue(
                "low",
                "innodb_flush_log_at_trx_commit not optimal",
                "Set to 2 for better performance (with slight durability trade-off)",
                flush,
                "2",
            ))

        tmp, heap = variables.get("tmp_table_size"), variables.get("max_heap_table_size")
        if tmp and heap and tmp != heap and tmp.isdigit() and heap.isdigit():
            issues.append(self._issue(
                "low",
                "tmp_table_size and max_heap_table_size mismatch",
                "These values should be equal for optimal performance.",
                f"tmp: {format_bytes(int(tmp))}, heap: {format_bytes(int(heap))}",
                "Equal values",
            ))
        return issues

    def check_storage_engine(self) -> list[LegacyIssue]:
        schema = self.db.schema_name.replace("'", "''")
        rows = self.db.fetch_all(
            "SELECT table_name AS name, engine FROM information_schema.TABLES "
            f"WHERE table_schema = '{schema}' AND engine != 'InnoDB' AND table_type = 'BASE TABLE'"
        )
        if not rows:
            return []
        tables = [f"{row['name']} ({row['engine']})" for row in rows]
        return [self._issue(
            "medium",
            "Non-InnoDB tables detected",
            "InnoDB provides better performance and reliability for Magento.",
            abbreviate(tables),
            "All tables using InnoDB",
            {"non_innodb_tables": tables},
        )]

    def check_slow_query_log(self, variables: dict[str, str | None]) -> list[LegacyIssue]:
        slow_log = variables.get("slow_query_log")
        if slow_log is not None and slow_log.upper() != "ON":
            return [self._issue(
                "medium",
                "Slow query log disabled",
                "Enable slow query log to identify performance bottlenecks.",
                "Disabled",
                "Enabled",
            )]
        long_query_time = variables.get("long_query_time")
        try:
            too_high = long_query_time is not None and float(long_query_time) > 2
        except ValueError:
            too_high = False
        if too_high:
            return [self._issue(
                "low",
                "Slow query threshold too high",
                "Lower threshold helps identify more optimization opportunities.",
                f"{long_query_time} seconds",
                "2 seconds or less",
            )]
        return []

    def check_binary_log(self, variables: dict[str, str | None]) -> list[LegacyIssue]:
        if (variables.get("log_bin") or "").upper() != "ON":
            return []
        expire_days = variables.get("expire_logs_days") or "0"
        if expire_days.isdigit() and int(expire_days) > 7:
            return [self._issue(
                "low",
                "Binary log retention too long",
                "Long binary log retention consumes disk space. Keep only what replication and backups need.",
                f"{expire_days} days",
                "7 days or less",
            )]
        return []
