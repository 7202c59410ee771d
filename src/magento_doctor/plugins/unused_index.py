"""Unused Index Analyzer - Secondary indexes no query has touched.

Usage counts come from performance_schema, sizes from the persistent
InnoDB statistics. Unused indexes cost disk space and slow down every
INSERT, UPDATE and DELETE on their table.
"""

import logging
from typing import Any

from magento_doctor.checks import Checkable, Configurable, DependencyAware
from magento_doctor.connector.base import CommandError
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.scanner.database import ResourceConnection

logger = logging.getLogger(__name__)

DEFAULTS = {
    "min_size_mb": 10,
    "medium_priority_mb": 100,
    "high_priority_mb": 500,
}

DETAILS = (
    "This index has never been used by any queries according to performance_schema statistics. "
    "Unused indexes waste disk space and slow down INSERT, UPDATE, and DELETE operations because "
    "MySQL must maintain the index on every write. Consider dropping this index after verifying "
    "it's not needed for any queries.\n\n"
    "IMPORTANT: Always test in a non-production environment first and verify with your development "
    "team before dropping any indexes."
)


class UnusedIndexAnalyzer(Checkable, Configurable, DependencyAware):
    CATEGORY = "Database"

    def __init__(self) -> None:
        self.config: dict[str, Any] = dict(DEFAULTS)
        self.dependencies = Dependencies()

    def set_config(self, config: dict[str, Any]) -> None:
        self.config = {**DEFAULTS, **(config or {})}

    def set_dependencies(self, dependencies: Dependencies) -> None:
        self.dependencies = dependencies

    def analyze(self, collection: IssueCollection) -> None:
        db = self.dependencies.get("resource_connection")
        if db is None:
            return

        try:
            if not self.performance_schema_available(db):
                self._performance_schema_warning(collection)
                return
            indexes = self.unused_indexes(db, float(self.config["min_size_mb"]))
        except (CommandError, ValueError) as e:
            (
                collection.create_issue()
                .set_priority("low")
                .set_category(self.CATEGORY)
                .set_issue("Unused index analysis failed")
                .set_details(f"Could not analyze unused indexes: {e}")
                .finalize()
            )
            return

        for row in indexes:
            self._index_issue(collection, row)

    @staticmethod
    def performance_schema_available(db: ResourceConnection) -> bool:
        try:
            if not db.fetch_int(
                "SELECT COUNT(*) FROM information_schema.SCHEMATA WHERE SCHEMA_NAME = 'performance_schema'"
            ):
                return False
            return db.fetch_int(
                "SELECT COUNT(*) FROM information_schema.TABLES "
                "WHERE TABLE_SCHEMA = 'performance_schema' "
                "AND TABLE_NAME = 'table_io_waits_summary_by_index_usage'"
            ) > 0
        except CommandError as e:
            logger.info("Cannot inspect performance_schema: %s", e)
            return False

    @staticmethod
    def unused_indexes(db: ResourceConnection, min_size_mb: float) -> list[dict[str, Any]]:
        """Unused secondary indexes of at least *min_size_mb*, largest first.

        An empty list when the statistics tables cannot be read.
        """
        schema = db.schema_name.replace("'", "''")
        sql = (
            "SELECT s.table_name AS TABLE_NAME, s.index_name AS INDEX_NAME, "
            "ROUND(s.stat_value * @@innodb_page_size / 1024 / 1024, 2) AS size_mb "
            "FROM mysql.innodb_index_stats s "
            "LEFT JOIN performance_schema.table_io_waits_summary_by_index_usage ps "
            "ON ps.OBJECT_SCHEMA = s.database_name "
            "AND ps.OBJECT_NAME = s.table_name "
            "AND ps.INDEX_NAME = s.index_name "
            f"WHERE s.database_name = '{schema}' "
            "AND s.stat_name = 'size' "
            "AND s.index_name != 'PRIMARY' "
            "AND (ps.COUNT_STAR = 0 OR ps.COUNT_STAR IS NULL) "
            f"HAVING size_mb >= {float(min_size_mb)} "
            "ORDER BY size_mb DESC"
        )
        try:
            return db.fetch_all(sql)
        except CommandError as e:
            logger.info("InnoDB index statistics unavailable: %s", e)
            return []

    def priority_for(self, size_mb: float) -> str:
        if size_mb >= float(self.config["high_priority_mb"]):
            return "high"
        if size_mb >= float(self.config["medium_priority_mb"]):
            return "medium"
        return "low"

    def _index_issue(self, collection: IssueCollection, row: dict[str, Any]) -> None:
        table = row.get("TABLE_NAME") or ""
        index = row.get("INDEX_NAME") or ""
        try:
            size_mb = float(row.get("size_mb") or 0)
        except ValueError:
            size_mb = 0.0
        (
            collection.create_issue()
            .set_priority(self.priority_for(size_mb))
            .set_category(self.CATEGORY)
            .set_issue(f"Unused index '{index}' on table '{table}'")
            .set_details(DETAILS)
            .set_current_value(f"Size: {size_mb:.2f} MB, Usage: 0 queries")
            .set_recommended_value(f"ALTER TABLE `{table}` DROP INDEX `{index}`;")
            .set_extra_data({"table": table, "index": index, "size_mb": size_mb})
            .finalize()
        )

    def _performance_schema_warning(self, collection: IssueCollection) -> None:
        (
            collection.create_issue()
            .set_priority("low")
            .set_category(self.CATEGORY)
            .set_issue("MySQL performance_schema not available for index analysis")
            .set_details(
                "The performance_schema is required to detect unused indexes. "
                "Enable it in MySQL configuration (performance_schema = ON) and restart MySQL. "
                "Note: This has minimal performance impact in production."
            )
            .set_recommended_value("Enable performance_schema in my.cnf")
            .finalize()
        )
