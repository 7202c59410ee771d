"""Database Analyzer - Database size, large tables and data volumes."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.units import abbreviate, format_bytes

GB = 1024**3


class DatabaseAnalyzer:
    """Flags data volumes that slow down queries and maintenance."""

    CATEGORY = "Database"

    DB_SIZE_WARNING = 20 * GB
    DB_SIZE_CRITICAL = 50 * GB
    TABLE_SIZE_WARNING = 1 * GB

    PRODUCT_COUNT_WARNING = 100_000
    CATEGORY_COUNT_WARNING = 10_000
    URL_REWRITE_COUNT_WARNING = 500_000
    LOG_TABLE_ROWS_WARNING = 1_000_000

    LOG_TABLES = {
        "report_event": "Report event log",
        "customer_log": "Customer log",
        "customer_visitor": "Customer visitor log",
        "report_viewed_product_index": "Viewed product report",
        "report_compared_product_index": "Compared product report",
    }

    def __init__(self, resource_connection: ResourceConnection, issue_factory: IssueFactory) -> None:
        self.db = resource_connection
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_database_size(),
            *self.check_table_sizes(),
            *self.check_entity_counts(),
            *self.check_log_tables(),
        ]

    def _schema(self) -> str:
        return self.db.schema_name.replace("'", "''")

    def check_database_size(self) -> list[LegacyIssue]:
        size = self.db.fetch_int(
            "SELECT SUM(data_length + index_length) FROM information_schema.TABLES "
            f"WHERE table_schema = '{self._schema()}'"
        )
        if size > self.DB_SIZE_CRITICAL:
            return [self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Database size exceeds 50GB",
                "Very large database can impact backup/restore times, replication, and query performance.",
                format_bytes(size),
                "Under 50GB",
            )]
        if size > self.DB_SIZE_WARNING:
            return [self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "Database size exceeds 20GB",
                "Large database size may impact performance. Consider archiving old data.",
                format_bytes(size),
                "Under 20GB",
            )]
        return []

    def check_table_sizes(self) -> list[LegacyIssue]:
        rows = self.db.fetch_all(
            "SELECT table_name AS name, data_length + index_length AS size "
            f"FROM information_schema.TABLES WHERE table_schema = '{self._schema()}' "
            f"AND data_length + index_length > {self.TABLE_SIZE_WARNING} ORDER BY size DESC"
        )
        if not rows:
            return []
        tables = [f"{row['name']} ({format_bytes(int(row['size'] or 0))})" for row in rows]
        return [self.issue_factory.create_issue(
            "medium",
            self.CATEGORY,
            "Large tables detected",
            f"{len(tables)} table(s) exceed 1GB. Large tables can slow down queries and maintenance operations.",
            abbreviate(tables),
            "Tables under 1GB",
            {"large_tables": tables},
        )]

    def _count(self, table: str) -> int:
        return self.db.fetch_int(f"SELECT COUNT(*) FROM {self.db.table_name(table)}")

    def check_entity_counts(self) -> list[LegacyIssue]:
        issues = []

        products = self._count("catalog_product_entity")
        if products > self.PRODUCT_COUNT_WARNING:
            issues.append(self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "High product count",
                "Large product catalogs require optimization strategies like flat catalog, "
                "elasticsearch, and proper indexing.",
                f"{products:,}",
                "Optimized for catalog size",
            ))

        categories = self._count("catalog_category_entity")
        if categories > self.CATEGORY_COUNT_WARNING:
            issues.append(self.issue_factory.create_issue(
                "low",
                self.CATEGORY,
                "High category count",
                "Large category trees can impact navigation performance. Consider category structure optimization.",
                f"{categories:,}",
                "Optimized category structure",
            ))

        rewrites = self._count("url_rewrite")
        if rewrites > self.URL_REWRITE_COUNT_WARNING:
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Excessive URL rewrites",
                "Too many URL rewrites can severely impact performance. Consider disabling automatic "
                "generation for categories/products.",
                f"{rewrites:,}",
                "Under 500,000",
            ))
        return issues

    def check_log_tables(self) -> list[LegacyIssue]:
        issues = []
        for table, description in self.LOG_TABLES.items():
            if not self.db.table_exists(table):
                continue
            count = self._count(table)
            if count > self.LOG_TABLE_ROWS_WARNING:
                issues.append(self.issue_factory.create_issue(
                    "medium",
                    self.CATEGORY,
                    f"Large {description} table",
                    "Log tables should be cleaned regularly to maintain performance.",
                    f"{count:,} records",
                    "Regular cleanup",
                ))
        return issues
