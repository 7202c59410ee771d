"""Indexer & Cron Analyzer - Indexer status and cron job health."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.scanner.indexer import IndexerRegistry
from magento_doctor.units import abbreviate


class IndexerCronAnalyzer:
    CATEGORY = "Indexing"

    CRON_ERROR_WARNING = 10
    PENDING_JOBS_WARNING = 1000
    SCHEDULE_ROWS_WARNING = 10_000

    def __init__(
        self,
        indexer_registry: IndexerRegistry,
        resource_connection: ResourceConnection,
        issue_factory: IssueFactory,
    ) -> None:
        self.indexer_registry = indexer_registry
        self.db = resource_connection
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_indexer_status(),
            *self.check_indexer_mode(),
            *self.check_cron_status(),
            *self.check_cron_schedule(),
            *self.check_stuck_jobs(),
        ]

    def check_indexer_status(self) -> list[LegacyIssue]:
        invalid = self.indexer_registry.invalid()
        if not invalid:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Invalid indexers detected",
            "Invalid indexers need to be reindexed to ensure data consistency and performance.",
            abbreviate(invalid),
            "All indexers valid",
            {"invalid_indexers": invalid},
        )]

    def check_indexer_mode(self) -> list[LegacyIssue]:
        realtime = self.indexer_registry.realtime()
        if not realtime:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            'Indexers in "Update on Save" mode',
            'Realtime indexing can severely impact admin performance. Use "Update by Schedule" mode.',
            f"{len(realtime)} indexer(s)",
            "All in schedule mode",
            {"realtime_indexers": realtime},
        )]

    @property
    def _schedule(self) -> str:
        return self.db.table_name("cron_schedule")

    def check_cron_status(self) -> list[LegacyIssue]:
        issues = []
        recent = self.db.fetch_int(
            f"SELECT COUNT(*) FROM {self._schedule} "
            "WHERE status = 'success' AND executed_at >= NOW() - INTERVAL 1 HOUR"
        )
        if recent == 0:
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Cron not running",
                "No successful cron jobs in the last hour. Cron is required for scheduled tasks and indexing.",
                "No recent jobs",
                "Cron running",
            ))

        errors = self.db.fetch_int(
            f"SELECT COUNT(*) FROM {self._schedule} "
            "WHERE status = 'error' AND executed_at >= NOW() - INTERVAL 24 HOUR"
        )
        if errors > self.CRON_ERROR_WARNING:
            issues.append(self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "Multiple cron errors",
                "High number of cron errors in the last 24 hours indicates stability issues.",
                f"{errors} errors",
                "Minimal errors",
            ))
        return issues

    def check_cron_schedule(self) -> list[LegacyIssue]:
        issues = []
        pending = self.db.fetch_int(f"SELECT COUNT(*) FROM {self._schedule} WHERE status = 'pending'")
        if pending > self.PENDING_JOBS_WARNING:
            issues.append(self.issue_factory.create_issue(
                "high",
                self.CATEGORY,
                "Excessive pending cron jobs",
                "Too many pending jobs indicates cron execution problems or performance issues.",
                f"{pending} pending",
                "Under 100 pending",
            ))

        total = self.db.fetch_int(f"SELECT COUNT(*) FROM {self._schedule}")
        if total > self.SCHEDULE_ROWS_WARNING:
            issues.append(self.issue_factory.create_issue(
                "medium",
                self.CATEGORY,
                "Large cron_schedule table",
                "Cron schedule table should be cleaned regularly to maintain performance.",
                f"{total} records",
                "Regular cleanup",
            ))
        return issues

    def check_stuck_jobs(self) -> list[LegacyIssue]:
        rows = self.db.fetch_all(
            f"SELECT DISTINCT job_code FROM {self._schedule} "
            "WHERE status = 'running' AND executed_at <= NOW() - INTERVAL 2 HOUR"
        )
        stuck = [row["job_code"] for row in rows if row.get("job_code")]
        if not stuck:
            return []
        return [self.issue_factory.create_issue(
            "high",
            self.CATEGORY,
            "Stuck cron jobs detected",
            "Jobs running for over 2 hours may be stuck and blocking other jobs.",
            abbreviate(stuck),
            "No stuck jobs",
            {"stuck_jobs": stuck},
        )]
