"""API Analyzer - Integrations, OAuth tokens and async API health."""

from magento_doctor.model.legacy import IssueFactory, LegacyIssue
from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.scanner.scope_config import ScopeConfig

ASYNC_CONSUMER_ENABLED = "webapi/async/consumer/enabled"
OAUTH_CLEANUP_PROBABILITY = "oauth/cleanup/cleanup_probability"
OAUTH_EXPIRATION_PERIOD = "oauth/consumer/expiration_period"
RATE_LIMITING = "webapi/rate_limiting/enabled"


class ApiAnalyzer:
    CATEGORY = "API"

    ACTIVE_INTEGRATIONS_WARNING = 10
    TOKENS_WARNING = 10_000
    STUCK_MESSAGES_WARNING = 100

    def __init__(
        self,
        scope_config: ScopeConfig,
        resource_connection: ResourceConnection,
        issue_factory: IssueFactory,
    ) -> None:
        self.scope_config = scope_config
        self.db = resource_connection
        self.issue_factory = issue_factory

    def analyze(self) -> list[LegacyIssue]:
        return [
            *self.check_api_usage(),
            *self.check_async_queue(),
            *self.check_oauth_configuration(),
            *self.check_integration_tokens(),
            *self.check_rate_limiting(),
        ]

    def _issue(self, priority: str, title: str, details: str, current, recommended) -> LegacyIssue:
        return self.issue_factory.create_issue(priority, self.CATEGORY, title, details, current, recommended)

    def check_api_usage(self) -> list[LegacyIssue]:
        issues = []
        if self.db.table_exists("integration"):
            active = self.db.fetch_int(f"SELECT COUNT(*) FROM {self.db.table_name('integration')} WHERE status = 1")
            if active > self.ACTIVE_INTEGRATIONS_WARNING:
                issues.append(self._issue(
                    "medium",
                    "High number of active integrations",
                    "Many active integrations can impact performance. Review and disable unused integrations.",
                    f"{active} integrations",
                    "Only necessary integrations",
                ))
        if self.db.table_exists("oauth_token"):
            tokens = self.db.fetch_int(f"SELECT COUNT(*) FROM {self.db.table_name('oauth_token')}")
            if tokens > self.TOKENS_WARNING:
                issues.append(self._issue(
                    "medium",
                    "Large OAuth token table",
                    "Too many OAuth tokens can slow down API authentication. Enable regular cleanup.",
                    f"{tokens} tokens",
                    "Regular cleanup",
                ))
        return issues

    def check_async_queue(self) -> list[LegacyIssue]:
        if not self.scope_config.is_set_flag(ASYNC_CONSUMER_ENABLED):
            return []
        if not self.db.table_exists("queue_message_status"):
            return []
        # 2 = in progress, 3 = complete but never acknowledged
        stuck = self.db.fetch_int(
            f"SELECT COUNT(*) FROM {self.db.table_name('queue_message_status')} "
            "WHERE status IN (2, 3) AND updated_at < NOW() - INTERVAL 24 HOUR"
        )
        if stuck <= self.STUCK_MESSAGES_WARNING:
            return []
        return [self._issue(
            "high",
            "Stuck async API messages",
            "Many messages stuck in processing state indicates consumer issues.",
            f"{stuck} stuck messages",
            "Working consumers",
        )]

    def check_oauth_configuration(self) -> list[LegacyIssue]:
        issues = []
        probability = _int(self.scope_config.get_value(OAUTH_CLEANUP_PROBABILITY, 100))
        if probability == 0:
            issues.append(self._issue(
                "medium",
                "OAuth cleanup disabled",
                "OAuth tokens should be cleaned up periodically to prevent table growth.",
                "Disabled",
                "Enable cleanup",
            ))
        elif probability < 10:
            issues.append(self._issue(
                "low",
                "Low OAuth cleanup probability",
                "Increase cleanup probability for more frequent token cleanup.",
                f"{probability}%",
                "10% or higher",
            ))

        expiration = _int(self.scope_config.get_value(OAUTH_EXPIRATION_PERIOD, 300))
        if expiration > 3600:
            issues.append(self._issue(
                "low",
                "Long OAuth token expiration",
                "Shorter token expiration improves security and reduces token table size.",
                f"{expiration} seconds",
                "3600 seconds or less",
            ))
        return issues

    def check_integration_tokens(self) -> list[LegacyIssue]:
        if not (self.db.table_exists("integration") and self.db.table_exists("oauth_token")):
            return []
        permanent = self.db.fetch_int(
            "SELECT COUNT(DISTINCT i.integration_id) "
            f"FROM {self.db.table_name('integration')} i "
            f"JOIN {self.db.table_name('oauth_token')} t ON i.consumer_id = t.consumer_id "
            "WHERE i.status = 1 AND t.revoked = 0"
        )
        if permanent == 0:
            return []
        return [self._issue(
            "medium",
            "Integrations with permanent tokens",
            "Permanent tokens pose security risks. Use expiring tokens when possible.",
            f"{permanent} integrations",
            "Expiring tokens",
        )]

    def check_rate_limiting(self) -> list[LegacyIssue]:
        # Setting only exists on releases that support rate limiting
        if self.scope_config.get_value(RATE_LIMITING) is None or self.scope_config.is_set_flag(RATE_LIMITING):
            return []
        return [self._issue(
            "medium",
            "API rate limiting disabled",
            "Rate limiting protects against API abuse and DoS attacks.",
            "Disabled",
            "Enabled",
        )]


def _int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
