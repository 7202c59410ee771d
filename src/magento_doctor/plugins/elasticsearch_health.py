"""Elasticsearch Health Analyzer - Cluster status and product index size."""

import logging

from magento_doctor.checks import Checkable, DependencyAware
from magento_doctor.connector.base import CommandError
from magento_doctor.model.collection import IssueCollection
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.scanner.scope_config import ScopeConfig
from magento_doctor.scanner.search import SearchEngineClient

logger = logging.getLogger(__name__)

SEARCH_ENGINES = ("elasticsearch7", "elasticsearch6", "elasticsearch5", "opensearch")
INDEX_SIZE_WARNING_GB = 50


class ElasticsearchHealthAnalyzer(Checkable, DependencyAware):
    CATEGORY = "Elasticsearch"

    def __init__(self) -> None:
        self.dependencies = Dependencies()

    def set_dependencies(self, dependencies: Dependencies) -> None:
        self.dependencies = dependencies

    def analyze(self, collection: IssueCollection) -> None:
        scope_config = self.dependencies.get("scope_config")
        connector = self.dependencies.get("connector")
        if scope_config is None or connector is None:
            return

        engine = scope_config.get_value("catalog/search/engine")
        if engine not in SEARCH_ENGINES:
            logger.debug("Search engine %r is not Elasticsearch, skipping", engine)
            return

        base_url = self.base_url(scope_config, engine)
        client = SearchEngineClient(connector, base_url)
        prefix = scope_config.get_value(f"catalog/search/{engine}_index_prefix") or "magento2"

        try:
            health = client.get_json("/_cluster/health")
            stats = client.get_json(f"/{prefix}_product_*/_stats")
        except CommandError as e:
            logger.info("Elasticsearch at %s unreachable: %s", base_url, e)
            (
                collection.create_issue()
                .set_priority("high")
                .set_category(self.CATEGORY)
                .set_issue("Cannot connect to Elasticsearch")
                .set_details(
                    f"Failed to connect to Elasticsearch at {base_url}. "
                    "Search functionality may be impaired."
                )
                .finalize()
            )
            return

        if health:
            self.check_cluster_health(health, collection)
        if stats:
            self.check_index_size(stats, collection)

    @staticmethod
    def base_url(scope_config: ScopeConfig, engine: str) -> str:
        host = scope_config.get_value(f"catalog/search/{engine}_server_hostname") or "localhost"
        port = scope_config.get_value(f"catalog/search/{engine}_server_port") or "9200"
        if "://" in str(host):
            return f"{host}:{port}"
        return f"http://{host}:{port}"

    def check_cluster_health(self, health: dict, collection: IssueCollection) -> None:
        status = health.get("status")
        if status == "red":
            (
                collection.create_issue()
                .set_priority("high")
                .set_category(self.CATEGORY)
                .set_issue("Elasticsearch cluster status is RED")
                .set_details(
                    "Red status indicates that some primary shards are not allocated. "
                    "This affects search functionality."
                )
                .set_current_value("RED")
                .set_recommended_value("GREEN")
                .finalize()
            )
        elif status == "yellow":
            (
                collection.create_issue()
                .set_priority("medium")
                .set_category(self.CATEGORY)
                .set_issue("Elasticsearch cluster status is YELLOW")
                .set_details(
                    "Yellow status indicates that replica shards are not allocated. "
                    "This reduces redundancy but search still works."
                )
                .set_current_value("YELLOW")
                .set_recommended_value("GREEN")
                .finalize()
            )

        unassigned = health.get("unassigned_shards") or 0
        if isinstance(unassigned, int) and unassigned > 0:
            (
                collection.create_issue()
                .set_priority("medium")
                .set_category(self.CATEGORY)
                .set_issue("Elasticsearch has unassigned shards")
                .set_details(
                    "Unassigned shards indicate allocation problems. "
                    "This may affect search performance and reliability."
                )
                .set_current_value(f"{unassigned} unassigned shards")
                .set_recommended_value("0 unassigned shards")
                .finalize()
            )

    def check_index_size(self, stats: dict, collection: IssueCollection) -> None:
        size = stats.get("_all", {}).get("total", {}).get("store", {}).get("size_in_bytes")
        if not isinstance(size, (int, float)):
            return
        size_gb = size / 1024 / 1024 / 1024
        if size_gb <= INDEX_SIZE_WARNING_GB:
            return
        (
            collection.create_issue()
            .set_priority("low")
            .set_category(self.CATEGORY)
            .set_issue("Large Elasticsearch index size")
            .set_details(
                "Large index size may impact indexing and search performance. "
                "Consider optimizing indexed attributes."
            )
            .set_current_value(f"{size_gb:.1f} GB")
            .set_recommended_value(f"< {INDEX_SIZE_WARNING_GB} GB")
            .finalize()
        )
