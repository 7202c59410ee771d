"""Environment - Builds the dependency bag for one review.

Each collaborator is collected independently. One that cannot be built
(no database credentials, mysql client missing, PHP probe failing) is
left out of the bag with a warning; analyzers that need it then report
their own failure while the rest of the review goes on.
"""

import logging
from typing import Callable, TypeVar

from magento_doctor.connector.base import CommandError, Connector
from magento_doctor.model.dependencies import Dependencies
from magento_doctor.model.legacy import IssueFactory
from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.scanner.deployment import ENV_FILE, AppState, CacheTypeList, DeploymentConfig
from magento_doctor.scanner.filesystem import Filesystem
from magento_doctor.scanner.indexer import IndexerRegistry
from magento_doctor.scanner.modules import ComponentRegistrar, ModuleList
from magento_doctor.scanner.php import PhpRuntime
from magento_doctor.scanner.product import ProductMetadata
from magento_doctor.scanner.scope_config import ScopeConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MagentoNotFoundError(RuntimeError):
    """The review root is not a readable Magento 2 installation."""


def _collect(name: str, build: Callable[[], T]) -> T | None:
    try:
        return build()
    except (CommandError, ValueError, KeyError) as e:
        logger.warning("Could not collect %s: %s", name, e)
        return None


def collect_dependencies(connector: Connector, root: str) -> Dependencies:
    """Collect every collaborator analyzers may ask for.

    Raises:
        MagentoNotFoundError: app/etc/env.php is missing or unreadable.
    """
    root = root.rstrip("/") or "/"
    env_file = f"{root}/{ENV_FILE}"
    if not connector.file_exists(env_file):
        raise MagentoNotFoundError(f"No Magento installation found at {root} ({ENV_FILE} missing)")

    try:
        deployment_config = DeploymentConfig.load(connector, root)
    except CommandError as e:
        raise MagentoNotFoundError(f"Could not read {env_file}: {e}") from e

    resource_connection = ResourceConnection.from_deployment(connector, deployment_config)
    if resource_connection is None:
        logger.warning("No database connection configured in %s", env_file)

    def indexers() -> IndexerRegistry | None:
        if resource_connection is None:
            return None
        return IndexerRegistry.load(resource_connection)

    return Dependencies(
        connector=connector,
        deployment_config=deployment_config,
        app_state=AppState.from_deployment(deployment_config),
        cache_type_list=CacheTypeList.from_deployment(deployment_config),
        # env.php overrides alone when core_config_data is unreachable
        scope_config=_collect(
            "scope config", lambda: ScopeConfig.load(deployment_config, resource_connection)
        ) or ScopeConfig.load(deployment_config),
        resource_connection=resource_connection,
        module_list=_collect("module list", lambda: ModuleList.load(connector, root)),
        component_registrar=ComponentRegistrar(connector, root),
        filesystem=Filesystem(connector, root),
        indexer_registry=_collect("indexers", indexers),
        product_metadata=_collect("product metadata", lambda: ProductMetadata.load(connector, root)),
        php_runtime=_collect("PHP runtime", lambda: PhpRuntime.load(connector)),
        issue_factory=IssueFactory(),
    )
