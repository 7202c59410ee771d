"""Dependency bag shared by every analyzer of a run."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from magento_doctor.connector.base import Connector
    from magento_doctor.model.legacy import IssueFactory
    from magento_doctor.scanner.database import ResourceConnection
    from magento_doctor.scanner.deployment import AppState, CacheTypeList, DeploymentConfig
    from magento_doctor.scanner.filesystem import Filesystem
    from magento_doctor.scanner.indexer import IndexerRegistry
    from magento_doctor.scanner.modules import ComponentRegistrar, ModuleList
    from magento_doctor.scanner.php import PhpRuntime
    from magento_doctor.scanner.product import ProductMetadata
    from magento_doctor.scanner.scope_config import ScopeConfig


@dataclass(frozen=True)
class Dependencies(Mapping):
    """Typed, read-only collaborators handed to analyzers.

    Any field may be ``None`` when the environment could not provide it.
    The bag is also a ``Mapping`` over the fields that ARE present, so
    ``"scope_config" in deps`` and ``deps.get("scope_config")`` behave like
    a dictionary that simply lacks missing collaborators.
    """

    connector: "Connector | None" = None
    deployment_config: "DeploymentConfig | None" = None
    app_state: "AppState | None" = None
    cache_type_list: "CacheTypeList | None" = None
    scope_config: "ScopeConfig | None" = None
    resource_connection: "ResourceConnection | None" = None
    module_list: "ModuleList | None" = None
    component_registrar: "ComponentRegistrar | None" = None
    filesystem: "Filesystem | None" = None
    indexer_registry: "IndexerRegistry | None" = None
    product_metadata: "ProductMetadata | None" = None
    php_runtime: "PhpRuntime | None" = None
    issue_factory: "IssueFactory | None" = None

    def _present(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def __getitem__(self, key: str) -> Any:
        present = self._present()
        if key not in present:
            raise KeyError(key)
        return present[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._present())

    def __len__(self) -> int:
        return len(self._present())
