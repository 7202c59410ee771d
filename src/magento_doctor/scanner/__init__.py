"""Scanner package - Data collection from a Magento installation.

Scanners run shell commands through a connector and collect raw data.
They do NOT analyze or reason - that's the analyzer's job.
"""

from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.scanner.deployment import AppState, CacheTypeList, DeploymentConfig
from magento_doctor.scanner.environment import MagentoNotFoundError, collect_dependencies
from magento_doctor.scanner.filesystem import Filesystem
from magento_doctor.scanner.indexer import IndexerRegistry
from magento_doctor.scanner.modules import ComponentRegistrar, ModuleList
from magento_doctor.scanner.php import PhpRuntime
from magento_doctor.scanner.product import ProductMetadata
from magento_doctor.scanner.redis import RedisInfo
from magento_doctor.scanner.scope_config import ScopeConfig
from magento_doctor.scanner.search import SearchEngineClient

__all__ = [
    "AppState",
    "CacheTypeList",
    "ComponentRegistrar",
    "DeploymentConfig",
    "Filesystem",
    "IndexerRegistry",
    "MagentoNotFoundError",
    "ModuleList",
    "PhpRuntime",
    "ProductMetadata",
    "RedisInfo",
    "ResourceConnection",
    "ScopeConfig",
    "SearchEngineClient",
    "collect_dependencies",
]
