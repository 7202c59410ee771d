"""Scope Config Scanner - Store configuration at default scope."""

import logging
from typing import Any

from magento_doctor.scanner.database import ResourceConnection
from magento_doctor.scanner.deployment import DeploymentConfig

logger = logging.getLogger(__name__)


def _flatten(node: Any, prefix: str = "") -> dict[str, Any]:
    if not isinstance(node, dict):
        return {prefix: node} if prefix else {}
    values: dict[str, Any] = {}
    for key, child in node.items():
        values.update(_flatten(child, f"{prefix}/{key}" if prefix else str(key)))
    return values


class ScopeConfig:
    """Configuration paths such as ``dev/js/minify_files``.

    Values come from ``core_config_data`` (default scope), overridden by
    ``system/default`` in env.php, which is what Magento itself reads.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values = dict(values or {})

    @classmethod
    def load(
        cls,
        deployment_config: DeploymentConfig,
        resource_connection: ResourceConnection | None = None,
    ) -> "ScopeConfig":
        values: dict[str, Any] = {}
        if resource_connection is not None:
            table = resource_connection.table_name("core_config_data")
            values.update(
                resource_connection.fetch_pairs(
                    f"SELECT path, value FROM {table} WHERE scope = 'default' AND scope_id = 0"
                )
            )
        else:
            logger.debug("No database connection, scope config limited to env.php")
        values.update(_flatten(deployment_config.get("system/default", {})))
        return cls(values)

    def get_value(self, path: str, default: Any = None) -> Any:
        value = self.values.get(path)
        return default if value is None else value

    def is_set_flag(self, path: str) -> bool:
        value = self.values.get(path)
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip().lower() not in ("", "0", "false")
        return bool(value)
