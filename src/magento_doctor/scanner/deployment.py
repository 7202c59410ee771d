"""Deployment Scanner - Reads app/etc/env.php and what derives from it.

env.php is a PHP file returning an array, so it is evaluated by the PHP
CLI on the reviewed host and handed back as JSON.
"""

import json
import logging
import shlex
from dataclasses import dataclass
from typing import Any

from magento_doctor.connector.base import CommandError, Connector

logger = logging.getLogger(__name__)

ENV_FILE = "app/etc/env.php"


def read_php_array(connector: Connector, path: str) -> dict[str, Any]:
    """Evaluate a PHP file that returns an array and decode it.

    Raises:
        CommandError: PHP failed, or the output is not a JSON object.
    """
    script = f"echo json_encode(include {json.dumps(path)});"
    result = connector.check(f"php -r {shlex.quote(script)}")
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise CommandError(result, f"Could not decode {path}: {e}") from e
    # json_encode turns an empty PHP array into []
    if data == []:
        return {}
    if not isinstance(data, dict):
        raise CommandError(result, f"{path} did not return an array")
    return data


class DeploymentConfig:
    """Read access to the deployment configuration (env.php)."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data = data or {}

    @classmethod
    def load(cls, connector: Connector, root: str) -> "DeploymentConfig":
        return cls(read_php_array(connector, f"{root.rstrip('/')}/{ENV_FILE}"))

    def get(self, path: str | None = None, default: Any = None) -> Any:
        """Value at a ``/``-separated path such as ``db/connection/default``."""
        if not path:
            return self.data
        node: Any = self.data
        for part in path.split("/"):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node


class AppState:
    """Application mode as set by ``bin/magento deploy:mode:set``."""

    MODE_DEFAULT = "default"
    MODE_DEVELOPER = "developer"
    MODE_PRODUCTION = "production"

    def __init__(self, mode: str | None = None) -> None:
        self.mode = mode or self.MODE_DEFAULT

    @classmethod
    def from_deployment(cls, deployment_config: DeploymentConfig) -> "AppState":
        return cls(deployment_config.get("MAGE_MODE"))

    def get_mode(self) -> str:
        return self.mode


@dataclass
class CacheType:
    """One cache type and whether it is enabled."""

    id: str
    enabled: bool


class CacheTypeList:
    """Cache types declared under ``cache_types`` in env.php."""

    def __init__(self, types: dict[str, Any] | None = None) -> None:
        self.types = [CacheType(id=name, enabled=bool(int(status or 0))) for name, status in (types or {}).items()]

    @classmethod
    def from_deployment(cls, deployment_config: DeploymentConfig) -> "CacheTypeList":
        types = deployment_config.get("cache_types", {})
        return cls(types if isinstance(types, dict) else {})

    def disabled(self) -> list[str]:
        return [t.id for t in self.types if not t.enabled]
