"""Configuration management for magento-doctor reviews.

Configuration is layered YAML, later layers winning:

1. ``/etc/magento-doctor.yaml`` (system)
2. ``~/.magento-doctor.yaml`` (user)
3. ``<magento root>/app/etc/magento-doctor.yaml`` (project, read through the
   connector so it also works over SSH)
4. ``--config FILE`` or the ``MAGENTO_DOCTOR_CONFIG`` environment variable
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from magento_doctor.connector.base import Connector

logger = logging.getLogger(__name__)

ENV_VAR = "MAGENTO_DOCTOR_CONFIG"
SYSTEM_CONFIG = Path("/etc/magento-doctor.yaml")
USER_CONFIG = Path("~/.magento-doctor.yaml")
PROJECT_CONFIG = "app/etc/magento-doctor.yaml"


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge *override* into a copy of *base*.

    Mappings merge recursively, lists concatenate, anything else from
    *override* replaces the value in *base*.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_config(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            merged[key] = current + value
        else:
            merged[key] = value
    return merged


def parse_config(text: str, source: str) -> dict[str, Any]:
    """Parse one YAML document; malformed or non-mapping content yields {}."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.warning("Ignoring malformed configuration %s: %s", source, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring configuration %s: top level must be a mapping", source)
        return {}
    return data


def read_local_config(path: Path) -> dict[str, Any]:
    path = path.expanduser()
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Ignoring unreadable configuration %s: %s", path, e)
        return {}
    logger.info("Loaded configuration %s", path)
    return parse_config(text, str(path))


class ConfigLoader:
    """Builds the merged configuration map for one review."""

    def __init__(
        self,
        system_path: Path = SYSTEM_CONFIG,
        user_path: Path = USER_CONFIG,
    ) -> None:
        self.system_path = system_path
        self.user_path = user_path

    def load(
        self,
        connector: Connector | None = None,
        root: str | None = None,
        config_file: str | Path | None = None,
    ) -> dict[str, Any]:
        config: dict[str, Any] = {}
        config = merge_config(config, read_local_config(self.system_path))
        config = merge_config(config, read_local_config(self.user_path))

        if connector is not None and root:
            project = f"{root.rstrip('/')}/{PROJECT_CONFIG}"
            if connector.file_exists(project):
                text = connector.read_file(project)
                if text is None:
                    logger.warning("Ignoring unreadable configuration %s", project)
                else:
                    logger.info("Loaded configuration %s", project)
                    config = merge_config(config, parse_config(text, project))

        explicit = config_file or os.getenv(ENV_VAR)
        if explicit:
            path = Path(explicit)
            if not path.expanduser().exists():
                logger.warning("Configuration file not found: %s", path)
            config = merge_config(config, read_local_config(path))

        return config


def review_timeout(config: dict[str, Any]) -> float | None:
    """``review.timeout`` as seconds, or None when unset/invalid/zero."""
    review = config.get("review")
    if not isinstance(review, dict):
        return None
    try:
        timeout = float(review.get("timeout") or 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid review.timeout: %r", review.get("timeout"))
        return None
    return timeout if timeout > 0 else None
