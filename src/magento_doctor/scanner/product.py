"""Product Scanner - Magento edition, version and installed packages.

Everything comes from composer metadata, so no PHP bootstrap is needed.
"""

import json
import logging

from magento_doctor.connector.base import Connector

logger = logging.getLogger(__name__)

EDITIONS = {
    "magento/product-community-edition": "Community",
    "magento/product-enterprise-edition": "Commerce",
    "magento/magento-cloud-metapackage": "Commerce Cloud",
}


class ProductMetadata:
    """Edition and version of the installation."""

    def __init__(
        self,
        edition: str = "Community",
        version: str = "",
        packages: dict[str, str] | None = None,
        requires: dict[str, dict[str, str]] | None = None,
    ) -> None:
        self.edition = edition
        self.version = version
        # Installed composer packages, name -> version
        self.packages = dict(packages or {})
        # Installed composer packages, name -> {required package: constraint}
        self.requires = dict(requires or {})

    @classmethod
    def load(cls, connector: Connector, root: str) -> "ProductMetadata":
        root = root.rstrip("/")
        packages: dict[str, str] = {}
        requires: dict[str, dict[str, str]] = {}

        lock = connector.read_file(f"{root}/composer.lock")
        if lock:
            try:
                for package in json.loads(lock).get("packages", []):
                    name = package.get("name", "")
                    packages[name] = str(package.get("version", "")).lstrip("v")
                    requires[name] = dict(package.get("require") or {})
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning("Could not parse composer.lock: %s", e)

        for name, edition in EDITIONS.items():
            if name in packages:
                return cls(edition, packages[name], packages, requires)

        # Fall back to the root package (git checkouts of magento2)
        composer = connector.read_file(f"{root}/composer.json")
        if composer:
            try:
                data = json.loads(composer)
                return cls("Community", str(data.get("version", "")), packages, requires)
            except (json.JSONDecodeError, AttributeError) as e:
                logger.warning("Could not parse composer.json: %s", e)
        return cls("Community", "", packages, requires)

    def get_version(self) -> str:
        return self.version

    def get_edition(self) -> str:
        return self.edition

    def extension_packages(self) -> list[str]:
        """Installed packages that are neither Magento core nor libraries it ships."""
        return [
            name for name, requires in self.requires.items()
            if not name.startswith("magento/") and "magento/framework" in requires
        ]
