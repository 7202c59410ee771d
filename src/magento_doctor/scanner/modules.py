"""Module Scanner - Installed modules and where their code lives."""

import logging
import shlex

from magento_doctor.connector.base import Connector
from magento_doctor.scanner.deployment import read_php_array

logger = logging.getLogger(__name__)

CONFIG_FILE = "app/etc/config.php"


class ModuleList:
    """Module status from the ``modules`` section of app/etc/config.php."""

    CORE_VENDORS = ("Magento_", "PayPal_", "Klarna_", "Amazon_", "Vertex_", "Dotdigitalgroup_", "Yotpo_")

    def __init__(self, modules: dict[str, int] | None = None) -> None:
        self.modules = {name: bool(int(status or 0)) for name, status in (modules or {}).items()}

    @classmethod
    def load(cls, connector: Connector, root: str) -> "ModuleList":
        config = read_php_array(connector, f"{root.rstrip('/')}/{CONFIG_FILE}")
        modules = config.get("modules", {})
        return cls(modules if isinstance(modules, dict) else {})

    def get_names(self) -> list[str]:
        """Enabled modules, in load order."""
        return [name for name, enabled in self.modules.items() if enabled]

    def get_disabled_names(self) -> list[str]:
        return [name for name, enabled in self.modules.items() if not enabled]

    def has(self, name: str) -> bool:
        return self.modules.get(name, False)

    @classmethod
    def is_core_module(cls, name: str) -> bool:
        return name.startswith(cls.CORE_VENDORS)

    def get_third_party_names(self) -> list[str]:
        return [name for name in self.get_names() if not self.is_core_module(name)]


class ComponentRegistrar:
    """Modules living in ``app/code/<Vendor>/<Module>``.

    Modules installed with composer live under vendor/ and are not
    listed here.
    """

    def __init__(self, connector: Connector, root: str) -> None:
        self.connector = connector
        self.root = root.rstrip("/")
        self._paths: dict[str, str] | None = None

    def get_paths(self) -> dict[str, str]:
        """``Vendor_Module`` -> absolute directory."""
        if self._paths is None:
            self._paths = {}
            app_code = f"{self.root}/app/code"
            result = self.connector.run(
                f"find {shlex.quote(app_code)} -mindepth 2 -maxdepth 2 -type d 2>/dev/null"
            )
            for path in sorted(result.stdout.split("\n")):
                if not path.startswith(app_code + "/"):
                    continue
                vendor, _, module = path[len(app_code) + 1:].partition("/")
                if vendor and module:
                    self._paths[f"{vendor}_{module}"] = path
        return dict(self._paths)
