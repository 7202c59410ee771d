"""PHP Scanner - Version, ini settings and extensions of the PHP CLI.

The CLI is the same binary cron and bin/magento run with, which is
what the review inspects.
"""

import json
import shlex
from typing import Any

from magento_doctor.connector.base import CommandError, Connector

_PROBE = (
    'echo json_encode(["version" => PHP_VERSION, '
    '"ini" => ini_get_all(null, false), '
    '"extensions" => get_loaded_extensions()]);'
)


class PhpRuntime:
    """Snapshot of the PHP runtime on the reviewed host."""

    def __init__(
        self,
        version: str = "",
        ini: dict[str, Any] | None = None,
        extensions: list[str] | None = None,
    ) -> None:
        self.version = version
        self.ini = dict(ini or {})
        self.extensions = list(extensions or [])
        self._extension_names = {e.lower() for e in self.extensions}

    @classmethod
    def load(cls, connector: Connector, php_binary: str = "php") -> "PhpRuntime":
        result = connector.check(f"{php_binary} -r {shlex.quote(_PROBE)}")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CommandError(result, f"Could not decode PHP runtime probe: {e}") from e
        return cls(
            version=str(data.get("version", "")),
            ini=data.get("ini") or {},
            extensions=data.get("extensions") or [],
        )

    def ini_get(self, name: str, default: Any = None) -> Any:
        value = self.ini.get(name)
        return default if value is None else value

    def ini_int(self, name: str, default: int = 0) -> int:
        try:
            return int(float(self.ini_get(name, default)))
        except (TypeError, ValueError):
            return default

    def ini_flag(self, name: str) -> bool:
        value = str(self.ini_get(name, "")).strip().lower()
        return value not in ("", "0", "off", "false", "no")

    def extension_loaded(self, name: str) -> bool:
        return name.lower() in self._extension_names
