"""Redis Scanner - Server statistics through redis-cli.

redis-cli runs on the reviewed host, so the server address from env.php
resolves exactly as it does for Magento.
"""

import logging
import shlex
from typing import Any

from magento_doctor.connector.base import CommandError, Connector

logger = logging.getLogger(__name__)


class RedisInfo:
    """Parsed ``INFO`` output of one Redis server.

    Example:
        >>> info = RedisInfo.load(connector, "127.0.0.1", 6379)
        >>> info.get_int("evicted_keys")
        0
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})

    @classmethod
    def load(
        cls,
        connector: Connector,
        server: str,
        port: int | str = 6379,
        password: str | None = None,
        timeout: float = 10,
    ) -> "RedisInfo":
        """Run ``redis-cli INFO`` against *server*.

        Raises:
            CommandError: redis-cli is missing, the server is unreachable,
                or the reply is not an INFO document.
        """
        if str(server).startswith("/"):
            target = f"-s {shlex.quote(str(server))}"
        else:
            target = f"-h {shlex.quote(str(server))} -p {shlex.quote(str(port))}"
        command = f"redis-cli {target} INFO"
        if password:
            command = f"REDISCLI_AUTH={shlex.quote(str(password))} {command}"

        result = connector.run(command, timeout=timeout)
        # Keep the password out of error messages
        result.command = f"redis-cli {target} INFO"
        if not result.success:
            raise CommandError(result)

        info = cls.parse(result.stdout)
        if "redis_version" not in info.values:
            first_line = result.stdout.strip().split("\n")[0] if result.stdout.strip() else "empty reply"
            raise CommandError(result, f"Unexpected redis-cli reply: {first_line}")
        logger.debug("Redis %s at %s", info.get("redis_version"), target)
        return info

    @classmethod
    def parse(cls, text: str) -> "RedisInfo":
        values = {}
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition(":")
            if sep:
                values[key] = value
        return cls(values)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(float(self.values[key]))
        except (KeyError, ValueError):
            return default
