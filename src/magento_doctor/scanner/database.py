"""Database Scanner - Read-only queries through the mysql client.

The client runs on the reviewed host with the credentials from
env.php, so the review needs no Python database driver and works the
same locally and over SSH.
"""

import logging
import shlex
from typing import Any

from magento_doctor.connector.base import CommandError, Connector
from magento_doctor.scanner.deployment import DeploymentConfig

logger = logging.getLogger(__name__)


class ResourceConnection:
    """Runs SQL against the Magento database.

    Example:
        >>> db = ResourceConnection(connector, {"host": "localhost", "dbname": "magento",
        ...                                     "username": "magento", "password": "secret"})
        >>> db.fetch_value("SELECT COUNT(*) FROM catalog_product_entity")
        '1042'
    """

    NULL = "NULL"

    def __init__(
        self,
        connector: Connector,
        credentials: dict[str, Any],
        table_prefix: str = "",
        timeout: float | None = 60,
    ) -> None:
        self.connector = connector
        self.credentials = credentials
        self.table_prefix = table_prefix or ""
        self.timeout = timeout

    @classmethod
    def from_deployment(
        cls, connector: Connector, deployment_config: DeploymentConfig
    ) -> "ResourceConnection | None":
        """Connection for ``db/connection/default``, or None if not configured."""
        credentials = deployment_config.get("db/connection/default")
        if not isinstance(credentials, dict) or not credentials.get("dbname"):
            return None
        return cls(connector, credentials, deployment_config.get("db/table_prefix", ""))

    @property
    def schema_name(self) -> str:
        return str(self.credentials.get("dbname", ""))

    def table_name(self, name: str) -> str:
        return f"{self.table_prefix}{name}"

    def _command(self, sql: str) -> str:
        host = str(self.credentials.get("host") or "localhost")
        parts = ["mysql", "--batch", "--raw"]
        if host.startswith("/"):
            parts.append(f"--socket={shlex.quote(host)}")
        else:
            host, _, port = host.partition(":")
            parts.append(f"--host={shlex.quote(host)}")
            if port:
                parts.append(f"--port={shlex.quote(port)}")
        if self.credentials.get("username"):
            parts.append(f"--user={shlex.quote(str(self.credentials['username']))}")
        parts.append(shlex.quote(self.schema_name))
        parts.append(f"-e {shlex.quote(sql)}")

        command = " ".join(parts)
        password = self.credentials.get("password")
        if password:
            command = f"MYSQL_PWD={shlex.quote(str(password))} {command}"
        return command

    def fetch_all(self, sql: str) -> list[dict[str, str | None]]:
        """Rows as dictionaries keyed by column name.

        Raises:
            CommandError: The client failed (bad credentials, SQL error...).
        """
        result = self.connector.run(self._command(sql), timeout=self.timeout)
        if not result.success:
            # Keep the password out of error messages
            result.command = f"mysql -e {shlex.quote(sql)}"
            raise CommandError(result)

        lines = [line for line in result.stdout.split("\n") if line]
        if not lines:
            return []
        headers = lines[0].split("\t")
        rows = []
        for line in lines[1:]:
            values = [None if v == self.NULL else v for v in line.split("\t")]
            rows.append(dict(zip(headers, values)))
        return rows

    def fetch_value(self, sql: str) -> str | None:
        """First column of the first row, or None."""
        rows = self.fetch_all(sql)
        if not rows:
            return None
        return next(iter(rows[0].values()), None)

    def fetch_int(self, sql: str) -> int:
        value = self.fetch_value(sql)
        try:
            return int(float(value)) if value is not None else 0
        except ValueError:
            return 0

    def fetch_pairs(self, sql: str) -> dict[str, str | None]:
        """First column -> second column, e.g. for ``SHOW VARIABLES``."""
        pairs = {}
        for row in self.fetch_all(sql):
            values = list(row.values())
            if len(values) >= 2 and values[0] is not None:
                pairs[values[0]] = values[1]
        return pairs

    def table_exists(self, name: str) -> bool:
        table = self.table_name(name).replace("'", "''")
        schema = self.schema_name.replace("'", "''")
        return self.fetch_int(
            "SELECT COUNT(*) FROM information_schema.TABLES "
            f"WHERE table_schema = '{schema}' AND table_name = '{table}'"
        ) > 0
