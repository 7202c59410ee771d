"""SSH Connector - Review a Magento installation on a remote host.

Read-only: the review only ever runs inspection commands
(php, mysql, du, find, cat).
"""

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

import paramiko
from paramiko.ssh_exception import AuthenticationException, SSHException

from magento_doctor.connector.base import CommandResult, Connector

logger = logging.getLogger(__name__)


@dataclass
class SSHConfig:
    """SSH connection configuration."""

    host: str
    user: str = "root"
    port: int = 22
    key_path: str | None = None
    password: str | None = None  # Fallback, prefer keys
    use_sudo: bool = False
    timeout: int = 30


class SSHConnector(Connector):
    """SSH connection manager for remote reviews.

    Example:
        >>> config = SSHConfig(host="shop.example.com", user="deploy")
        >>> with SSHConnector(config) as ssh:
        ...     result = ssh.run("php -v")
        ...     print(result.stdout)
    """

    def __init__(self, config: SSHConfig) -> None:
        self.config = config
        self._client: paramiko.SSHClient | None = None

    def connect(self) -> None:
        """Establish SSH connection."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs: dict = {
            "hostname": self.config.host,
            "port": self.config.port,
            "username": self.config.user,
            "timeout": self.config.timeout,
        }

        if self.config.key_path:
            key_path = Path(self.config.key_path).expanduser()
            if key_path.exists():
                connect_kwargs["key_filename"] = str(key_path)
        elif self.config.password:
            connect_kwargs["password"] = self.config.password

        try:
            self._client.connect(**connect_kwargs)
        except AuthenticationException as e:
            raise ConnectionError(f"Authentication failed: {e}") from e
        except (SSHException, OSError) as e:
            raise ConnectionError(f"SSH error: {e}") from e

    def disconnect(self) -> None:
        """Close SSH connection."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SSHConnector":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()

    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Execute a command on the remote server.

        Args:
            command: The command to execute.
            timeout: Command timeout in seconds. Defaults to config timeout.

        Returns:
            CommandResult with stdout, stderr, and exit_code.
        """
        if not self._client:
            raise RuntimeError("Not connected. Use 'with SSHConnector(config):' context.")

        if self.config.use_sudo and self.config.user != "root":
            command = f"sudo -n sh -c {shlex.quote(command)}"

        cmd_timeout = timeout if timeout is not None else self.config.timeout
        logger.debug("ssh %s: %s", self.config.host, command)

        try:
            _, stdout, stderr = self._client.exec_command(command, timeout=cmd_timeout)
            exit_code = stdout.channel.recv_exit_status()

            return CommandResult(
                command=command,
                stdout=stdout.read().decode("utf-8", errors="replace"),
                stderr=stderr.read().decode("utf-8", errors="replace"),
                exit_code=exit_code,
            )
        except (SSHException, OSError) as e:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"SSH Execution Error: {e}",
                exit_code=255,
            )
