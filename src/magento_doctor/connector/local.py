"""Local Connector - Runs commands on this machine."""

import logging
import subprocess

from magento_doctor.connector.base import CommandResult, Connector

logger = logging.getLogger(__name__)


class LocalConnector(Connector):
    """Executes commands through the local shell."""

    def __init__(self, timeout: float = 60) -> None:
        self.timeout = timeout

    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        cmd_timeout = timeout if timeout is not None else self.timeout
        logger.debug("local: %s", command)
        try:
            completed = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=cmd_timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                command=command,
                stdout="",
                stderr=f"Command timed out after {cmd_timeout}s",
                exit_code=124,
            )
        return CommandResult(
            command=command,
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=completed.returncode,
        )
