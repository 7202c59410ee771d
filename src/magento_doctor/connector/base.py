"""Connector interface shared by the local and SSH backends.

Collectors only talk to a ``Connector``; they never know whether the
Magento installation lives on this machine or on a remote host.
"""

import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class CommandResult:
    """Result of a command execution."""

    command: str
    stdout: str
    stderr: str
    exit_code: int
    success: bool = field(init=False)

    def __post_init__(self) -> None:
        self.success = self.exit_code == 0


class CommandError(RuntimeError):
    """A command the review depends on failed."""

    def __init__(self, result: CommandResult, message: str | None = None) -> None:
        self.result = result
        detail = result.stderr.strip() or result.stdout.strip() or f"exit code {result.exit_code}"
        super().__init__(message or f"Command failed: {detail}")


class Connector(ABC):
    """Read-only command execution on the reviewed host."""

    @abstractmethod
    def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Execute a shell command and capture its output."""
        ...

    def check(self, command: str, timeout: float | None = None) -> CommandResult:
        """Like ``run`` but raise ``CommandError`` on a non-zero exit."""
        result = self.run(command, timeout=timeout)
        if not result.success:
            raise CommandError(result)
        return result

    def read_file(self, path: str) -> str | None:
        """File contents, or None if the file cannot be read."""
        result = self.run(f"cat {shlex.quote(path)}")
        if result.success:
            return result.stdout
        return None

    def file_exists(self, path: str) -> bool:
        return self.run(f"test -f {shlex.quote(path)}").success

    def dir_exists(self, path: str) -> bool:
        return self.run(f"test -d {shlex.quote(path)}").success

    def list_dir(self, path: str) -> list[str]:
        result = self.run(f"ls -1 {shlex.quote(path)}")
        if result.success:
            return [f for f in result.stdout.strip().split("\n") if f]
        return []

    def __enter__(self) -> "Connector":
        return self

    def __exit__(self, *args: object) -> None:
        return None
