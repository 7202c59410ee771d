"""Filesystem Scanner - Sizes and file lookups under the Magento root.

This scanner collects filesystem information without analyzing it.
All paths are relative to the Magento root unless absolute.
"""

import shlex

from magento_doctor.connector.base import Connector


class Filesystem:
    """Filesystem inspection rooted at the Magento installation."""

    def __init__(self, connector: Connector, root: str) -> None:
        self.connector = connector
        self.root = root.rstrip("/") or "/"

    def path(self, relative: str = "") -> str:
        if relative.startswith("/"):
            return relative
        return f"{self.root}/{relative}" if relative else self.root

    def is_dir(self, relative: str) -> bool:
        return self.connector.dir_exists(self.path(relative))

    def size(self, relative: str) -> int:
        """Disk usage in bytes, 0 when the path does not exist."""
        result = self.connector.run(f"du -sb {shlex.quote(self.path(relative))} 2>/dev/null")
        if not result.success or not result.stdout.strip():
            return 0
        try:
            return int(result.stdout.split()[0])
        except ValueError:
            return 0

    def large_files(self, relative: str, min_size_mb: int, limit: int = 1000) -> list[tuple[str, int]]:
        """``(path, size in bytes)`` of files larger than *min_size_mb*."""
        command = (
            f"find {shlex.quote(self.path(relative))} -type f -size +{int(min_size_mb)}M "
            f"-printf '%s\\t%p\\n' 2>/dev/null | head -n {int(limit)}"
        )
        files = []
        for line in self.connector.run(command).stdout.split("\n"):
            size, _, path = line.partition("\t")
            if path and size.isdigit():
                files.append((path, int(size)))
        return files
