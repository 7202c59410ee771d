"""Indexer Scanner - Indexer status and mode from the database."""

from dataclasses import dataclass

from magento_doctor.scanner.database import ResourceConnection


@dataclass
class IndexerState:
    """One indexer as recorded in ``indexer_state`` / ``mview_state``."""

    indexer_id: str
    status: str = "valid"
    scheduled: bool = False

    @property
    def is_valid(self) -> bool:
        return self.status == "valid"


class IndexerRegistry:
    """All indexers known to the installation."""

    def __init__(self, indexers: list[IndexerState] | None = None) -> None:
        self.indexers = list(indexers or [])

    @classmethod
    def load(cls, resource_connection: ResourceConnection) -> "IndexerRegistry":
        state = resource_connection.table_name("indexer_state")
        mview = resource_connection.table_name("mview_state")
        rows = resource_connection.fetch_all(
            f"SELECT i.indexer_id, i.status, m.mode FROM {state} i "
            f"LEFT JOIN {mview} m ON m.view_id = i.indexer_id ORDER BY i.indexer_id"
        )
        return cls([
            IndexerState(
                indexer_id=row.get("indexer_id") or "",
                status=row.get("status") or "valid",
                scheduled=row.get("mode") == "enabled",
            )
            for row in rows
        ])

    def invalid(self) -> list[str]:
        return [i.indexer_id for i in self.indexers if not i.is_valid]

    def realtime(self) -> list[str]:
        return [i.indexer_id for i in self.indexers if not i.scheduled]
