"""
============================================================
TARJETA CRC - infrastructure/repositories/activity_log_repository.py
============================================================
Class: StoreActivityLogRepository

Responsibilities:
  - Persistir el log de actividad en la hoja LogsAtividade.
  - Mantener orden newest-first y un tope de entradas (oldest evicted).
  - Descartar entradas ilegibles sin romper la lectura.

Collaborators:
  - domain.repositories.DataStore (MockDataStore)
  - domain.entities.ActivityLogEntry

Constraints / Notes:
  - Append-only: no hay update/delete por entrada, solo clear() total.
  - append() es read-modify-write sin coordinación entre procesos.
============================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from ...crosscutting.logger import logger
from ...domain.entities import ActivityLogEntry
from ...domain.repositories import DataStore
from ..store.fixtures import Tables

DEFAULT_MAX_ENTRIES = 1000


def _to_dict(entry: ActivityLogEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "actor_id": entry.actor_id,
        "actor_name": entry.actor_name,
        "action": entry.action,
        "details": entry.details,
        "timestamp": entry.timestamp.isoformat(),
        "module": entry.module,
    }


def _from_dict(data: Dict[str, Any]) -> ActivityLogEntry:
    timestamp = datetime.fromisoformat(str(data["timestamp"]).replace("Z", "+00:00"))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return ActivityLogEntry(
        id=str(data["id"]),
        actor_id=str(data["actor_id"]),
        actor_name=str(data["actor_name"]),
        action=str(data["action"]),
        details=str(data.get("details", "")),
        timestamp=timestamp,
        module=str(data.get("module", "")),
    )


class StoreActivityLogRepository:
    """Log de actividad acotado (newest-first) sobre el Mock Data Store."""

    def __init__(self, store: DataStore, *, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be greater than 0")
        self._store = store
        self._max_entries = max_entries

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def append(self, entry: ActivityLogEntry) -> None:
        entries = [_to_dict(entry), *self._raw_entries()]
        # R: el tope recorta por la cola (las más viejas).
        del entries[self._max_entries :]
        self._store.write(Tables.ACTIVITY_LOGS, entries)

    def list_entries(self) -> List[ActivityLogEntry]:
        out: List[ActivityLogEntry] = []
        for item in self._raw_entries():
            try:
                out.append(_from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning(
                    "Entrada de log de actividad descartada",
                    extra={"table": Tables.ACTIVITY_LOGS},
                )
        return out

    def clear(self) -> None:
        self._store.write(Tables.ACTIVITY_LOGS, [])

    def _raw_entries(self) -> List[Dict[str, Any]]:
        return [
            item for item in self._store.read(Tables.ACTIVITY_LOGS) if isinstance(item, dict)
        ]
