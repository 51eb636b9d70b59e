"""
Name: Activity Log Service

Responsibilities:
  - Record user-initiated actions (no-op for anonymous sessions)
  - Query entries newest-first, by actor or by module
  - Clear the log and export it as comma-delimited text

Collaborators:
  - domain.repositories.ActivityLogRepository
  - identity.session.SessionStore (resolves the actor)

Notes:
  - The cap and eviction of the oldest entries live in the repository.
  - Export columns: Data/Hora, Usuário, Ação, Detalhes, Módulo.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Iterable, List, Optional
from uuid import uuid4

from ..crosscutting.logger import logger
from ..domain.entities import ActivityLogEntry
from ..domain.repositories import ActivityLogRepository
from ..identity.session import Clock, SessionStore, utcnow

EXPORT_HEADER: List[str] = ["Data/Hora", "Usuário", "Ação", "Detalhes", "Módulo"]
EXPORT_TIMESTAMP_FORMAT: str = "%d/%m/%Y, %H:%M:%S"


class ActivityModule:
    """Módulos usados por las acciones registradas."""

    AUTH = "AUTH"
    EMPLOYEES = "FUNCIONARIOS"
    SYSTEM = "SISTEMA"


def export_filename(today: date) -> str:
    return f"logs_atividade_{today.isoformat()}.csv"


def export_delimited(entries: Iterable[ActivityLogEntry]) -> str:
    """Serializa entradas a texto separado por comas (con encabezado)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for entry in entries:
        writer.writerow(
            [
                entry.timestamp.strftime(EXPORT_TIMESTAMP_FORMAT),
                entry.actor_name,
                entry.action,
                entry.details,
                entry.module,
            ]
        )
    return buffer.getvalue()


class ActivityLogger:
    """R: Audit trail of user actions."""

    def __init__(self, repository: ActivityLogRepository, *, clock: Clock = utcnow):
        self.repository = repository
        self._clock = clock

    def log(
        self,
        session: Optional[SessionStore],
        action: str,
        details: str,
        module: str,
    ) -> Optional[ActivityLogEntry]:
        identity = session.current() if session is not None else None
        if identity is None:
            return None

        entry = ActivityLogEntry(
            id=f"log_{uuid4().hex}",
            actor_id=identity.id,
            actor_name=identity.name,
            action=action,
            details=details,
            timestamp=self._clock(),
            module=module,
        )
        self.repository.append(entry)
        logger.info(
            "Actividad registrada",
            extra={"action": action, "activity_module": module},
        )
        return entry

    def entries(self) -> List[ActivityLogEntry]:
        return self.repository.list_entries()

    def by_actor(self, actor_id: str) -> List[ActivityLogEntry]:
        return [e for e in self.entries() if e.actor_id == actor_id]

    def by_module(self, module: str) -> List[ActivityLogEntry]:
        return [e for e in self.entries() if e.module == module]

    def clear(self) -> None:
        self.repository.clear()

    def export(self, entries: Optional[Iterable[ActivityLogEntry]] = None) -> str:
        return export_delimited(self.entries() if entries is None else entries)

    def export_filename(self, now: Optional[datetime] = None) -> str:
        return export_filename((now or self._clock()).date())
