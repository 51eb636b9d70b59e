"""
============================================================
TARJETA CRC - infrastructure/repositories/tables.py
============================================================
Module: mapeo filas <-> registros tipados

Responsibilities:
  - Traducir hojas (encabezado + filas posicionales) a registros del dominio.
  - Traducir registros de vuelta a filas con el encabezado canónico.
  - Tolerar filas rotas: se descartan con warning (no rompen la lectura).

Collaborators:
  - domain.entities (ClientRecord, VehicleRecord, EmployeeRecord, AdminAccount)
  - infrastructure.store.fixtures.HEADERS (posición de columnas)

Constraints:
  - La posición de columna es significativa (ej: CPF es la columna 2).
  - Sin I/O: funciones puras.
============================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Generic, List, Sequence, TypeVar

from ...crosscutting.logger import logger
from ...domain.entities import AdminAccount, ClientRecord, EmployeeRecord, VehicleRecord
from ..store.fixtures import HEADERS, Tables

T = TypeVar("T")
Row = List[Any]

_TRUE_VALUES = {"1", "true", "sim", "yes", "on"}


# ---------------------------------------------------------------------------
# Conversores de celdas
# ---------------------------------------------------------------------------
def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("bool no es un entero válido")
    return int(str(value).strip())


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).lower() in _TRUE_VALUES


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = _text(value)
        parsed = (
            datetime.fromisoformat(text.replace("Z", "+00:00"))
            if text
            else datetime.now(timezone.utc)
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else ""


# ---------------------------------------------------------------------------
# Mapper genérico
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TableMapper(Generic[T]):
    """
    Mapper de una hoja.

    - min_columns: filas más cortas se descartan.
    - to_record/to_row: conversión posicional en ambos sentidos.
    """

    table: str
    min_columns: int
    to_record: Callable[[Sequence[Any]], T]
    to_row: Callable[[T], Row]

    @property
    def header(self) -> Row:
        return list(HEADERS[self.table])

    def records(self, rows: Sequence[Any]) -> List[T]:
        out: List[T] = []
        for index, row in enumerate(rows):
            if index == 0 and self._is_header(row):
                continue
            if not isinstance(row, (list, tuple)) or len(row) < self.min_columns:
                logger.warning(
                    "Fila descartada: forma inválida",
                    extra={"table": self.table, "row_index": index},
                )
                continue
            try:
                out.append(self.to_record(row))
            except (TypeError, ValueError):
                logger.warning(
                    "Fila descartada: valores inválidos",
                    extra={"table": self.table, "row_index": index},
                )
        return out

    def rows(self, records: Sequence[T]) -> List[Row]:
        return [self.header, *(self.to_row(r) for r in records)]

    def _is_header(self, row: Any) -> bool:
        return (
            isinstance(row, (list, tuple))
            and len(row) > 0
            and _text(row[0]).upper() == "ID"
        )


# ---------------------------------------------------------------------------
# Mappers concretos
# ---------------------------------------------------------------------------
CLIENTS = TableMapper[ClientRecord](
    table=Tables.CLIENTS,
    min_columns=3,
    to_record=lambda r: ClientRecord(
        id=_as_int(r[0]),
        name=_text(r[1]),
        national_id=_text(r[2]),
        email=_text(_cell(r, 3)),
        phone=_text(_cell(r, 4)),
        address=_text(_cell(r, 5)),
    ),
    to_row=lambda c: [c.id, c.name, c.national_id, c.email, c.phone, c.address],
)

VEHICLES = TableMapper[VehicleRecord](
    table=Tables.VEHICLES,
    min_columns=5,
    to_record=lambda r: VehicleRecord(
        id=_as_int(r[0]),
        plate=_text(r[1]),
        brand=_text(r[2]),
        model=_text(r[3]),
        year=_as_int(r[4]),
        color=_text(_cell(r, 5)),
        client_name=_text(_cell(r, 6)),
    ),
    to_row=lambda v: [v.id, v.plate, v.brand, v.model, v.year, v.color, v.client_name],
)

EMPLOYEES = TableMapper[EmployeeRecord](
    table=Tables.EMPLOYEES,
    min_columns=6,
    to_record=lambda r: EmployeeRecord(
        id=_text(r[0]),
        name=_text(r[1]),
        username=_text(r[2]),
        email=_text(r[3]),
        password_hash=_text(r[4]),
        is_active=_as_bool(r[5]),
        created_at=_as_datetime(_cell(r, 6)),
    ),
    to_row=lambda e: [
        e.id,
        e.name,
        e.username,
        e.email,
        e.password_hash,
        e.is_active,
        e.created_at.isoformat(),
    ],
)

ADMIN = TableMapper[AdminAccount](
    table=Tables.ADMIN,
    min_columns=5,
    to_record=lambda r: AdminAccount(
        id=_text(r[0]),
        username=_text(r[1]),
        name=_text(r[2]),
        email=_text(r[3]),
        password_hash=_text(r[4]),
        created_at=_as_datetime(_cell(r, 5)),
    ),
    to_row=lambda a: [
        a.id,
        a.username,
        a.name,
        a.email,
        a.password_hash,
        a.created_at.isoformat(),
    ],
)
