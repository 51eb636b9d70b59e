"""
===============================================================================
TARJETA CRC - infrastructure/store/data_store.py
===============================================================================

Módulo:
    Mock Data Store (sustituto del backend de planillas)

Responsabilidades:
    - read(table) / write(table, rows) sobre un KeyValueStorage.
    - Sembrar la tabla con fixtures en el primer acceso.
    - Degradar a un estado seguro ante fallas:
        * storage no disponible -> log + fallback en memoria (fixtures).
        * entrada malformada    -> log + descartar entrada + re-sembrar.

Colaboradores:
    - domain.repositories.KeyValueStorage (InMemoryStorage / JsonFileStorage).
    - infrastructure.store.fixtures.fixture_rows (seed callback).
    - crosscutting.logger.

Notas:
    - Sin transacciones ni validación de esquema: cualquier forma de filas
      se acepta y el último write gana (no hay merge).
    - Se devuelven copias para que los callers no muten el estado guardado.
===============================================================================
"""

from __future__ import annotations

import copy
import json
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from ...crosscutting.exceptions import MalformedDataError, StorageUnavailableError
from ...crosscutting.logger import logger
from ...domain.repositories import KeyValueStorage

Row = List[Any]
SeedProvider = Callable[[str], Optional[List[Row]]]


def _no_seed(_table: str) -> Optional[List[Row]]:
    return None


class MockDataStore:
    """
    Persistencia por nombre de tabla (hoja) con siembra perezosa.

    Modelo mental:
      - Cada tabla es una clave del storage cuyo valor es la lista de filas
        serializada como JSON.
      - _fallback guarda las tablas cuyo write falló; read() las prefiere
        al storage hasta que un write posterior tenga éxito.
    """

    def __init__(
        self, storage: KeyValueStorage, *, seed: SeedProvider | None = None
    ) -> None:
        self._storage = storage
        self._seed = seed or _no_seed
        self._fallback: Dict[str, List[Any]] = {}
        self._fallback_lock = Lock()

    # =========================================================
    # API pública
    # =========================================================
    def read(self, table: str) -> List[Any]:
        with self._fallback_lock:
            pending = self._fallback.get(table)
            if pending is not None:
                return copy.deepcopy(pending)

        try:
            raw = self._storage.get_item(table)
        except StorageUnavailableError as exc:
            logger.error(
                "Data store: almacenamiento no disponible en lectura; usando defaults",
                extra={"table": table, "error_id": exc.error_id},
            )
            return self._read_fallback(table)

        if raw is None:
            return self._seed_table(table)

        try:
            return self._decode(table, raw)
        except MalformedDataError as exc:
            logger.warning(
                "Data store: entrada malformada descartada; re-sembrando",
                extra={"table": table, "error_id": exc.error_id},
            )
            self._discard(table)
            return self._seed_table(table)

    def write(self, table: str, rows: List[Any]) -> bool:
        snapshot = copy.deepcopy(list(rows))
        payload = json.dumps(snapshot, ensure_ascii=False, default=str)

        try:
            self._storage.set_item(table, payload)
        except StorageUnavailableError as exc:
            logger.error(
                "Data store: almacenamiento no disponible en escritura; valor retenido en memoria",
                extra={"table": table, "error_id": exc.error_id},
            )
            with self._fallback_lock:
                self._fallback[table] = snapshot
            return False

        with self._fallback_lock:
            self._fallback.pop(table, None)
        return True

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _decode(table: str, raw: str) -> List[Any]:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedDataError(
                f"Tabla '{table}' con JSON inválido", original_error=exc
            ) from exc

        if not isinstance(data, list):
            raise MalformedDataError(f"Tabla '{table}' no es una lista de filas")
        return data

    def _discard(self, table: str) -> None:
        try:
            self._storage.remove_item(table)
        except StorageUnavailableError as exc:
            logger.error(
                "Data store: no se pudo descartar la entrada malformada",
                extra={"table": table, "error_id": exc.error_id},
            )

    def _seed_table(self, table: str) -> List[Any]:
        rows = self._seed(table)
        if rows is None:
            return []

        logger.info("Data store: sembrando tabla", extra={"table": table})
        self.write(table, rows)
        return copy.deepcopy(rows)

    def _read_fallback(self, table: str) -> List[Any]:
        # R: sin valor retenido, los defaults de fixtures (no se cachean).
        return copy.deepcopy(self._seed(table) or [])
