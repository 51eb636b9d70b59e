"""
===============================================================================
TARJETA CRC - infrastructure/store/storage.py
===============================================================================

Módulo:
    Almacenamiento clave/valor (equivalente a localStorage del navegador)

Responsabilidades:
    - InMemoryStorage: dict protegido por Lock (tests / default).
    - JsonFileStorage: un archivo JSON por "perfil" con {clave: texto}.
    - Traducir fallas de I/O a StorageUnavailableError.

Colaboradores:
    - infrastructure.store.data_store.MockDataStore (único consumidor).
    - crosscutting.exceptions.StorageUnavailableError.

Notas:
    - Los valores son strings opacos; interpretar JSON es tarea del data store.
    - No hay coordinación entre escritores: el último set_item gana.
===============================================================================
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional

from ...crosscutting.exceptions import StorageUnavailableError
from ...crosscutting.logger import logger


class InMemoryStorage:
    """Storage volátil, thread-safe por operación."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = Lock()
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._items)


class JsonFileStorage:
    """
    Storage persistente en un archivo JSON.

    Modelo mental:
      - El archivo es el "perfil del navegador": un objeto {clave: texto}.
      - Cada escritura reescribe el archivo completo vía archivo temporal +
        os.replace (el lector nunca ve un archivo a medio escribir).
      - Un archivo ilegible se trata como perfil vacío (se descarta al
        próximo set_item).
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageUnavailableError(
                f"No se pudo leer el almacenamiento local: {self._path}",
                original_error=exc,
            ) from exc

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            logger.warning(
                "Almacenamiento local ilegible; se descarta",
                extra={"storage_path": str(self._path)},
            )
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Almacenamiento local con forma inválida; se descarta",
                extra={"storage_path": str(self._path)},
            )
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, items: Dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", dir=str(self._path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            raise StorageUnavailableError(
                f"No se pudo escribir el almacenamiento local: {self._path}",
                original_error=exc,
            ) from exc

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._dump(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if key in items:
                del items[key]
                self._dump(items)

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._load())
