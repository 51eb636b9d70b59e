"""
===============================================================================
TARJETA CRC - infrastructure/store/fixtures.py
===============================================================================

Módulo:
    Datos semilla de las hojas (primer acceso a cada tabla)

Responsabilidades:
    - Definir los nombres de tabla conocidos (Tables).
    - Definir encabezados (la posición de columna es significativa).
    - Construir filas semilla; las contraseñas se siembran ya hasheadas.

Colaboradores:
    - infrastructure.store.data_store.MockDataStore (seed callback).
    - infrastructure.repositories.tables (usa los mismos encabezados).
    - identity.passwords.hash_password (inyectado por container).
===============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Final, List, Optional

Row = List[Any]
PasswordHasher = Callable[[str], str]


class Tables:
    """Nombres de hoja (claves del data store)."""

    CLIENTS: Final[str] = "Clientes"
    VEHICLES: Final[str] = "Veiculos"
    EMPLOYEES: Final[str] = "Funcionarios"
    ADMIN: Final[str] = "Admin"
    SERVICES: Final[str] = "Servicos"
    STOCK: Final[str] = "Estoque"
    QUOTES: Final[str] = "Orcamentos"
    APPOINTMENTS: Final[str] = "Agendamentos"
    ACTIVITY_LOGS: Final[str] = "LogsAtividade"


HEADERS: Final[dict[str, Row]] = {
    Tables.CLIENTS: ["ID", "Nome", "CPF", "Email", "Telefone", "Endereço"],
    Tables.VEHICLES: ["ID", "Placa", "Marca", "Modelo", "Ano", "Cor", "Cliente"],
    Tables.EMPLOYEES: ["ID", "Nome", "Usuário", "Email", "Senha", "Ativo", "Criado em"],
    Tables.ADMIN: ["ID", "Usuário", "Nome", "Email", "Senha", "Criado em"],
    Tables.SERVICES: ["ID", "Cliente", "Veículo", "Descrição", "Status", "Valor", "Data"],
    Tables.STOCK: ["ID", "Nome", "SKU", "Quantidade", "Mínimo", "Preço"],
    Tables.QUOTES: ["ID", "Cliente", "Veículo", "Itens", "Total", "Status", "Data"],
    Tables.APPOINTMENTS: ["ID", "Cliente", "Veículo", "Data", "Hora", "Observações"],
}

DEFAULT_ADMIN_USERNAME: Final[str] = "admin"
DEFAULT_ADMIN_PASSWORD: Final[str] = "admin123"
DEFAULT_EMPLOYEE_PASSWORD: Final[str] = "123456"


def _clients() -> List[Row]:
    return [
        [1, "João Silva", "123.456.789-00", "joao@example.com", "(11) 98765-4321", "Rua A, 123"],
        [2, "Maria Oliveira", "987.654.321-00", "maria@example.com", "(11) 91234-5678", "Av. B, 456"],
        [3, "Carlos Santos", "456.789.123-00", "carlos@example.com", "(11) 99876-5432", ""],
    ]


def _vehicles() -> List[Row]:
    return [
        [1, "ABC-1234", "Fiat", "Uno", 2018, "Branco", "João Silva"],
        [2, "DEF-5678", "Honda", "Civic", 2020, "Preto", "Maria Oliveira"],
    ]


def _stock() -> List[Row]:
    return [
        [1, "Óleo 5W30 Sintético 1L", "OIL-5W30-1L", 20, 5, 49.90],
        [2, "Filtro de Óleo Universal", "FILT-OLEO-U", 15, 4, 29.90],
        [3, "Filtro de Ar", "FILT-AR-U", 12, 3, 39.90],
        [4, "Fluido de Freio DOT4 500ml", "FLU-DOT4", 12, 3, 24.90],
        [5, "Pastilha de Freio Dianteira (Popular)", "PAST-FREIO-D", 8, 2, 129.90],
        [6, "Bateria 60Ah", "BAT-60AH", 5, 2, 499.00],
    ]


def _employees(hasher: PasswordHasher, now: str) -> List[Row]:
    password_hash = hasher(DEFAULT_EMPLOYEE_PASSWORD)
    return [
        ["func1", "José Mecânico", "jose", "jose@oficina.com", password_hash, True, now],
        ["func2", "Ana Atendente", "ana", "ana@oficina.com", password_hash, True, now],
    ]


def _admin(hasher: PasswordHasher, now: str) -> List[Row]:
    return [
        [
            "admin",
            DEFAULT_ADMIN_USERNAME,
            "Administrador",
            "admin@oficina.com",
            hasher(DEFAULT_ADMIN_PASSWORD),
            now,
        ]
    ]


def fixture_rows(table: str, *, password_hasher: PasswordHasher) -> Optional[List[Row]]:
    """
    Filas semilla (encabezado + datos) para una tabla conocida.

    Retorna None para tablas desconocidas: el data store no las siembra.
    """
    now = datetime.now(timezone.utc).isoformat()
    builders: dict[str, Callable[[], List[Row]]] = {
        Tables.CLIENTS: _clients,
        Tables.VEHICLES: _vehicles,
        Tables.STOCK: _stock,
        Tables.EMPLOYEES: lambda: _employees(password_hasher, now),
        Tables.ADMIN: lambda: _admin(password_hasher, now),
        Tables.SERVICES: list,
        Tables.QUOTES: list,
        Tables.APPOINTMENTS: list,
    }

    if table == Tables.ACTIVITY_LOGS:
        return []

    builder = builders.get(table)
    if builder is None:
        return None
    return [list(HEADERS[table]), *builder()]
