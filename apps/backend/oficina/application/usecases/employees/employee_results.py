"""
===============================================================================
EMPLOYEE USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Employee Use Case Results

Business Goal:
    Contrato estable de resultados para la gestión de funcionários, mapeable
    a status HTTP sin que los use cases lancen excepciones hacia afuera.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    employee_results models (module)

Responsibilities:
    - EmployeeErrorCode: categorías estables (no mensajes).
    - EmployeeError: code + message humano (en portugués, va a la UI).
    - EmployeeResult / EmployeeListResult.

Collaborators:
    - domain.entities.EmployeeRecord
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from ....domain.entities import EmployeeRecord


class EmployeeErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class EmployeeError:
    code: EmployeeErrorCode
    message: str


@dataclass
class EmployeeResult:
    """
    Contrato:
      - error is None => employee presente (éxito)
      - persisted=False => el valor quedó solo en memoria (storage caído)
    """

    employee: EmployeeRecord | None = None
    error: EmployeeError | None = None
    persisted: bool = True


@dataclass
class EmployeeListResult:
    employees: List[EmployeeRecord]
    error: EmployeeError | None = None
