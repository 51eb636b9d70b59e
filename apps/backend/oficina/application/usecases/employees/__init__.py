"""
Employee management use cases (funcionários + admin credentials).
"""

from .employee_results import (
    EmployeeError,
    EmployeeErrorCode,
    EmployeeListResult,
    EmployeeResult,
)
from .manage_employees import (
    CreateEmployeeInput,
    CreateEmployeeUseCase,
    DeleteEmployeeUseCase,
    ListEmployeesUseCase,
    ToggleEmployeeStatusUseCase,
    UpdateEmployeeInput,
    UpdateEmployeeUseCase,
)
from .update_admin_credentials import (
    UpdateAdminCredentialsInput,
    UpdateAdminCredentialsUseCase,
)

__all__ = [
    "EmployeeError",
    "EmployeeErrorCode",
    "EmployeeListResult",
    "EmployeeResult",
    "CreateEmployeeInput",
    "CreateEmployeeUseCase",
    "DeleteEmployeeUseCase",
    "ListEmployeesUseCase",
    "ToggleEmployeeStatusUseCase",
    "UpdateEmployeeInput",
    "UpdateEmployeeUseCase",
    "UpdateAdminCredentialsInput",
    "UpdateAdminCredentialsUseCase",
]
