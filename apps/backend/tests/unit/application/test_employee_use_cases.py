"""
Name: Employee Management Use Case Tests

Responsibilities:
  - Create / update / delete / toggle employees with activity entries
  - Validation and conflict results
  - Admin credential update rules
"""

import pytest
from oficina.application.usecases.employees import (
    CreateEmployeeInput,
    CreateEmployeeUseCase,
    DeleteEmployeeUseCase,
    EmployeeErrorCode,
    ListEmployeesUseCase,
    ToggleEmployeeStatusUseCase,
    UpdateAdminCredentialsInput,
    UpdateAdminCredentialsUseCase,
    UpdateEmployeeInput,
    UpdateEmployeeUseCase,
)
from oficina.crosscutting.exceptions import CredentialsUpdateError
from oficina.domain.entities import Role

pytestmark = pytest.mark.unit


@pytest.fixture
def admin_session(authenticator, session):
    authenticator.authenticate_admin("admin", "admin123", session=session)
    return session


def _actions(activity_logger):
    return [(e.action, e.module) for e in activity_logger.entries()]


# -----------------------------------------------------------------------------
# Funcionários
# -----------------------------------------------------------------------------


def test_create_employee_hashes_password_and_can_login(
    identity_repository, activity_logger, authenticator, admin_session
):
    use_case = CreateEmployeeUseCase(identity_repository, activity_logger)

    result = use_case.execute(
        CreateEmployeeInput(
            name="Pedro Eletricista", email="pedro@oficina.com", password="pedro1"
        ),
        admin_session,
    )

    assert result.error is None
    assert result.employee.username == "pedro"
    assert result.employee.password_hash != "pedro1"
    assert authenticator.authenticate_employee("pedro", "pedro1").role is Role.EMPLOYEE
    assert _actions(activity_logger) == [("CREATE_EMPLOYEE", "FUNCIONARIOS")]


@pytest.mark.parametrize(
    "name,email,password",
    [("", "a@o.com", "x"), ("A", "", "x"), ("A", "a@o.com", "")],
)
def test_create_employee_requires_name_email_password(
    identity_repository, activity_logger, admin_session, name, email, password
):
    use_case = CreateEmployeeUseCase(identity_repository, activity_logger)

    result = use_case.execute(
        CreateEmployeeInput(name=name, email=email, password=password), admin_session
    )

    assert result.error.code == EmployeeErrorCode.VALIDATION_ERROR
    assert activity_logger.entries() == []


def test_create_employee_rejects_duplicate_username(
    identity_repository, activity_logger, admin_session
):
    use_case = CreateEmployeeUseCase(identity_repository, activity_logger)

    result = use_case.execute(
        CreateEmployeeInput(
            name="Outro José", email="x@o.com", password="123456", username="jose"
        ),
        admin_session,
    )

    assert result.error.code == EmployeeErrorCode.CONFLICT


def test_update_employee_changes_fields_but_not_role(
    identity_repository, activity_logger, authenticator, admin_session
):
    use_case = UpdateEmployeeUseCase(identity_repository, activity_logger)

    result = use_case.execute(
        "func2",
        UpdateEmployeeInput(name="Ana Recepção", password="nova-senha"),
        admin_session,
    )

    assert result.employee.name == "Ana Recepção"
    identity = authenticator.authenticate_employee("ana", "nova-senha")
    assert identity.role is Role.EMPLOYEE
    assert authenticator.authenticate_employee("ana", "123456") is None
    assert _actions(activity_logger) == [("UPDATE_EMPLOYEE", "FUNCIONARIOS")]


def test_update_missing_employee_is_not_found(
    identity_repository, activity_logger, admin_session
):
    use_case = UpdateEmployeeUseCase(identity_repository, activity_logger)

    result = use_case.execute("nope", UpdateEmployeeInput(name="X"), admin_session)

    assert result.error.code == EmployeeErrorCode.NOT_FOUND


def test_toggle_then_delete_employee(
    identity_repository, activity_logger, authenticator, admin_session
):
    toggled = ToggleEmployeeStatusUseCase(identity_repository, activity_logger).execute(
        "func1", admin_session
    )

    assert toggled.employee.is_active is False
    assert authenticator.authenticate_employee("jose", "123456") is None

    deleted = DeleteEmployeeUseCase(identity_repository, activity_logger).execute(
        "func1", admin_session
    )

    assert deleted.employee.id == "func1"
    assert [e.id for e in ListEmployeesUseCase(identity_repository).execute().employees] == [
        "func2"
    ]
    assert _actions(activity_logger) == [
        ("DELETE_EMPLOYEE", "FUNCIONARIOS"),
        ("TOGGLE_EMPLOYEE_STATUS", "FUNCIONARIOS"),
    ]
    assert "desativado" in activity_logger.entries()[1].details


def test_list_employees_search_matches_name_or_email(identity_repository):
    use_case = ListEmployeesUseCase(identity_repository)

    assert [e.id for e in use_case.execute("ana@").employees] == ["func2"]
    assert [e.id for e in use_case.execute("mecânico").employees] == ["func1"]


# -----------------------------------------------------------------------------
# Credenciales del admin
# -----------------------------------------------------------------------------


def test_update_admin_credentials_changes_username_and_password(
    identity_repository, activity_logger, authenticator, admin_session
):
    use_case = UpdateAdminCredentialsUseCase(identity_repository, activity_logger)

    admin = use_case.execute(
        UpdateAdminCredentialsInput(
            current_password="admin123",
            new_username="chefe",
            new_password="segredo1",
            confirm_password="segredo1",
        ),
        admin_session,
    )

    assert admin.username == "chefe"
    assert authenticator.authenticate_admin("chefe", "segredo1") is not None
    assert authenticator.authenticate_admin("admin", "admin123") is None
    assert _actions(activity_logger) == [("UPDATE_ADMIN_CREDENTIALS", "SISTEMA")]


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"current_password": ""}, "senha atual"),
        ({"current_password": "errada"}, "incorreta"),
        ({"current_password": "admin123", "new_username": "ab"}, "3 caracteres"),
        (
            {
                "current_password": "admin123",
                "new_password": "12345",
                "confirm_password": "12345",
            },
            "6 caracteres",
        ),
        (
            {
                "current_password": "admin123",
                "new_password": "123456",
                "confirm_password": "654321",
            },
            "não coincidem",
        ),
    ],
)
def test_update_admin_credentials_validation(
    identity_repository, activity_logger, admin_session, payload, message
):
    use_case = UpdateAdminCredentialsUseCase(identity_repository, activity_logger)

    with pytest.raises(CredentialsUpdateError) as excinfo:
        use_case.execute(UpdateAdminCredentialsInput(**payload), admin_session)

    assert message in excinfo.value.message
    assert activity_logger.entries() == []
