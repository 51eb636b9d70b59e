"""
===============================================================================
TARJETA CRC - identity/authenticator.py
===============================================================================

Módulo:
    Authenticator (cliente por CPF, funcionário y admin por usuário/senha)

Responsabilidades:
    - Validar credenciales contra las hojas del Mock Data Store.
    - En éxito: escribir la Identity en la SessionStore (si se provee).
    - Re-hashear contraseñas legadas en texto plano tras un login válido.
    - En falla: retornar None (nunca excepción); el caller muestra un único
      mensaje genérico.

Colaboradores:
    - domain.repositories.IdentityRepository
    - identity.passwords (verify_password / needs_rehash / hash_password)
    - identity.session.SessionStore

Notas:
    - Escaneo lineal, primer match gana. Sin normalización del input
      (el CPF se compara tal como llega).
    - Un funcionário inactivo nunca autentica, aunque la contraseña sea válida.
===============================================================================
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

from ..crosscutting.logger import logger
from ..domain.entities import Identity
from ..domain.repositories import IdentityRepository
from .passwords import hash_password, needs_rehash, verify_password
from .session import SessionStore

PasswordHasher = Callable[[str], str]


class Authenticator:
    def __init__(
        self,
        repository: IdentityRepository,
        *,
        password_hasher: PasswordHasher = hash_password,
    ) -> None:
        self._repo = repository
        self._hash = password_hasher

    # =========================================================
    # Cliente (CPF)
    # =========================================================
    def authenticate_client(
        self, national_id: str, *, session: SessionStore | None = None
    ) -> Optional[Identity]:
        if not national_id:
            return None

        for client in self._repo.list_clients():
            if client.national_id == national_id:
                return self._establish(client.to_identity(), session)

        logger.info("Login de cliente rechazado", extra={"identity_class": "cliente"})
        return None

    # =========================================================
    # Funcionário (usuário + senha + ativo)
    # =========================================================
    def authenticate_employee(
        self, username: str, password: str, *, session: SessionStore | None = None
    ) -> Optional[Identity]:
        if not username or not password:
            return None

        employees = self._repo.list_employees()
        for index, employee in enumerate(employees):
            if employee.username != username:
                continue
            if not verify_password(password, employee.password_hash):
                continue
            if not employee.is_active:
                logger.warning(
                    "Login de empleado inactivo rechazado",
                    extra={"actor_id": employee.id},
                )
                continue

            if needs_rehash(employee.password_hash):
                employees[index] = replace(employee, password_hash=self._hash(password))
                self._repo.save_employees(employees)
                logger.info(
                    "Contraseña de empleado re-hasheada", extra={"actor_id": employee.id}
                )
                employee = employees[index]

            return self._establish(employee.to_identity(), session)

        logger.info(
            "Login de empleado rechazado", extra={"identity_class": "funcionario"}
        )
        return None

    # =========================================================
    # Admin (hoja de una sola fila)
    # =========================================================
    def authenticate_admin(
        self, username: str, password: str, *, session: SessionStore | None = None
    ) -> Optional[Identity]:
        if not username or not password:
            return None

        admin = self._repo.get_admin()
        if (
            admin is None
            or admin.username != username
            or not verify_password(password, admin.password_hash)
        ):
            logger.info("Login de admin rechazado", extra={"identity_class": "admin"})
            return None

        if needs_rehash(admin.password_hash):
            admin = replace(admin, password_hash=self._hash(password))
            self._repo.save_admin(admin)
            logger.info("Contraseña de admin re-hasheada", extra={"actor_id": admin.id})

        return self._establish(admin.to_identity(), session)

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _establish(identity: Identity, session: SessionStore | None) -> Identity:
        public = identity.public()
        if session is not None:
            session.establish(public)
        logger.info(
            "Login exitoso",
            extra={"actor_id": public.id, "role": public.role.value},
        )
        return public
