"""
Name: Update Admin Credentials Use Case

Responsibilities:
  - Validate the current admin password before any change
  - Enforce minimum lengths (username >= 3, password >= 6) and confirmation
  - Persist the hashed password and log UPDATE_ADMIN_CREDENTIALS

Collaborators:
  - domain.repositories.IdentityRepository (single-row Admin sheet)
  - identity.passwords
  - application.activity_log.ActivityLogger

Notes:
  - Validation failures raise CredentialsUpdateError (mapped to 422).
  - Omitted new values keep the current ones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional

from ....crosscutting.exceptions import CredentialsUpdateError
from ....crosscutting.logger import logger
from ....domain.entities import AdminAccount
from ....domain.repositories import IdentityRepository
from ....identity.passwords import hash_password, verify_password
from ....identity.session import SessionStore
from ...activity_log import ActivityLogger, ActivityModule

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


@dataclass
class UpdateAdminCredentialsInput:
    current_password: str
    new_username: str | None = None
    new_password: str | None = None
    confirm_password: str | None = None


class UpdateAdminCredentialsUseCase:
    def __init__(
        self,
        repository: IdentityRepository,
        activity: ActivityLogger,
        *,
        password_hasher: Callable[[str], str] = hash_password,
    ):
        self.repository = repository
        self.activity = activity
        self._hash = password_hasher

    def execute(
        self, input_data: UpdateAdminCredentialsInput, session: Optional[SessionStore]
    ) -> AdminAccount:
        if not input_data.current_password:
            raise CredentialsUpdateError(
                "Digite a senha atual para confirmar as alterações"
            )

        admin = self.repository.get_admin()
        if admin is None or not verify_password(
            input_data.current_password, admin.password_hash
        ):
            raise CredentialsUpdateError("Senha atual incorreta!")

        new_username = (input_data.new_username or "").strip()
        if new_username and len(new_username) < MIN_USERNAME_LENGTH:
            raise CredentialsUpdateError(
                "O novo nome de usuário deve ter pelo menos 3 caracteres!"
            )

        if input_data.new_password:
            if len(input_data.new_password) < MIN_PASSWORD_LENGTH:
                raise CredentialsUpdateError(
                    "A nova senha deve ter pelo menos 6 caracteres!"
                )
            if input_data.new_password != input_data.confirm_password:
                raise CredentialsUpdateError("As senhas não coincidem!")

        updated = replace(
            admin,
            username=new_username or admin.username,
            password_hash=self._hash(
                input_data.new_password or input_data.current_password
            ),
        )
        if not self.repository.save_admin(updated):
            logger.warning(
                "Credenciales de admin retenidas solo en memoria",
                extra={"actor_id": admin.id},
            )

        self.activity.log(
            session,
            "UPDATE_ADMIN_CREDENTIALS",
            f"Credenciais atualizadas - Usuário: {updated.username}",
            ActivityModule.SYSTEM,
        )
        return updated
