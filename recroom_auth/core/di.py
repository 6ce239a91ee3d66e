from __future__ import annotations
from typing import Optional
import logging

from recroom_auth.core.config import AppSettings
from recroom_auth.application.orchestrator import CommandBus
from recroom_auth.domain.commands import (
    CreatePasswordCommand,
    CreateUserCommand,
    DeleteUserCommand,
    GetUserCommand,
    PatchUserCommand,
    ResetPasswordCommand,
    UpdatePasswordCommand,
    UpdateUserCommand,
)
from recroom_auth.domain.interfaces import UserService
from recroom_auth.infrastructure.memory_service import InMemoryUserService


class AppContainer:
    def __init__(self, settings: AppSettings, user_service: Optional[UserService] = None):
        self._settings = settings
        self._logger = logging.getLogger("recroom_auth")

        # Реальный сервис аккаунтов подставляется снаружи; по умолчанию in-memory
        self._user_service = user_service
        self._bus: Optional[CommandBus] = None

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = InMemoryUserService(
                logger=self._logger,
                token_ttl_seconds=self._settings.reset_token_ttl_seconds,
            )
            self._logger.info("Using in-memory user service")
        return self._user_service

    @property
    def command_bus(self) -> CommandBus:
        if self._bus is None:
            service = self.user_service
            self._bus = CommandBus(logger=self._logger)
            self._bus.register(CreateUserCommand, service.create_user)
            self._bus.register(UpdateUserCommand, service.update_user)
            self._bus.register(PatchUserCommand, service.patch_user)
            self._bus.register(DeleteUserCommand, service.delete_user)
            self._bus.register(GetUserCommand, service.get_user)
            self._bus.register(ResetPasswordCommand, service.reset_password)
            self._bus.register(CreatePasswordCommand, service.create_password)
            self._bus.register(UpdatePasswordCommand, service.update_password)
        return self._bus
