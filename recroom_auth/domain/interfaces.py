from abc import ABC, abstractmethod

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
from recroom_auth.domain.models import User


class UserService(ABC):
    """
    Граница диспетчеризации: бизнес-логика аккаунтов живёт за этим интерфейсом.
    Методы возвращают результат домена или бросают UserError.
    """

    @abstractmethod
    def create_user(self, cmd: CreateUserCommand) -> User:
        ...

    @abstractmethod
    def update_user(self, cmd: UpdateUserCommand) -> User:
        ...

    @abstractmethod
    def patch_user(self, cmd: PatchUserCommand) -> User:
        ...

    @abstractmethod
    def delete_user(self, cmd: DeleteUserCommand) -> None:
        ...

    @abstractmethod
    def get_user(self, cmd: GetUserCommand) -> User:
        ...

    @abstractmethod
    def reset_password(self, cmd: ResetPasswordCommand) -> None:
        ...

    @abstractmethod
    def create_password(self, cmd: CreatePasswordCommand) -> None:
        ...

    @abstractmethod
    def update_password(self, cmd: UpdatePasswordCommand) -> None:
        ...

