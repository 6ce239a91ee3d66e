from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple

from recroom_auth.domain.optional import OptionalField


class Command:
    """Базовый класс для команд (маркер)."""
    pass


class UserField(str, Enum):
    NAME = "name"
    PASSWORD = "password"
    EMAIL = "email"


def _absent() -> OptionalField[str]:
    return OptionalField.absent()


@dataclass(frozen=True)
class CreateUserCommand(Command):
    name: OptionalField[str] = field(default_factory=_absent)
    password: OptionalField[str] = field(default_factory=_absent, repr=False)
    email: OptionalField[str] = field(default_factory=_absent)


@dataclass(frozen=True)
class UpdateUserCommand(Command):
    # Полная замена: все три поля уходят в сервис, даже если не переданы
    user_id: int
    name: OptionalField[str] = field(default_factory=_absent)
    password: OptionalField[str] = field(default_factory=_absent, repr=False)
    email: OptionalField[str] = field(default_factory=_absent)


@dataclass(frozen=True)
class PatchUserCommand(Command):
    user_id: int
    fields: Tuple[Tuple[UserField, str], ...] = ()

    def __post_init__(self):
        if not self.fields:
            raise ValueError("PatchUserCommand requires at least one field")

    def get(self, name: UserField) -> OptionalField[str]:
        for key, value in self.fields:
            if key is name:
                return OptionalField.of(value)
        return OptionalField.absent()

    def as_mapping(self) -> "OrderedDict[str, Any]":
        """id + только переданные поля, в порядке name, password, email."""
        mapping: "OrderedDict[str, Any]" = OrderedDict(id=self.user_id)
        for key, value in self.fields:
            mapping[key.value] = value
        return mapping

    def __repr__(self) -> str:
        names = ", ".join(key.value for key, _ in self.fields)
        return f"PatchUserCommand(user_id={self.user_id}, fields=[{names}])"


@dataclass(frozen=True)
class DeleteUserCommand(Command):
    user_id: int


@dataclass(frozen=True)
class GetUserCommand(Command):
    user_id: int


@dataclass(frozen=True)
class ResetPasswordCommand(Command):
    name_or_email: OptionalField[str] = field(default_factory=_absent)


@dataclass(frozen=True)
class CreatePasswordCommand(Command):
    user_id: int
    token: OptionalField[str] = field(default_factory=_absent, repr=False)
    new_password: OptionalField[str] = field(default_factory=_absent, repr=False)


@dataclass(frozen=True)
class UpdatePasswordCommand(Command):
    user_id: int
    password: OptionalField[str] = field(default_factory=_absent, repr=False)
    new_password: OptionalField[str] = field(default_factory=_absent, repr=False)
