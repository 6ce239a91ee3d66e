"""
Builder'ы команд: по одной чистой функции на эндпоинт.

Порядок всегда один: id из пути -> тело -> команда. Любая ошибка здесь означает,
что до сервиса запрос не дойдёт.
"""
import logging
from typing import List, Tuple

from recroom_auth.domain.commands import (
    CreatePasswordCommand,
    CreateUserCommand,
    DeleteUserCommand,
    GetUserCommand,
    PatchUserCommand,
    ResetPasswordCommand,
    UpdatePasswordCommand,
    UpdateUserCommand,
    UserField,
)
from recroom_auth.domain.errors import InvalidRequestError
from recroom_auth.schemas.user import (
    CreatePasswordBody,
    ResetPasswordBody,
    UpdatePasswordBody,
    UserBody,
)
from recroom_auth.transport.codec import DEFAULT_MAX_BODY_BYTES, decode_body
from recroom_auth.transport.params import parse_user_id

_log = logging.getLogger("recroom_auth").getChild("builders")


def build_create_user(body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> CreateUserCommand:
    # Обязательность полей проверяет сервис
    decoded = decode_body(body, UserBody, max_bytes)
    return CreateUserCommand(name=decoded["name"], password=decoded["password"], email=decoded["email"])


def build_update_user(raw_id: str, body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> UpdateUserCommand:
    user_id = parse_user_id(raw_id, positive=True)
    decoded = decode_body(body, UserBody, max_bytes)
    return UpdateUserCommand(
        user_id=user_id,
        name=decoded["name"],
        password=decoded["password"],
        email=decoded["email"],
    )


def build_patch_user(raw_id: str, body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> PatchUserCommand:
    user_id = parse_user_id(raw_id, positive=True)
    decoded = decode_body(body, UserBody, max_bytes)
    if decoded.unknown:
        _log.debug("Invalid patch request for id %d: unknown fields %s", user_id, list(decoded.unknown))
        raise InvalidRequestError(f"Unknown fields: {', '.join(sorted(decoded.unknown))}")

    # null не считается переданным значением
    fields: List[Tuple[UserField, str]] = []
    for name in UserField:
        value = decoded[name.value]
        if value.is_valid:
            fields.append((name, value.get()))
    if not fields:
        _log.debug("Invalid patch request for id %d: no fields to update", user_id)
        raise InvalidRequestError("At least one of name, password, email is required")
    return PatchUserCommand(user_id=user_id, fields=tuple(fields))


def build_delete_user(raw_id: str) -> DeleteUserCommand:
    return DeleteUserCommand(user_id=parse_user_id(raw_id, positive=True))


def build_get_user(raw_id: str) -> GetUserCommand:
    return GetUserCommand(user_id=parse_user_id(raw_id, positive=False))


def build_reset_password(body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> ResetPasswordCommand:
    # Имя это или email, решает сервис
    decoded = decode_body(body, ResetPasswordBody, max_bytes)
    return ResetPasswordCommand(name_or_email=decoded["name_or_email"])


def build_create_password(raw_id: str, body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> CreatePasswordCommand:
    user_id = parse_user_id(raw_id, positive=False)
    decoded = decode_body(body, CreatePasswordBody, max_bytes)
    return CreatePasswordCommand(user_id=user_id, token=decoded["token"], new_password=decoded["new_password"])


def build_update_password(raw_id: str, body: bytes, max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> UpdatePasswordCommand:
    user_id = parse_user_id(raw_id, positive=False)
    decoded = decode_body(body, UpdatePasswordBody, max_bytes)
    return UpdatePasswordCommand(user_id=user_id, password=decoded["password"], new_password=decoded["new_password"])
