import hmac
import logging
import secrets
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

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
from recroom_auth.domain.errors import (
    IncorrectPasswordError,
    InvalidTokenError,
    UserExistsError,
    UserNotFoundError,
    ValidationFailedError,
)
from recroom_auth.domain.interfaces import UserService
from recroom_auth.domain.models import User
from recroom_auth.domain.optional import OptionalField


@dataclass(frozen=True)
class _ResetToken:
    token: str
    expires_at: float


class InMemoryUserService(UserService):
    """
    Сервис аккаунтов в памяти: для локального запуска и тестов, не для продакшна.
    Состояние под одним локом (синхронные роуты FastAPI выполняются в threadpool);
    argon2 считается вне лока. Наружу отдаются копии User.
    """

    def __init__(
        self,
        logger: logging.Logger,
        token_ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
        hasher: Optional[PasswordHasher] = None,
    ):
        self._log = logger.getChild("InMemoryUserService")
        self._ttl = token_ttl_seconds
        self._clock = clock
        self._hasher = hasher or PasswordHasher()
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._tokens: Dict[int, _ResetToken] = {}
        self._next_id = 1

    @staticmethod
    def _require(field: OptionalField[str], name: str) -> str:
        if not field.is_valid or not field.get():
            raise ValidationFailedError(f"Field '{name}' is required")
        return field.get()

    def _find(self, user_id: int) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def _check_unique(self, name: str, email: str, exclude_id: Optional[int] = None) -> None:
        for user in self._users.values():
            if user.id == exclude_id:
                continue
            if user.name == name:
                raise UserExistsError(f"Name '{name}' is already taken")
            if user.email == email:
                raise UserExistsError(f"Email '{email}' is already taken")

    def _verify(self, password_hash: str, password: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def create_user(self, cmd: CreateUserCommand) -> User:
        name = self._require(cmd.name, "name")
        password = self._require(cmd.password, "password")
        email = self._require(cmd.email, "email")
        password_hash = self._hasher.hash(password)
        with self._lock:
            self._check_unique(name, email)
            user = User(id=self._next_id, name=name, email=email, password_hash=password_hash)
            self._users[user.id] = user
            self._next_id += 1
            snapshot = replace(user)
        self._log.info("User %d created", snapshot.id)
        return snapshot

    def update_user(self, cmd: UpdateUserCommand) -> User:
        name = self._require(cmd.name, "name")
        password = self._require(cmd.password, "password")
        email = self._require(cmd.email, "email")
        password_hash = self._hasher.hash(password)
        with self._lock:
            user = self._find(cmd.user_id)
            self._check_unique(name, email, exclude_id=user.id)
            user.name = name
            user.email = email
            user.password_hash = password_hash
            snapshot = replace(user)
        self._log.info("User %d updated", snapshot.id)
        return snapshot

    def patch_user(self, cmd: PatchUserCommand) -> User:
        for key, value in cmd.fields:
            if not value:
                raise ValidationFailedError(f"Field '{key.value}' must not be empty")
        password = cmd.get(UserField.PASSWORD)
        password_hash = self._hasher.hash(password.get()) if password.is_valid else None
        with self._lock:
            user = self._find(cmd.user_id)
            name = cmd.get(UserField.NAME).or_none() or user.name
            email = cmd.get(UserField.EMAIL).or_none() or user.email
            self._check_unique(name, email, exclude_id=user.id)
            user.name = name
            user.email = email
            if password_hash is not None:
                user.password_hash = password_hash
            snapshot = replace(user)
        self._log.info("User %d patched: %s", snapshot.id, [key.value for key, _ in cmd.fields])
        return snapshot

    def delete_user(self, cmd: DeleteUserCommand) -> None:
        with self._lock:
            self._find(cmd.user_id)
            del self._users[cmd.user_id]
            self._tokens.pop(cmd.user_id, None)
        self._log.info("User %d deleted", cmd.user_id)

    def get_user(self, cmd: GetUserCommand) -> User:
        with self._lock:
            return replace(self._find(cmd.user_id))

    def reset_password(self, cmd: ResetPasswordCommand) -> None:
        key = self._require(cmd.name_or_email, "name_or_email")
        with self._lock:
            user = next((u for u in self._users.values() if u.name == key), None)
            if user is None:
                user = next((u for u in self._users.values() if u.email == key), None)
            if user is None:
                raise UserNotFoundError("No user with this name or email")
            self._tokens[user.id] = _ResetToken(
                token=secrets.token_urlsafe(32), expires_at=self._clock() + self._ttl
            )
        # Токен уходит пользователю по почте, в ответе его нет
        self._log.info("Password reset token issued for user %d", user.id)

    def create_password(self, cmd: CreatePasswordCommand) -> None:
        token = self._require(cmd.token, "token")
        new_password = self._require(cmd.new_password, "new_password")
        password_hash = self._hasher.hash(new_password)
        with self._lock:
            user = self._find(cmd.user_id)
            issued = self._tokens.get(user.id)
            if issued is None or not hmac.compare_digest(issued.token.encode(), token.encode()):
                raise InvalidTokenError()
            del self._tokens[user.id]
            if issued.expires_at <= self._clock():
                raise InvalidTokenError()
            user.password_hash = password_hash
        self._log.info("Password set from reset token for user %d", cmd.user_id)

    def update_password(self, cmd: UpdatePasswordCommand) -> None:
        current = self._require(cmd.password, "password")
        new_password = self._require(cmd.new_password, "new_password")
        with self._lock:
            stored_hash = self._find(cmd.user_id).password_hash
        # argon2 работает без лока; хеш меняем, только если его никто не успел поменять
        if not self._verify(stored_hash, current):
            raise IncorrectPasswordError()
        password_hash = self._hasher.hash(new_password)
        with self._lock:
            user = self._find(cmd.user_id)
            if user.password_hash != stored_hash:
                raise IncorrectPasswordError("Password was changed concurrently")
            user.password_hash = password_hash
        self._log.info("Password changed for user %d", cmd.user_id)

    def issued_token(self, user_id: int) -> Optional[str]:
        """Токен сброса для dev-окружения и тестов."""
        with self._lock:
            issued = self._tokens.get(user_id)
            return issued.token if issued else None
