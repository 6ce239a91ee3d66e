import logging
import threading
import time

import pytest
from argon2 import PasswordHasher

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
from recroom_auth.domain.optional import OptionalField as F
from recroom_auth.infrastructure.memory_service import InMemoryUserService

pytestmark = pytest.mark.unit


def _create(service, name="bob", email="bob@example.com", password="secret"):
    return service.create_user(CreateUserCommand(name=F.of(name), password=F.of(password), email=F.of(email)))


def test_create_and_get(service):
    user = _create(service)
    assert user.id == 1
    assert user.password_hash and user.password_hash != "secret"
    assert service.get_user(GetUserCommand(user_id=1)) == user


@pytest.mark.parametrize("missing", ["name", "password", "email"])
def test_create_requires_all_fields(service, missing):
    kwargs = {"name": F.of("bob"), "password": F.of("pw"), "email": F.of("b@x")}
    kwargs[missing] = F.null()
    with pytest.raises(ValidationFailedError):
        service.create_user(CreateUserCommand(**kwargs))


def test_create_duplicate(service):
    _create(service)
    with pytest.raises(UserExistsError):
        _create(service, email="other@example.com")
    with pytest.raises(UserExistsError):
        _create(service, name="other")


def test_update_replaces_everything(service):
    _create(service)
    user = service.update_user(
        UpdateUserCommand(user_id=1, name=F.of("alice"), password=F.of("pw2"), email=F.of("a@x"))
    )
    assert (user.name, user.email) == ("alice", "a@x")


def test_update_requires_all_fields(service):
    _create(service)
    with pytest.raises(ValidationFailedError):
        service.update_user(UpdateUserCommand(user_id=1, name=F.of("alice")))


def test_patch_touches_only_supplied(service):
    _create(service)
    old_hash = service.get_user(GetUserCommand(user_id=1)).password_hash
    user = service.patch_user(PatchUserCommand(user_id=1, fields=((UserField.EMAIL, "new@x"),)))
    assert user.name == "bob"
    assert user.email == "new@x"
    assert user.password_hash == old_hash


def test_patch_empty_value_rejected(service):
    _create(service)
    with pytest.raises(ValidationFailedError):
        service.patch_user(PatchUserCommand(user_id=1, fields=((UserField.NAME, ""),)))


def test_patch_unknown_user(service):
    with pytest.raises(UserNotFoundError):
        service.patch_user(PatchUserCommand(user_id=9, fields=((UserField.NAME, "x"),)))


def test_delete(service):
    _create(service)
    service.delete_user(DeleteUserCommand(user_id=1))
    with pytest.raises(UserNotFoundError):
        service.get_user(GetUserCommand(user_id=1))
    with pytest.raises(UserNotFoundError):
        service.delete_user(DeleteUserCommand(user_id=1))


@pytest.mark.parametrize("key", ["bob", "bob@example.com"])
def test_reset_by_name_or_email(service, key):
    _create(service)
    service.reset_password(ResetPasswordCommand(name_or_email=F.of(key)))
    assert service.issued_token(1)


def test_reset_unknown(service):
    with pytest.raises(UserNotFoundError):
        service.reset_password(ResetPasswordCommand(name_or_email=F.of("nobody")))


def test_reset_then_create_password(service):
    _create(service)
    service.reset_password(ResetPasswordCommand(name_or_email=F.of("bob")))
    token = service.issued_token(1)
    service.create_password(CreatePasswordCommand(user_id=1, token=F.of(token), new_password=F.of("fresh")))
    assert service.issued_token(1) is None
    # Токен одноразовый
    with pytest.raises(InvalidTokenError):
        service.create_password(CreatePasswordCommand(user_id=1, token=F.of(token), new_password=F.of("again")))
    service.update_password(UpdatePasswordCommand(user_id=1, password=F.of("fresh"), new_password=F.of("x")))


def test_wrong_token(service):
    _create(service)
    service.reset_password(ResetPasswordCommand(name_or_email=F.of("bob")))
    with pytest.raises(InvalidTokenError):
        service.create_password(CreatePasswordCommand(user_id=1, token=F.of("nope"), new_password=F.of("x")))


def test_expired_token(service, clock):
    _create(service)
    service.reset_password(ResetPasswordCommand(name_or_email=F.of("bob")))
    token = service.issued_token(1)
    clock.advance(61)
    with pytest.raises(InvalidTokenError):
        service.create_password(CreatePasswordCommand(user_id=1, token=F.of(token), new_password=F.of("x")))
    assert service.issued_token(1) is None


def test_update_password_checks_current(service):
    _create(service)
    with pytest.raises(IncorrectPasswordError):
        service.update_password(UpdatePasswordCommand(user_id=1, password=F.of("wrong"), new_password=F.of("x")))
    service.update_password(UpdatePasswordCommand(user_id=1, password=F.of("secret"), new_password=F.of("x")))
    with pytest.raises(IncorrectPasswordError):
        service.update_password(UpdatePasswordCommand(user_id=1, password=F.of("secret"), new_password=F.of("y")))


class SlowHasher(PasswordHasher):
    def __init__(self, delay: float):
        super().__init__(time_cost=1, memory_cost=8, parallelism=1)
        self.delay = delay
        self.started = threading.Event()

    def hash(self, password, *, salt=None):
        self.started.set()
        time.sleep(self.delay)
        return super().hash(password)


def test_reads_do_not_wait_for_password_hashing():
    hasher = SlowHasher(delay=0.5)
    slow = InMemoryUserService(logger=logging.getLogger("recroom_auth.tests"), hasher=hasher)
    hasher.delay = 0
    _create(slow)
    hasher.delay = 0.5
    hasher.started.clear()

    worker = threading.Thread(
        target=slow.patch_user,
        args=(PatchUserCommand(user_id=1, fields=((UserField.PASSWORD, "new-secret"),)),),
    )
    worker.start()
    try:
        assert hasher.started.wait(timeout=2)
        began = time.monotonic()
        assert slow.get_user(GetUserCommand(user_id=1)).name == "bob"
        assert time.monotonic() - began < 0.25
    finally:
        worker.join()
    slow.update_password(UpdatePasswordCommand(user_id=1, password=F.of("new-secret"), new_password=F.of("x")))


def test_returned_users_are_copies(service):
    created = _create(service)
    created.name = "mallory"
    fetched = service.get_user(GetUserCommand(user_id=1))
    assert fetched.name == "bob"
    fetched.email = "changed@x"
    assert service.get_user(GetUserCommand(user_id=1)).email == "bob@example.com"


def test_update_password_rejects_concurrent_change(service):
    _create(service)
    original_hash = service.get_user(GetUserCommand(user_id=1)).password_hash
    verify = service._verify

    def verify_then_race(stored_hash, password):
        ok = verify(stored_hash, password)
        # Пока проверка шла без лока, пароль успели сменить
        service.patch_user(PatchUserCommand(user_id=1, fields=((UserField.PASSWORD, "other"),)))
        return ok

    service._verify = verify_then_race
    with pytest.raises(IncorrectPasswordError):
        service.update_password(UpdatePasswordCommand(user_id=1, password=F.of("secret"), new_password=F.of("x")))
    assert service.get_user(GetUserCommand(user_id=1)).password_hash != original_hash
