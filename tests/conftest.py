"""
Общие фикстуры: дешёвый argon2, in-memory сервис, приложение и TestClient.
"""
import logging

import pytest
from argon2 import PasswordHasher
from fastapi.testclient import TestClient

from recroom_auth.core.config import AppSettings
from recroom_auth.infrastructure.memory_service import InMemoryUserService
from recroom_auth.main import create_app


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Минимальные параметры, чтобы тесты не тратили время на хеширование
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def service(clock, hasher) -> InMemoryUserService:
    return InMemoryUserService(
        logger=logging.getLogger("recroom_auth.tests"),
        token_ttl_seconds=60,
        clock=clock,
        hasher=hasher,
    )


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(log_json=False, log_level="DEBUG", max_body_bytes=1024)


@pytest.fixture
def client(settings, service):
    app = create_app(settings=settings, user_service=service)
    with TestClient(app) as c:
        yield c
