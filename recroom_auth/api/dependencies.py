from typing import Optional

from fastapi import Header, Request
from recroom_auth.core.di import AppContainer
from recroom_auth.application.orchestrator import CommandBus
from recroom_auth.transport.codec import read_body


def get_container(request: Request) -> AppContainer:
    return request.app.state.container  # type: ignore[attr-defined]


def get_command_bus(request: Request) -> CommandBus:
    return get_container(request).command_bus


def get_max_body_bytes(request: Request) -> int:
    return get_container(request).settings.max_body_bytes


def get_request_id(request: Request, x_request_id: Optional[str] = Header(default=None)) -> str:
    # middleware уже положил id в state; заголовок на случай роутера без middleware
    return getattr(request.state, "request_id", None) or x_request_id or "-"


async def get_raw_body(request: Request) -> bytes:
    # Лимит проверяется по ходу чтения, тело целиком в память не попадает
    return await read_body(
        request.stream(),
        get_max_body_bytes(request),
        content_length=request.headers.get("content-length"),
    )
