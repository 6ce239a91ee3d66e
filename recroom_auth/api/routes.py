from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from recroom_auth.application.orchestrator import CommandBus
from recroom_auth.api.dependencies import get_command_bus, get_max_body_bytes, get_raw_body, get_request_id
from recroom_auth.domain.models import User
from recroom_auth.schemas.user import UserOut
from recroom_auth.transport import builders
from recroom_auth.transport.params import register_convertors
from recroom_auth.transport.response import Response, Success, encode_response

# {user_id:digits} должен быть известен до объявления роутов
register_convertors()

router = APIRouter(tags=["users"], responses={400: {"model": Response}, 404: {"model": Response}})


def _user_out(user: User) -> dict:
    return UserOut(id=user.id, name=user.name, email=user.email).model_dump()


# POST /users
@router.post("/users", response_model=Response, status_code=201)
def create_user(
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_create_user(body, max_bytes)
    user = bus.execute(cmd, request_id=request_id)
    return encode_response(Success(data=_user_out(user), status_code=201, message="User created"))


# PUT /users/{id}
@router.put("/users/{user_id:digits}", response_model=Response)
def update_user(
    user_id: str,
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_update_user(user_id, body, max_bytes)
    user = bus.execute(cmd, request_id=request_id)
    return encode_response(Success(data=_user_out(user), message="User updated"))


# PATCH /users/{id}
@router.patch("/users/{user_id:digits}", response_model=Response)
def patch_user(
    user_id: str,
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_patch_user(user_id, body, max_bytes)
    user = bus.execute(cmd, request_id=request_id)
    return encode_response(Success(data=_user_out(user), message="User updated"))


# DELETE /users/{id}
@router.delete("/users/{user_id:digits}", response_model=Response)
def delete_user(
    user_id: str,
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_delete_user(user_id)
    bus.execute(cmd, request_id=request_id)
    return encode_response(Success(message="User deleted"))


# GET /users/{id}
@router.get("/users/{user_id:digits}", response_model=Response)
def get_user(
    user_id: str,
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_get_user(user_id)
    user = bus.execute(cmd, request_id=request_id)
    return encode_response(Success(data=_user_out(user)))


# GET /password/reset
@router.get("/password/reset", response_model=Response)
def reset_password(
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_reset_password(body, max_bytes)
    bus.execute(cmd, request_id=request_id)
    return encode_response(Success(message="Password reset requested"))


# POST /users/{id}/password
@router.post("/users/{user_id}/password", response_model=Response)
def create_password(
    user_id: str,
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_create_password(user_id, body, max_bytes)
    bus.execute(cmd, request_id=request_id)
    return encode_response(Success(message="Password created"))


# PUT /users/{id}/password
@router.put("/users/{user_id}/password", response_model=Response)
def update_password(
    user_id: str,
    body: bytes = Depends(get_raw_body),
    max_bytes: int = Depends(get_max_body_bytes),
    bus: CommandBus = Depends(get_command_bus),
    request_id: str = Depends(get_request_id),
) -> JSONResponse:
    cmd = builders.build_update_password(user_id, body, max_bytes)
    bus.execute(cmd, request_id=request_id)
    return encode_response(Success(message="Password updated"))
