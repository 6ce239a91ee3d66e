from dataclasses import dataclass
from typing import Any, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from recroom_auth.domain.errors import InvalidBodyError, UserError


class Response(BaseModel):
    """Единый конверт ответа для всех эндпоинтов, и для успеха, и для ошибки."""

    success: bool
    code: str
    message: str
    data: Optional[Any] = None


@dataclass(frozen=True)
class Success:
    data: Any = None
    status_code: int = 200
    message: str = "OK"


@dataclass(frozen=True)
class Failure:
    error: UserError


Result = Union[Success, Failure]


def encode_response(result: Result, headers: Optional[dict] = None) -> JSONResponse:
    if isinstance(result, Success):
        status_code = result.status_code
        envelope = Response(success=True, code="OK", message=result.message, data=result.data)
    else:
        err = result.error
        status_code = err.status_code
        data = {"errors": err.errors} if isinstance(err, InvalidBodyError) and err.errors else None
        envelope = Response(success=False, code=err.kind.value, message=err.message, data=data)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope), headers=headers)
