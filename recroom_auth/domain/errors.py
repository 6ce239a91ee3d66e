from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BODY = "INVALID_BODY"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL = "INTERNAL"


class UserError(Exception):
    """Базовая ошибка слоя пользователей. Обработчик в main.py превращает её в конверт ответа."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(UserError):
    kind = ErrorKind.INVALID_REQUEST
    status_code = 400
    default_message = "Invalid request"


class InvalidBodyError(UserError):
    kind = ErrorKind.INVALID_BODY
    status_code = 400
    default_message = "Invalid request body"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        # Ошибки парсера как есть, без переклассификации
        self.errors = errors or []


class UserNotFoundError(UserError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "User not found"


class UserExistsError(UserError):
    kind = ErrorKind.CONFLICT
    status_code = 409
    default_message = "User already exists"


class InvalidTokenError(UserError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401
    default_message = "Invalid or expired password token"


class IncorrectPasswordError(UserError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401
    default_message = "Incorrect password"


class ValidationFailedError(UserError):
    kind = ErrorKind.VALIDATION_FAILED
    status_code = 422
    default_message = "Validation failed"


class RouteError(UserError):
    """Ошибки маршрутизации (нет роута, не тот метод) в том же конверте."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.kind = ErrorKind.NOT_FOUND if status_code == 404 else ErrorKind.INVALID_REQUEST
