from typing import Optional

from pydantic import BaseModel, ConfigDict


class _Body(BaseModel):
    # Неизвестные ключи не роняют разбор: builder сам решает, что с ними делать
    model_config = ConfigDict(extra="allow", frozen=True)


class UserBody(_Body):
    name: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None


class ResetPasswordBody(_Body):
    name_or_email: Optional[str] = None


class CreatePasswordBody(_Body):
    token: Optional[str] = None
    new_password: Optional[str] = None


class UpdatePasswordBody(_Body):
    password: Optional[str] = None
    new_password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
