from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class FieldState(str, Enum):
    ABSENT = "absent"
    NULL = "null"
    VALUE = "value"


@dataclass(frozen=True)
class OptionalField(Generic[T]):
    """
    Поле тела запроса в одном из трёх состояний: ключа нет, ключ есть со значением null,
    ключ есть со значением. Builder'ы смотрят на состояние, чтобы частичное обновление
    трогало только реально переданные поля.
    """

    state: FieldState = FieldState.ABSENT
    value: Optional[T] = None

    @classmethod
    def absent(cls) -> "OptionalField[Any]":
        return cls(FieldState.ABSENT)

    @classmethod
    def null(cls) -> "OptionalField[Any]":
        return cls(FieldState.NULL)

    @classmethod
    def of(cls, value: T) -> "OptionalField[T]":
        if value is None:
            raise ValueError("OptionalField.of() requires a value, use null() instead")
        return cls(FieldState.VALUE, value)

    @property
    def is_present(self) -> bool:
        return self.state is not FieldState.ABSENT

    @property
    def is_valid(self) -> bool:
        return self.state is FieldState.VALUE

    def get(self) -> T:
        if self.state is not FieldState.VALUE:
            raise ValueError(f"Field has no value (state={self.state.value})")
        return self.value  # type: ignore[return-value]

    def or_none(self) -> Optional[T]:
        return self.value if self.state is FieldState.VALUE else None

    def __repr__(self) -> str:
        if self.state is FieldState.VALUE:
            return f"OptionalField({self.value!r})"
        return f"OptionalField.{self.state.value}()"
