import logging
import re

from starlette.convertors import Convertor, register_url_convertor

from recroom_auth.domain.errors import InvalidRequestError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Как strconv.ParseInt(s, 10, 64): необязательный знак и десятичные цифры, без пробелов и "_"
_INT_RE = re.compile(r"[+-]?[0-9]+")

_log = logging.getLogger("recroom_auth").getChild("params")


def parse_user_id(raw: str, *, positive: bool) -> int:
    """
    Разбор id из сегмента пути. positive=True для Update/Patch/Delete:
    там id <= 0 тоже считается неверным запросом.
    """
    if raw is None or not _INT_RE.fullmatch(raw):
        _log.debug("Invalid id %r: not a base-10 integer", raw)
        raise InvalidRequestError(f"Invalid user id: {raw!r}")

    value = int(raw, 10)
    if not INT64_MIN <= value <= INT64_MAX:
        _log.debug("Invalid id %r: out of int64 range", raw)
        raise InvalidRequestError(f"Invalid user id: {raw!r}")
    if positive and value <= 0:
        _log.debug("Invalid id %r: must be positive", raw)
        raise InvalidRequestError(f"Invalid user id: {raw!r}")
    return value


class DigitsConvertor(Convertor):
    """Сегмент пути только из цифр; значение остаётся строкой, разбирает parse_user_id."""

    regex = "[0-9]+"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value: str) -> str:
        return str(value)


def register_convertors() -> None:
    register_url_convertor("digits", DigitsConvertor())
