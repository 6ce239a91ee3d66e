"""
Разбор JSON-тела запроса в набор OptionalField.

Каждое поле схемы возвращается в одном из трёх состояний (нет ключа / null / значение),
поэтому builder может отличить "не передано" от "передано пустым".
"""
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from recroom_auth.domain.errors import InvalidBodyError
from recroom_auth.domain.optional import OptionalField

DEFAULT_MAX_BODY_BYTES = 64 * 1024

_log = logging.getLogger("recroom_auth").getChild("codec")


def _too_large(max_bytes: int) -> InvalidBodyError:
    return InvalidBodyError(f"Request body exceeds {max_bytes} bytes")


@dataclass(frozen=True)
class DecodedBody:
    fields: Dict[str, OptionalField[str]]
    unknown: Tuple[str, ...] = ()

    def __getitem__(self, name: str) -> OptionalField[str]:
        return self.fields[name]


def decode_body(raw: bytes, schema: Type[BaseModel], max_bytes: int = DEFAULT_MAX_BODY_BYTES) -> DecodedBody:
    if len(raw) > max_bytes:
        _log.debug("Request body too large: %d > %d bytes", len(raw), max_bytes)
        raise _too_large(max_bytes)

    # Верхнеуровневый null декодируется как пустой объект: все поля отсутствуют
    if raw.strip() == b"null":
        raw = b"{}"

    try:
        model = schema.model_validate_json(raw)
    except ValidationError as e:
        _log.debug("Error decoding %s: %d error(s)", schema.__name__, e.error_count())
        raise InvalidBodyError(
            "Malformed request body",
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e

    supplied = model.model_fields_set
    fields: Dict[str, OptionalField[str]] = {}
    for name in type(model).model_fields:
        if name not in supplied:
            fields[name] = OptionalField.absent()
            continue
        value = getattr(model, name)
        fields[name] = OptionalField.null() if value is None else OptionalField.of(value)

    unknown = tuple((model.model_extra or {}).keys())
    return DecodedBody(fields=fields, unknown=unknown)


async def read_body(chunks: AsyncIterator[bytes], max_bytes: int, content_length: Optional[str] = None) -> bytes:
    """
    Читает тело по кускам и обрывает чтение, как только превышен лимит.
    Content-Length больше лимита отклоняется без чтения тела.
    """
    if content_length is not None and content_length.isdigit() and int(content_length) > max_bytes:
        _log.debug("Declared body too large: %s > %d bytes", content_length, max_bytes)
        raise _too_large(max_bytes)

    received = bytearray()
    async for chunk in chunks:
        received.extend(chunk)
        if len(received) > max_bytes:
            _log.debug("Request body too large: more than %d bytes received", max_bytes)
            raise _too_large(max_bytes)
    return bytes(received)
