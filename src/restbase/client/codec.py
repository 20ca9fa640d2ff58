"""JSON encoding of request payloads and typed decoding of response bodies.

Decoding goes through :class:`pydantic.TypeAdapter`, so the target can be
anything Pydantic understands: a ``BaseModel`` subclass, a dataclass, a
``TypedDict``, or a parametrised container such as ``list[Item]``. Passing
no type returns the plain JSON value.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Optional, TypeVar, overload

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from restbase.exceptions import DecodeError, InvalidUsageError

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


@overload
def decode_body(body: str, model: None = None) -> Any: ...


@overload
def decode_body(body: str, model: type[T]) -> T: ...


def decode_body(body: str, model: Optional[Any] = None) -> Any:
    """Parse *body* as JSON and, if *model* is given, validate it into that type.

    Raises:
        DecodeError: If the body is not valid JSON or does not match *model*.
    """
    if model is None:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Response is not valid JSON: {exc}") from exc

    try:
        return _adapter(model).validate_json(body)
    except ValidationError as exc:
        name = getattr(model, "__name__", repr(model))
        raise DecodeError(
            f"Response does not match {name}: {exc.error_count()} validation error(s)\n{exc}"
        ) from exc


def encode_payload(payload: Any) -> bytes:
    """Serialise *payload* to UTF-8 JSON bytes.

    Models, dataclasses, dicts, lists, datetimes and UUIDs are all handled
    by :func:`pydantic_core.to_json`.

    Raises:
        InvalidUsageError: If *payload* contains a value with no JSON form.
    """
    try:
        return to_json(payload)
    except PydanticSerializationError as exc:
        raise InvalidUsageError(f"Payload is not JSON-serialisable: {exc}") from exc
