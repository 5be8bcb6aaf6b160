"""
Payload encoding.

Payloads are stored as compact JSON text. Decoding an absent value yields
None; decoding anything else that is not valid JSON is a hard failure.
"""

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from redqueue.exceptions import EncodeError, MalformedPayloadError, PayloadShapeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not encodable")


def encode(value: Any) -> bytes:
    """
    Serialize a value to UTF-8 JSON bytes.

    Args:
        value: Mappings, sequences, strings, numbers or pydantic models.

    Returns:
        The encoded bytes.

    Raises:
        EncodeError: If the value contains something JSON cannot represent.
    """
    try:
        text = json.dumps(
            value,
            default=_default,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise EncodeError(str(e)) from e
    return text.encode("utf-8")


def decode(data: bytes | str | None) -> Any | None:
    """
    Parse stored bytes back into a value.

    Args:
        data: Raw value from the store, or None when nothing was there.

    Returns:
        The decoded value, or None for absent input.

    Raises:
        MalformedPayloadError: If data is present but not valid JSON.
    """
    if data is None:
        return None
    try:
        return json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPayloadError(data, str(e)) from e


def decode_model(data: bytes | str | None, model: type[ModelT]) -> ModelT | None:
    """
    Decode stored bytes and validate them into a model.

    Raises:
        MalformedPayloadError: If data is not valid JSON.
        PayloadShapeError: If the decoded value does not fit the model.
    """
    value = decode(data)
    if value is None:
        return None
    return validate(value, model)


def validate(value: Any, model: type[ModelT]) -> ModelT:
    """Validate an already decoded value into a model."""
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise PayloadShapeError(model.__name__, str(e)) from e
