"""Shared dataclass plumbing: strict document parsing and canonical serialization."""

from __future__ import annotations

import base64
import binascii
import json
import math
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import NoReturn, TypeVar, cast

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

TModel = TypeVar("TModel", bound="CanonicalModel")
TEnum = TypeVar("TEnum", bound=Enum)

_MAX_TEXT = 64 * 1024
_MAX_COLLECTION = 4096


class MessageParseError(ValueError):
    """Raised when a decoded document cannot be materialized as a message."""


class CanonicalModel:
    """Mixin for canonical dict/json serialization of message dataclasses.

    Unset optional fields (``None``) are omitted, matching the protobuf JSON
    mapping the documents follow.
    """

    def to_dict(self) -> dict[str, JSONValue]:
        serialized = serialize_value(self, self.__class__.__name__)
        if not isinstance(serialized, dict):
            fail(self.__class__.__name__, "serialized message must be an object")
        return serialized

    def to_json(self) -> str:
        return canonical_json(self.to_dict())

    @classmethod
    def from_json(cls: type[TModel], raw: str) -> TModel:
        if not isinstance(raw, str):
            fail(cls.__name__, f"expected JSON string, got {type(raw).__name__}")
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            fail(cls.__name__, f"invalid JSON: {exc}")
        return cls.from_dict(parsed)

    @classmethod
    def from_dict(cls: type[TModel], data: object) -> TModel:
        fail(cls.__name__, "from_dict is not implemented for this message type")


def fail(path: str, message: str) -> NoReturn:
    raise MessageParseError(f"{path}: {message}")


def canonical_json(value: JSONValue) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def expect_object(
    value: object,
    path: str,
    *,
    required: set[str] | None = None,
    optional: set[str] | None = None,
) -> dict[str, object]:
    """Check ``value`` is a mapping with only known keys; ``None`` values count as absent."""
    if not isinstance(value, Mapping):
        fail(path, f"expected object, got {type(value).__name__}")

    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            fail(path, f"object keys must be strings, got {type(key).__name__}")
        if item is None:
            continue
        parsed[key] = item

    required_keys = required or set()
    allowed = required_keys | (optional or set())
    unknown = sorted(key for key in parsed if key not in allowed)
    if unknown:
        fail(path, f"unexpected fields: {unknown}")

    missing = sorted(key for key in required_keys if key not in parsed)
    if missing:
        fail(path, f"missing required fields: {missing}")

    return parsed


def as_str(value: object, path: str, *, max_len: int | None = _MAX_TEXT) -> str:
    # No stripping or minimum length: emptiness is a validation concern.
    if not isinstance(value, str):
        fail(path, f"expected string, got {type(value).__name__}")
    if max_len is not None and len(value) > max_len:
        fail(path, f"must be <= {max_len} characters")
    return value


def as_optional_str(value: object, path: str) -> str | None:
    if value is None:
        return None
    return as_str(value, path)


def as_bool(value: object, path: str) -> bool:
    if isinstance(value, bool):
        return value
    fail(path, f"expected boolean, got {type(value).__name__}")


def as_int(value: object, path: str, *, minimum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        fail(path, f"expected integer, got {type(value).__name__}")
    if minimum is not None and value < minimum:
        fail(path, f"must be >= {minimum}")
    return value


def as_float(value: object, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        fail(path, f"expected number, got {type(value).__name__}")
    parsed = float(value)
    if not math.isfinite(parsed):
        fail(path, "must be finite")
    return parsed


def as_bytes(value: object, path: str) -> bytes:
    """Accept raw bytes (YAML ``!!binary``) or a base64 string (protobuf JSON)."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        fail(path, f"expected base64 string or bytes, got {type(value).__name__}")
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (UnicodeEncodeError, binascii.Error) as exc:
        fail(path, f"invalid base64 payload ({exc})")


def as_enum(enum_type: type[TEnum], value: object, path: str) -> TEnum:
    if isinstance(value, enum_type):
        return value
    if not isinstance(value, str):
        fail(path, f"expected string enum value, got {type(value).__name__}")
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(sorted(str(item.value) for item in enum_type))
        fail(path, f"invalid value {value!r}; expected one of: {allowed}")


def as_sequence(value: object, path: str) -> list[object]:
    if isinstance(value, (list, tuple)):
        if len(value) > _MAX_COLLECTION:
            fail(path, f"too many items (>{_MAX_COLLECTION})")
        return list(value)
    fail(path, f"expected array, got {type(value).__name__}")


def coerce_enum(enum_type: type[TEnum], value: object) -> TEnum | object:
    """Map a wire name onto its member; anything else is kept for the validators to see."""
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type(value)
        except ValueError:
            return value
    return value


def check_instance(value: object, expected: type | tuple[type, ...], path: str) -> None:
    if not isinstance(value, expected):
        names = (
            " | ".join(item.__name__ for item in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        raise TypeError(f"{path}: expected {names}, got {type(value).__name__}")


def check_optional_instance(
    value: object, expected: type | tuple[type, ...], path: str
) -> None:
    if value is not None:
        check_instance(value, expected, path)


def serialize_value(value: object, path: str) -> JSONValue:
    if value is None or isinstance(value, bool):
        return cast("JSONValue", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            fail(path, "float values must be finite")
        return value
    if isinstance(value, Enum):
        return cast("JSONValue", value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (tuple, list)):
        return [serialize_value(item, f"{path}[]") for item in value]
    if isinstance(value, Mapping):
        out: dict[str, JSONValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                fail(path, "dict keys must be strings")
            out[key] = serialize_value(item, f"{path}.{key}")
        return out
    if is_dataclass(value) and not isinstance(value, type):
        out_obj: dict[str, JSONValue] = {}
        for dataclass_field in fields(value):
            item = getattr(value, dataclass_field.name)
            if item is None:
                continue
            out_obj[dataclass_field.name] = serialize_value(
                item, f"{path}.{dataclass_field.name}"
            )
        return out_obj

    fail(path, f"cannot serialize value of type {type(value).__name__}")


__all__ = [
    "CanonicalModel",
    "JSONScalar",
    "JSONValue",
    "MessageParseError",
    "as_bool",
    "as_bytes",
    "as_enum",
    "as_float",
    "as_int",
    "as_optional_str",
    "as_sequence",
    "as_str",
    "canonical_json",
    "check_instance",
    "check_optional_instance",
    "coerce_enum",
    "expect_object",
    "fail",
    "serialize_value",
]
