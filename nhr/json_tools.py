"""JSON marshal/unmarshal helpers shared by request bodies and response decoding."""

import dataclasses
from typing import Any, ClassVar, get_origin, get_type_hints

import orjson
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from .exceptions import ResponseDecodeError

_MISSING = object()


def json_marshal(value: Any) -> bytes:
    """
    Serialize a value to compact UTF-8 JSON

    Mapping keys are sorted so the output is deterministic.

    Raises:
        TypeError: value holds something that cannot be serialized
                   (orjson.JSONEncodeError is a TypeError)
    """
    return orjson.dumps(value, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS)


def json_unmarshal(data: bytes | str, target: Any = _MISSING) -> Any:
    """
    Decode JSON bytes, optionally populating a target in place

    Args:
        data: JSON document
        target: dict (updated), list (contents replaced), pydantic model,
                dataclass or annotated object whose fields are set from the
                JSON object keys

    Returns:
        The populated target, or the decoded value when no target is given

    Raises:
        ResponseDecodeError: data is not valid JSON or does not fit the target
    """
    try:
        decoded = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raw = data.encode("utf-8") if isinstance(data, str) else data
        raise ResponseDecodeError(f"invalid JSON document: {e}", raw_body=raw) from e

    if target is _MISSING:
        return decoded
    return populate(target, decoded)


def populate(target: Any, decoded: Any) -> Any:
    """
    Copy a decoded JSON value into target in place

    JSON object keys are matched to field names exactly, then
    case-insensitively; unknown keys are ignored. Values of annotated fields
    are validated against the annotation with pydantic, so nested models and
    dataclasses are built and mismatched types are rejected.
    """
    if isinstance(target, dict):
        if not isinstance(decoded, dict):
            raise _mismatch(decoded, target)
        target.update(decoded)
        return target

    if isinstance(target, list):
        if not isinstance(decoded, list):
            raise _mismatch(decoded, target)
        target[:] = decoded
        return target

    if not isinstance(decoded, dict):
        raise _mismatch(decoded, target)

    fields = _field_types(target)
    values = _match_keys(fields, decoded)

    try:
        if isinstance(target, BaseModel):
            validated = type(target).model_validate({**dict(target), **values})
            values = {name: getattr(validated, name) for name in values}
        else:
            values = {name: _validate(fields[name], value) for name, value in values.items()}
    except ValidationError as e:
        raise ResponseDecodeError(f"cannot decode JSON into {type(target).__name__}: {e}") from e

    for name, value in values.items():
        setattr(target, name, value)

    return target


def _mismatch(decoded: Any, target: Any) -> ResponseDecodeError:
    return ResponseDecodeError(
        f"cannot decode JSON {type(decoded).__name__} into {type(target).__name__}"
    )


def _field_types(target: Any) -> dict[str, Any]:
    """Field names of target mapped to their annotation (Any when untyped)."""
    cls = type(target)
    if isinstance(target, BaseModel):
        return {name: field.annotation for name, field in cls.model_fields.items()}

    types: dict[str, Any] = {name: Any for name in getattr(target, "__dict__", {})}
    slots = getattr(cls, "__slots__", ())
    types.update((name, Any) for name in ((slots,) if isinstance(slots, str) else slots))

    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        # unresolvable forward references: keep the raw annotations
        hints = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
    types.update(hints)

    if dataclasses.is_dataclass(target):
        types = {f.name: types.get(f.name, Any) for f in dataclasses.fields(target)}

    return {
        name: hint
        for name, hint in types.items()
        if not name.startswith("_") and get_origin(hint) is not ClassVar and hint is not ClassVar
    }


def _match_keys(fields: dict[str, Any], decoded: dict[str, Any]) -> dict[str, Any]:
    by_lower = {name.lower(): name for name in fields}
    values = {}
    for key, value in decoded.items():
        if key in fields:
            values[key] = value
        elif key.lower() in by_lower:
            values[by_lower[key.lower()]] = value
    return values


def _validate(hint: Any, value: Any) -> Any:
    if hint is Any or isinstance(hint, str):
        return value

    try:
        adapter = TypeAdapter(hint)
    except PydanticSchemaGenerationError:
        # plain annotated class: build a fresh instance and fill it the same way
        if isinstance(hint, type) and isinstance(value, dict):
            try:
                nested = hint()
            except TypeError as e:
                raise ResponseDecodeError(
                    f"cannot create {hint.__name__} to decode nested JSON object: {e}"
                ) from e
            return populate(nested, value)
        return value

    return adapter.validate_python(value)
