"""Serialization and deserialization utilities for JSON request/response bodies."""

import json
from collections.abc import MutableMapping, MutableSequence
from typing import Any, Optional, Type, get_origin


def _is_container_of(cls: Any, kind: type) -> bool:
    # List[str] and Dict[str, Any] are checked through their origin, list / dict / UserList directly
    origin = get_origin(cls) or cls
    return isinstance(origin, type) and issubclass(origin, kind)


def _is_list_type(cls: Any) -> bool:
    return _is_container_of(cls, MutableSequence)


def _is_dict_type(cls: Any) -> bool:
    return _is_container_of(cls, MutableMapping)


def serialize_body(body: Any) -> Any:
    """Serialize a request body to a JSON-compatible value.

    Supports:
    - None, dict, list, primitives (passed through)
    - Pydantic v2 models (model_dump)
    - Objects with to_json() or to_dict() method (duck typing)
    - Nested objects inside containers are recursively serialized

    Raises:
        ValueError: If body is str or bytes at top level (use with_body for raw text)
        TypeError: If body type is not supported
    """
    if body is None:
        return None
    if isinstance(body, (str, bytes)):
        raise ValueError("str and bytes data is not supported")
    return _serialize_value(body)


def _serialize_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, bytes):
        raise ValueError("bytes data is not supported")
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(item) for item in value]
    if hasattr(value, "model_dump") and callable(value.model_dump):  # Pydantic v2
        return _serialize_value(value.model_dump(mode="json"))
    if hasattr(value, "to_json") and callable(value.to_json):
        return _serialize_value(value.to_json())
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return _serialize_value(value.to_dict())
    raise TypeError(
        f"Cannot serialize value of type {type(value).__name__}. Expected dict, list, primitive, or Serializable."
    )


def dumps(body: Any) -> str:
    """Serialize ``body`` and encode it as a JSON string."""
    return json.dumps(serialize_body(body))


def deserialize(data: Any, cls: Optional[Type] = None) -> Any:
    """Convert decoded JSON into ``cls``.

    Args:
        data: Decoded JSON (dict, list or primitive)
        cls: Optional target type. dict/list types return the data as-is,
            ``List[Model]`` deserializes each item, anything else goes through
            ``_deserialize_object``.

    Returns:
        Deserialized data
    """
    if cls is None or _is_dict_type(cls):
        return data

    if _is_list_type(cls):
        if not isinstance(data, list):
            raise TypeError(f"Expected a JSON array, got {type(data).__name__}")
        args = getattr(cls, "__args__", ())
        if not args:
            return data
        inner_cls = args[0]
        if inner_cls in (dict, list, str, int, float, bool) or _is_dict_type(inner_cls) or _is_list_type(inner_cls):
            return data
        return [_deserialize_object(item, inner_cls) for item in data]

    if cls in (str, int, float, bool):
        if not isinstance(data, cls):
            raise TypeError(f"Expected {cls.__name__}, got {type(data).__name__}")
        return data

    return _deserialize_object(data, cls)


def _deserialize_object(data: Any, cls: Type) -> Any:
    """Deserialize a single object using duck-typed methods.

    Supports:
    - Pydantic v2 models (model_validate)
    - Classes with from_dict() class method
    - Classes with from_json() class method
    """
    if hasattr(cls, "model_validate") and callable(cls.model_validate):  # Pydantic v2
        return cls.model_validate(data)

    if hasattr(cls, "from_dict") and callable(cls.from_dict):
        return cls.from_dict(data)

    if hasattr(cls, "from_json") and callable(cls.from_json):
        return cls.from_json(data)

    raise TypeError(
        f"Cannot deserialize to {cls.__name__}. "
        f"Class must have model_validate(), from_dict(), or from_json() class method."
    )
