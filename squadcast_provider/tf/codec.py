"""Map typed API structures to and from configuration trees.

A configuration tree is what resources read from and write to state: plain
dicts, lists and scalars keyed by attribute name. API structures are pydantic
models whose fields carry their attribute name in ``tf_field(...)`` metadata.

Nested models are flattened the way nested blocks are represented in a
configuration tree: a single nested object becomes a one-element list of maps,
a list of objects becomes a list of maps.
"""

from __future__ import annotations

import types
import typing
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, Union, get_args, get_origin

from pydantic import BaseModel, Field, ValidationError

from ..errors import DecodeError

if TYPE_CHECKING:
    from .schema import ResourceData

M = dict[str, Any]

TF_SKIP = "-"


class Encoder(Protocol):
    """A model that post-processes its own encoding."""

    def encode(self) -> M: ...


def tf_field(tf_name: str | None = None, *, graphql: bool = True, **kwargs: Any) -> Any:
    """Declare a model field together with its attribute name.

    ``tf_name="-"`` keeps the field out of configuration trees. ``graphql=False``
    keeps it out of generated GraphQL selection sets.
    """
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    if tf_name is not None:
        extra["tf"] = tf_name
    if not graphql:
        extra["graphql"] = False
    return Field(json_schema_extra=extra, **kwargs)


def field_tf_name(name: str, info: Any) -> str:
    """Attribute name for a pydantic FieldInfo (python name when unset)."""
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    return extra.get("tf", name)


# ---------------------------------------------------------------------------
# Type introspection
# ---------------------------------------------------------------------------


def unwrap_optional(annotation: Any) -> Any:
    """``X | None`` -> ``X``; anything else unchanged."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def is_optional(annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return type(None) in get_args(annotation)
    return False


def is_model(annotation: Any) -> bool:
    if get_origin(annotation) is not None:
        return False
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def is_enum(annotation: Any) -> bool:
    if get_origin(annotation) is not None:
        return False
    return isinstance(annotation, type) and issubclass(annotation, Enum)


def element_type(annotation: Any) -> Any:
    """Element type of list[X] / dict[str, X]; Any when not parameterized."""
    args = get_args(unwrap_optional(annotation))
    if not args:
        return Any
    return args[-1]


def zero_value(annotation: Any) -> Any:
    """The value an unset field of this type takes in a configuration tree."""
    annotation = unwrap_optional(annotation)
    origin = get_origin(annotation) or annotation
    if origin in (list, tuple, set) or is_model(annotation):
        return []
    if origin is dict:
        return {}
    if is_enum(annotation):
        return ""
    if annotation is bool:
        return False
    if annotation is int:
        return 0
    if annotation is float:
        return 0.0
    if annotation is str:
        return ""
    return None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode(obj: BaseModel) -> M:
    """Generic encoding of a model into a configuration tree node.

    This never calls the model's own ``encode()``; use :func:`encode_model`
    for that.
    """
    m: M = {}
    for name, info in type(obj).model_fields.items():
        tf_name = field_tf_name(name, info)
        if tf_name == TF_SKIP:
            continue
        m[tf_name] = _encode_value(getattr(obj, name), info.annotation)
    return m


def encode_model(obj: BaseModel) -> M:
    """Encode a model, going through its ``encode()`` when it has one."""
    custom = getattr(obj, "encode", None)
    if callable(custom):
        return custom()
    return encode(obj)


def encode_slice(items: typing.Iterable[BaseModel] | None) -> list[M]:
    """Encode every item of a list of models."""
    return [encode_model(item) for item in items or []]


def _encode_value(value: Any, annotation: Any) -> Any:
    if value is None:
        return zero_value(annotation)
    if isinstance(value, BaseModel):
        # single nested object -> one-element list
        return [encode_model(value)]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set)):
        elem = element_type(annotation)
        return [_encode_element(v, elem) for v in value]
    if isinstance(value, dict):
        elem = element_type(annotation)
        return {str(k): _encode_element(v, elem) for k, v in value.items()}
    return value


def _encode_element(value: Any, annotation: Any) -> Any:
    if isinstance(value, BaseModel):
        return encode_model(value)
    return _encode_value(value, annotation)


def encode_and_set(obj: BaseModel, data: ResourceData) -> None:
    """Encode obj and copy every attribute the resource schema knows into data."""
    m = encode_model(obj)
    for key, value in m.items():
        if key == "id":
            if value not in (None, "", 0):
                data.set_id(str(value))
            continue
        if data.has_attribute(key):
            data.set(key, value)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode(data: Any, type_: Any) -> Any:
    """Decode a configuration tree value into ``type_``.

    ``type_`` may be a model class, ``list[Model]``, ``dict[str, X]`` or a
    scalar type. Keys unknown to the model are ignored.
    """
    try:
        return _decode_value(data, type_, "")
    except DecodeError:
        raise
    except (ValueError, TypeError, ValidationError) as e:
        raise DecodeError(f"cannot decode {type_!r}: {e}") from e


def _decode_value(value: Any, annotation: Any, path: str) -> Any:
    optional = is_optional(annotation)
    annotation = unwrap_optional(annotation)

    if value is None:
        return None if optional else zero_value(annotation)
    if annotation is Any:
        return value

    origin = get_origin(annotation)

    if origin in (list, tuple, set):
        if not isinstance(value, (list, tuple, set)):
            raise DecodeError(f"{path or 'value'}: expected a list, got {type(value).__name__}")
        elem = element_type(annotation)
        return [_decode_value(v, elem, f"{path}[{i}]") for i, v in enumerate(value)]

    if origin is dict:
        if not isinstance(value, dict):
            raise DecodeError(f"{path or 'value'}: expected a map, got {type(value).__name__}")
        elem = element_type(annotation)
        return {str(k): _decode_value(v, elem, f"{path}.{k}") for k, v in value.items()}

    if is_model(annotation):
        return _decode_model(value, annotation, path, optional)

    if is_enum(annotation):
        return annotation(value)

    return _coerce_scalar(value, annotation, path)


def _decode_model(value: Any, model: type[BaseModel], path: str, optional: bool) -> Any:
    if isinstance(value, (list, tuple)):
        # nested block: zero or one element
        if len(value) == 0:
            return None if optional else model()
        if len(value) > 1:
            raise DecodeError(f"{path or 'value'}: expected at most one block, got {len(value)}")
        value = value[0]
    if isinstance(value, BaseModel):
        return value
    if not isinstance(value, dict):
        raise DecodeError(f"{path or 'value'}: expected a map, got {type(value).__name__}")

    kwargs: dict[str, Any] = {}
    for name, info in model.model_fields.items():
        tf_name = field_tf_name(name, info)
        if tf_name == TF_SKIP or tf_name not in value:
            continue
        child = f"{path}.{tf_name}" if path else tf_name
        kwargs[name] = _decode_value(value[tf_name], info.annotation, child)
    return model(**kwargs)


def _coerce_scalar(value: Any, annotation: Any, path: str) -> Any:
    if annotation is int and not isinstance(value, bool):
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value) if value.strip() else 0
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise DecodeError(f"{path or 'value'}: expected an integer, got {value!r}")
    if annotation is float and isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return float(value) if value != "" else 0.0
    if annotation is str and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if annotation is bool and isinstance(value, str):
        if value.lower() in ("true", "1"):
            return True
        if value.lower() in ("false", "0", ""):
            return False
        raise DecodeError(f"{path or 'value'}: expected a boolean, got {value!r}")
    return value
