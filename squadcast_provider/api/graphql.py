"""Build GraphQL operations from pydantic models.

The selection set of an operation is derived from the response model: each
field is selected under its JSON alias and nested models expand into nested
selections. Fields declared with ``tf_field(..., graphql=False)`` are left out.
"""

from __future__ import annotations

from typing import Any, get_origin

from pydantic import BaseModel

from ..tf.codec import element_type, is_model, unwrap_optional


def _is_selected(info: Any) -> bool:
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    return extra.get("graphql", True) is not False


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    annotation = unwrap_optional(annotation)
    if get_origin(annotation) in (list, tuple, set):
        annotation = unwrap_optional(element_type(annotation))
    return annotation if is_model(annotation) else None


def selection_set(model: type[BaseModel]) -> str:
    """``{ ID name owner { ID type } }`` for the given model."""
    parts = []
    for name, info in model.model_fields.items():
        if not _is_selected(info):
            continue
        key = info.alias or name
        nested = _nested_model(info.annotation)
        if nested is not None:
            parts.append(f"{key} {selection_set(nested)}")
        else:
            parts.append(key)
    return "{ " + " ".join(parts) + " }"


def build_operation(
    kind: str,
    field_call: str,
    model: type[BaseModel],
    var_types: dict[str, str],
) -> str:
    """Render a full operation.

    Example:
        build_operation("mutation", "deleteSchedule(ID: $ID)", Schedule, {"ID": "Int!"})
        -> 'mutation ($ID: Int!) { deleteSchedule(ID: $ID) { ID name ... } }'
    """
    if kind not in ("query", "mutation"):
        raise ValueError(f"Unknown GraphQL operation kind: {kind}")
    declarations = ""
    if var_types:
        declarations = " (" + ", ".join(f"${k}: {v}" for k, v in var_types.items()) + ")"
    return f"{kind}{declarations} {{ {field_call} {selection_set(model)} }}"


def field_name(field_call: str) -> str:
    """``createSchedule(input: $input)`` -> ``createSchedule``."""
    return field_call.split("(", 1)[0].strip()
