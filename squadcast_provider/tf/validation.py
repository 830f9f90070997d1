"""Attribute validators.

A validator takes the (already type-coerced) value and its attribute path and
returns a list of error messages; an empty list means the value is valid.
"""

from __future__ import annotations

import re
from typing import Any

from .schema import Validator

_OBJECT_ID = re.compile(r"^[0-9a-fA-F]{24}$")


def string_in_slice(valid: list[str], ignore_case: bool = False) -> Validator:
    """Value must be one of ``valid``."""

    def validate(value: Any, path: str) -> list[str]:
        if not isinstance(value, str):
            return [f"expected type of {path} to be string"]
        for v in valid:
            if value == v or (ignore_case and value.lower() == v.lower()):
                return []
        return [f"expected {path} to be one of {valid!r}, got {value}"]

    return validate


def int_between(lo: int, hi: int) -> Validator:
    """Value must be an integer in [lo, hi]."""

    def validate(value: Any, path: str) -> list[str]:
        if not isinstance(value, int) or isinstance(value, bool):
            return [f"expected type of {path} to be integer"]
        if value < lo or value > hi:
            return [f"expected {path} to be in the range ({lo} - {hi}), got {value}"]
        return []

    return validate


def string_len_between(lo: int, hi: int) -> Validator:
    """String length must be in [lo, hi]."""

    def validate(value: Any, path: str) -> list[str]:
        if not isinstance(value, str):
            return [f"expected type of {path} to be string"]
        if len(value) < lo or len(value) > hi:
            return [f"expected length of {path} to be in the range ({lo} - {hi}), got {value}"]
        return []

    return validate


def validate_object_id(value: Any, path: str) -> list[str]:
    """Value must be a 24 character hexadecimal object id."""
    if not isinstance(value, str):
        return [f"expected type of {path} to be string"]
    if not _OBJECT_ID.match(value):
        return [f"invalid object id for {path}: {value!r}"]
    return []
