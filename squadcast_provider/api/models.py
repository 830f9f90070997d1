"""Base class for API structures."""

from typing import Any, get_origin

from pydantic import BaseModel, ValidationInfo, field_validator


class Model(BaseModel):
    """API structure: JSON names as aliases, attribute names in ``tf_field``.

    Instances can be built with python field names (as decoding does) or
    with JSON names (as API responses do).
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _null_collections(cls, value: Any, info: ValidationInfo) -> Any:
        # the API sends null for empty lists and maps
        if value is None and info.field_name is not None:
            origin = get_origin(cls.model_fields[info.field_name].annotation)
            if origin is list:
                return []
            if origin is dict:
                return {}
        return value
