"""Configuration tree encoding, resource schemas and validators."""

from .codec import (
    M,
    TF_SKIP,
    Encoder,
    decode,
    encode,
    encode_and_set,
    encode_model,
    encode_slice,
    tf_field,
)
from .schema import (
    Attribute,
    Block,
    Diagnostic,
    Resource,
    ResourceData,
    Type,
    UNKNOWN,
    error,
    has_errors,
)
from .validation import (
    int_between,
    string_in_slice,
    string_len_between,
    validate_object_id,
)

__all__ = [
    # Encoding
    "M",
    "TF_SKIP",
    "Encoder",
    "encode",
    "encode_model",
    "encode_slice",
    "encode_and_set",
    "decode",
    "tf_field",
    # Schema
    "Attribute",
    "Block",
    "Diagnostic",
    "Resource",
    "ResourceData",
    "Type",
    "UNKNOWN",
    "error",
    "has_errors",
    # Validators
    "int_between",
    "string_in_slice",
    "string_len_between",
    "validate_object_id",
]
