"""Squadcast resources and data sources."""

from .importing import parse_2part_import_id, parse_3part_import_id
from .provider import Provider

__all__ = [
    "Provider",
    "parse_2part_import_id",
    "parse_3part_import_id",
]
