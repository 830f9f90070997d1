"""Import identifier parsing."""

from __future__ import annotations

from ..errors import ImportIDError


def parse_2part_import_id(id: str) -> tuple[str, str]:
    """``teamID:ID`` -> (teamID, ID)."""
    parts = id.split(":", 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ImportIDError(
            f"unexpected format of import resource id ({id}), expected teamID:ID"
        )
    return parts[0], parts[1]


def parse_3part_import_id(id: str) -> tuple[str, str, str]:
    """``teamID:scheduleName:rotationName`` -> three parts."""
    parts = id.split(":", 2)
    if len(parts) != 3 or not all(parts):
        raise ImportIDError(
            f"unexpected format of import resource id ({id}), "
            "expected teamID:scheduleName:rotationName"
        )
    return parts[0], parts[1], parts[2]
