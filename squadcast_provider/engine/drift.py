"""Compare desired attributes against the remote state of a resource."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tf import UNKNOWN, Attribute, Block, Resource, Type

M = dict[str, Any]


@dataclass
class AttributeChange:
    """One attribute whose remote value differs from the configuration."""

    name: str
    before: Any
    after: Any
    force_new: bool = False

    def __str__(self) -> str:
        marker = " # forces replacement" if self.force_new else ""
        return f"{self.name}: {self.before!r} -> {self.after!r}{marker}"


def detect_drift(resource: Resource, desired: M, state: M) -> list[AttributeChange]:
    """Attributes the user configured whose value differs from state.

    Computed-only attributes are never compared. Optional attributes that are
    also computed are only compared when the configuration sets them.
    """
    desired = resource.apply_defaults(desired)
    changes: list[AttributeChange] = []
    for name, attr in resource.schema.items():
        if name == "id" or not attr.configurable:
            continue
        value = desired.get(name)
        if value is None and attr.computed:
            continue
        if _differs(attr, value, state.get(name)):
            changes.append(AttributeChange(
                name=name,
                before=attr.normalize(state.get(name)),
                after=attr.normalize(value),
                force_new=attr.force_new,
            ))
    return changes


def requires_replace(changes: list[AttributeChange]) -> bool:
    return any(c.force_new for c in changes)


def _differs(attr: Attribute, desired: Any, actual: Any) -> bool:
    if desired is UNKNOWN:
        return True
    if isinstance(attr.elem, Block):
        wanted = attr.normalize(desired)
        have = attr.normalize(actual)
        if len(wanted) != len(have):
            return True
        return any(_block_differs(attr.elem, w, h) for w, h in zip(wanted, have))

    after = attr.normalize(desired)
    before = attr.normalize(actual)
    if attr.type == Type.SET:
        return sorted(map(repr, after)) != sorted(map(repr, before))
    return after != before


def _block_differs(block: Block, desired: M, actual: M) -> bool:
    for name, attr in block.schema.items():
        if not attr.configurable:
            continue
        value = desired.get(name)
        if attr.computed and value == attr.zero():
            continue
        if _differs(attr, value, actual.get(name)):
            return True
    return False
