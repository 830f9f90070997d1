"""Configuration files: provider settings, managed resources and data sources."""

from __future__ import annotations

import re
from graphlib import CycleError, TopologicalSorter
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError
from ..tf import UNKNOWN

# ${squadcast_schedule_v2.primary.id} or ${data.squadcast_team.core.id}
REFERENCE = re.compile(r"^\$\{((?:data\.)?[a-z][a-z0-9_]*\.[A-Za-z0-9_-]+)\.([a-z][a-z0-9_]*)\}$")

DATA_PREFIX = "data."


class ResourceConfig(BaseModel):
    """One ``resources:`` entry."""

    type: str
    name: str
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"

    @property
    def is_data(self) -> bool:
        return False


class DataConfig(ResourceConfig):
    """One ``data:`` entry."""

    @property
    def address(self) -> str:
        return f"{DATA_PREFIX}{self.type}.{self.name}"

    @property
    def is_data(self) -> bool:
        return True


def parse_reference(value: Any) -> tuple[str, str] | None:
    """``"${squadcast_team.core.id}"`` -> ``("squadcast_team.core", "id")``."""
    if not isinstance(value, str):
        return None
    match = REFERENCE.match(value.strip())
    if not match:
        return None
    return match.group(1), match.group(2)


def references(value: Any) -> set[tuple[str, str]]:
    """Every (address, attribute) referenced anywhere inside value."""
    found: set[tuple[str, str]] = set()
    if isinstance(value, dict):
        for v in value.values():
            found |= references(v)
    elif isinstance(value, list):
        for v in value:
            found |= references(v)
    else:
        ref = parse_reference(value)
        if ref:
            found.add(ref)
    return found


def resolve(value: Any, values: dict[str, dict[str, Any]]) -> Any:
    """Replace references with known values.

    A reference to something without a known value yet resolves to UNKNOWN.
    """
    if isinstance(value, dict):
        return {k: resolve(v, values) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve(v, values) for v in value]
    ref = parse_reference(value)
    if ref is None:
        return value
    address, attr = ref
    known = values.get(address)
    if known is None or known.get(attr) is None:
        return UNKNOWN
    return known[attr]


def contains_unknown(value: Any) -> bool:
    if value is UNKNOWN:
        return True
    if isinstance(value, dict):
        return any(contains_unknown(v) for v in value.values())
    if isinstance(value, list):
        return any(contains_unknown(v) for v in value)
    return False


def split_address(address: str) -> tuple[bool, str, str]:
    """``data.squadcast_team.core`` -> ``(True, "squadcast_team", "core")``."""
    is_data = address.startswith(DATA_PREFIX)
    rest = address[len(DATA_PREFIX):] if is_data else address
    parts = rest.split(".")
    if len(parts) != 2 or not all(parts):
        raise ConfigError(f"Invalid resource address {address!r}, expected TYPE.NAME")
    return is_data, parts[0], parts[1]


class Configuration(BaseModel):
    """Desired infrastructure, usually loaded from ``main.yaml``.

    Example:
        provider:
          region: eu
        data:
          - type: squadcast_team
            name: core
            attributes: {name: Default Team}
        resources:
          - type: squadcast_runbook
            name: restart
            attributes:
              team_id: ${data.squadcast_team.core.id}
              name: Restart
              steps: [{content: systemctl restart app}]
    """

    provider: dict[str, Any] = Field(default_factory=dict)
    resources: list[ResourceConfig] = Field(default_factory=list)
    data: list[DataConfig] = Field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path) -> Configuration:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        with open(path) as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse {path}: {e}") from e
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Configuration:
        if not isinstance(raw, dict):
            raise ConfigError("Configuration must be a mapping")
        try:
            config = cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        seen: set[str] = set()
        for block in config.blocks():
            if block.address in seen:
                raise ConfigError(f"Duplicate resource {block.address!r}")
            seen.add(block.address)
        return config

    def blocks(self) -> list[ResourceConfig]:
        """Data sources followed by managed resources."""
        return [*self.data, *self.resources]

    def get(self, address: str) -> ResourceConfig | None:
        for block in self.blocks():
            if block.address == address:
                return block
        return None

    def addresses(self) -> list[str]:
        return [block.address for block in self.blocks()]

    def dependencies(self, address: str) -> set[str]:
        block = self.get(address)
        if block is None:
            raise ConfigError(f"Unknown resource {address!r}")
        return {ref for ref, _ in references(block.attributes)}

    def dependency_order(self) -> list[str]:
        """Addresses ordered so that every reference comes before its user."""
        known = set(self.addresses())
        sorter: TopologicalSorter[str] = TopologicalSorter()
        for block in self.blocks():
            deps = self.dependencies(block.address)
            missing = sorted(deps - known)
            if missing:
                raise ConfigError(
                    f"Reference to undeclared resource {missing[0]!r} in {block.address}"
                )
            sorter.add(block.address, *sorted(deps))
        try:
            return list(sorter.static_order())
        except CycleError as e:
            cycle = " -> ".join(e.args[1]) if len(e.args) > 1 else ""
            raise ConfigError(f"Cycle between resources: {cycle}") from e
