"""Local state: what was last applied or imported, keyed by address."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError

STATE_VERSION = 1


class ResourceState(BaseModel):
    type: str
    name: str
    id: str
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def address(self) -> str:
        return f"{self.type}.{self.name}"

    def values(self) -> dict[str, Any]:
        """Attributes plus id, the shape references resolve against."""
        return {**self.attributes, "id": self.id}


class State(BaseModel):
    """Managed resources and their last known attributes."""

    version: int = STATE_VERSION
    resources: list[ResourceState] = Field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path) -> State:
        """Load state from path; a missing file is an empty state."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path) as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse state file {path}: {e}") from e
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid state file {path}: {e}") from e

    def save(self, path: str | Path) -> None:
        """Write state next to path, then swap it in."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(f"{path.name}.tmp")
        with open(tmp, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
        tmp.replace(path)

    def get(self, address: str) -> ResourceState | None:
        for resource in self.resources:
            if resource.address == address:
                return resource
        return None

    def put(self, resource: ResourceState) -> None:
        """Insert or replace the entry with the same address."""
        for i, existing in enumerate(self.resources):
            if existing.address == resource.address:
                self.resources[i] = resource
                return
        self.resources.append(resource)

    def remove(self, address: str) -> ResourceState | None:
        for i, existing in enumerate(self.resources):
            if existing.address == address:
                return self.resources.pop(i)
        return None

    def addresses(self) -> list[str]:
        return [r.address for r in self.resources]
