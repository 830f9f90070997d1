"""Declarative resource schemas and the per-resource data handlers work on."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

from ..errors import ResourceError

if TYPE_CHECKING:
    from ..api.client import Client

M = dict[str, Any]

Validator = Callable[[Any, str], list[str]]


class Unknown:
    """Placeholder for a value that is only known after apply."""

    _instance: Unknown | None = None

    def __new__(cls) -> Unknown:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "(known after apply)"

    def __deepcopy__(self, memo: dict) -> Unknown:
        return self


UNKNOWN = Unknown()


class Type(str, Enum):
    STRING = "string"
    INT = "int"
    BOOL = "bool"
    FLOAT = "float"
    LIST = "list"
    SET = "set"
    MAP = "map"


@dataclass
class Diagnostic:
    """A problem found while validating or running a resource."""

    severity: str
    summary: str
    attribute: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        if self.attribute:
            return f"{self.severity}: {self.summary} ({self.attribute})"
        return f"{self.severity}: {self.summary}"


def error(summary: str, attribute: str = "") -> Diagnostic:
    return Diagnostic(severity="error", summary=summary, attribute=attribute)


def has_errors(diags: list[Diagnostic]) -> bool:
    return any(d.is_error for d in diags)


@dataclass
class Attribute:
    """Schema of a single attribute."""

    type: Type
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    default: Any = None
    force_new: bool = False
    sensitive: bool = False
    min_items: int = 0
    max_items: int = 0
    validators: list[Validator] = field(default_factory=list)
    elem: Union[Attribute, Block, None] = None

    @property
    def configurable(self) -> bool:
        return self.required or self.optional

    @property
    def is_block(self) -> bool:
        return isinstance(self.elem, Block)

    def zero(self) -> Any:
        return {
            Type.STRING: "",
            Type.INT: 0,
            Type.BOOL: False,
            Type.FLOAT: 0.0,
            Type.LIST: [],
            Type.SET: [],
            Type.MAP: {},
        }[self.type]

    def coerce(self, value: Any) -> Any:
        """Coerce a scalar to this attribute's type; TypeError when impossible."""
        if self.type == Type.STRING:
            if isinstance(value, str):
                return value
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return str(value)
        elif self.type == Type.INT:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lstrip("-").isdigit():
                return int(value)
            if isinstance(value, float) and value.is_integer():
                return int(value)
        elif self.type == Type.FLOAT:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        elif self.type == Type.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in ("true", "false"):
                return value.lower() == "true"
        else:
            return value
        raise TypeError(f"expected {self.type.value}, got {type(value).__name__}")

    def normalize(self, value: Any) -> Any:
        """Canonical form used for state and comparisons.

        Missing values become zero values; nested blocks keep exactly the keys
        their schema declares.
        """
        if value is UNKNOWN:
            return value
        if value is None:
            return self.zero()
        if self.type in (Type.LIST, Type.SET):
            items = value if isinstance(value, (list, tuple, set)) else [value]
            if isinstance(self.elem, Block):
                return [self.elem.normalize(item) for item in items]
            if isinstance(self.elem, Attribute):
                return [self.elem.normalize(item) for item in items]
            return list(items)
        if self.type == Type.MAP:
            elem = self.elem if isinstance(self.elem, Attribute) else Attribute(Type.STRING)
            return {str(k): elem.normalize(v) for k, v in dict(value).items()}
        try:
            return self.coerce(value)
        except TypeError:
            return value

    def validate(self, value: Any, path: str) -> list[Diagnostic]:
        if value is UNKNOWN:
            return []
        if self.type in (Type.LIST, Type.SET):
            return self._validate_list(value, path)
        if self.type == Type.MAP:
            return self._validate_map(value, path)
        try:
            value = self.coerce(value)
        except TypeError as e:
            return [error(f"Incorrect attribute value type: {e}", path)]
        return [error(msg, path) for v in self.validators for msg in v(value, path)]

    def _validate_list(self, value: Any, path: str) -> list[Diagnostic]:
        if not isinstance(value, (list, tuple)):
            return [error(f"Incorrect attribute value type: expected a list, got {type(value).__name__}", path)]
        diags: list[Diagnostic] = []
        if self.min_items and len(value) < self.min_items:
            diags.append(error(f"Attribute requires {self.min_items} item minimum, but config has only {len(value)} declared", path))
        if self.max_items and len(value) > self.max_items:
            diags.append(error(f"Attribute supports {self.max_items} item maximum, but config has {len(value)} declared", path))
        for i, item in enumerate(value):
            item_path = f"{path}.{i}"
            if isinstance(self.elem, Block):
                if not isinstance(item, dict):
                    diags.append(error("Incorrect attribute value type: expected a block", item_path))
                    continue
                diags.extend(self.elem.validate(item, item_path))
            elif isinstance(self.elem, Attribute):
                diags.extend(self.elem.validate(item, item_path))
        if self.type == Type.SET and not isinstance(self.elem, Block):
            if len({repr(v) for v in value}) != len(value):
                diags.append(error("Set contains duplicate values", path))
        return diags

    def _validate_map(self, value: Any, path: str) -> list[Diagnostic]:
        if not isinstance(value, dict):
            return [error(f"Incorrect attribute value type: expected a map, got {type(value).__name__}", path)]
        elem = self.elem if isinstance(self.elem, Attribute) else Attribute(Type.STRING)
        diags: list[Diagnostic] = []
        for k, v in value.items():
            diags.extend(elem.validate(v, f"{path}.{k}"))
        return diags


@dataclass
class Block:
    """A nested set of attributes."""

    schema: dict[str, Attribute]

    def validate(self, config: M, path: str = "") -> list[Diagnostic]:
        diags: list[Diagnostic] = []
        for key in config:
            if key not in self.schema:
                diags.append(error(f'An argument named "{key}" is not expected here', _join(path, key)))

        for name, attr in self.schema.items():
            attr_path = _join(path, name)
            value = config.get(name)
            if value is None:
                if attr.required:
                    diags.append(error(f'The argument "{name}" is required, but no definition was found', attr_path))
                continue
            if not attr.configurable:
                diags.append(error(f'Value for unconfigurable attribute "{name}"', attr_path))
                continue
            diags.extend(attr.validate(value, attr_path))
        return diags

    def apply_defaults(self, config: M) -> M:
        """Copy of config with schema defaults filled in, nested blocks included."""
        result = copy.deepcopy(config)
        for name, attr in self.schema.items():
            value = result.get(name)
            if value is None:
                if attr.default is not None:
                    result[name] = copy.deepcopy(attr.default)
                continue
            if isinstance(attr.elem, Block) and isinstance(value, list):
                result[name] = [
                    attr.elem.apply_defaults(item) if isinstance(item, dict) else item
                    for item in value
                ]
        return result

    def normalize(self, value: Any) -> M:
        value = value if isinstance(value, dict) else {}
        return {name: attr.normalize(value.get(name)) for name, attr in self.schema.items()}


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


Handler = Callable[["ResourceData", "Client"], None]
Importer = Callable[["ResourceData", "Client"], list["ResourceData"]]


@dataclass
class Resource:
    """A managed resource type or a data source."""

    description: str
    schema: dict[str, Attribute]
    read: Handler
    create: Handler | None = None
    update: Handler | None = None
    delete: Handler | None = None
    importer: Importer | None = None

    @property
    def block(self) -> Block:
        return Block(self.schema)

    @property
    def is_data_source(self) -> bool:
        return self.create is None

    def validate(self, config: M) -> list[Diagnostic]:
        return self.block.validate(config)

    def apply_defaults(self, config: M) -> M:
        return self.block.apply_defaults(config)

    def force_new_attributes(self) -> set[str]:
        return {name for name, attr in self.schema.items() if attr.force_new}

    def data(self, config: M | None = None, state: M | None = None, id: str = "") -> ResourceData:
        return ResourceData(self, config=config, state=state, id=id)


class ResourceData:
    """Attribute values of one resource instance.

    Handlers read values with :meth:`get` (set values, then configuration, then
    prior state) and write results with :meth:`set` / :meth:`set_id`. An empty
    id after a handler ran means the remote object no longer exists.
    """

    def __init__(
        self,
        resource: Resource,
        config: M | None = None,
        state: M | None = None,
        id: str = "",
    ):
        self.resource = resource
        self.config = resource.apply_defaults(config) if config is not None else {}
        self.prior = dict(state or {})
        self._set: M = {}
        self._id = id

    def id(self) -> str:
        return self._id

    def set_id(self, id: str) -> None:
        self._id = id

    def has_attribute(self, key: str) -> bool:
        return key in self.resource.schema

    def _attribute(self, key: str) -> Attribute:
        try:
            return self.resource.schema[key]
        except KeyError:
            raise ResourceError(f"Invalid address to set: {key!r}") from None

    def get(self, key: str) -> Any:
        attr = self._attribute(key)
        for source in (self._set, self.config, self.prior):
            if key in source and source[key] is not None:
                return attr.normalize(source[key])
        return attr.zero()

    def get_ok(self, key: str) -> tuple[Any, bool]:
        """Value and whether it is set to something other than its zero value."""
        value = self.get(key)
        return value, value != self._attribute(key).zero()

    def set(self, key: str, value: Any) -> None:
        attr = self._attribute(key)
        self._set[key] = attr.normalize(value)

    def has_change(self, key: str) -> bool:
        attr = self._attribute(key)
        if key not in self.config:
            return False
        return attr.normalize(self.config.get(key)) != attr.normalize(self.prior.get(key))

    def state(self) -> M:
        """All attribute values after the handler ran."""
        return {name: self.get(name) for name in self.resource.schema if name != "id"}
