"""Plan changes: refresh state, read data sources and diff against configuration."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..api.client import Client
from ..errors import ConfigError, SquadcastError
from ..provider import Provider
from ..tf import Diagnostic, Resource, error, has_errors
from .configuration import (
    Configuration,
    ResourceConfig,
    contains_unknown,
    references,
    resolve,
    split_address,
)
from .drift import AttributeChange, detect_drift, requires_replace
from .state import ResourceState, State

logger = logging.getLogger(__name__)

M = dict[str, Any]


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"
    NOOP = "no-op"
    READ = "read"


@dataclass
class Change:
    """A planned action on one resource address."""

    address: str
    type: str
    name: str
    action: Action
    attributes: list[AttributeChange] = field(default_factory=list)
    config: M = field(default_factory=dict)
    prior: ResourceState | None = None
    depends_on: set[str] = field(default_factory=set)
    reason: str = ""

    @property
    def is_data(self) -> bool:
        return self.address.startswith("data.")


@dataclass
class Plan:
    changes: list[Change] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    state: State = field(default_factory=State)
    data_values: dict[str, M] = field(default_factory=dict)
    drifted: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    @property
    def has_changes(self) -> bool:
        return any(c.action not in (Action.NOOP, Action.READ) for c in self.changes)

    def summary(self) -> dict[str, int]:
        counts = {"add": 0, "change": 0, "destroy": 0}
        for c in self.changes:
            if c.action in (Action.CREATE, Action.REPLACE):
                counts["add"] += 1
            if c.action == Action.UPDATE:
                counts["change"] += 1
            if c.action in (Action.DELETE, Action.REPLACE):
                counts["destroy"] += 1
        return counts


def _normalized_state(resource: Resource, attributes: M) -> M:
    normalized = resource.block.normalize(attributes)
    normalized.pop("id", None)
    return normalized


def read_data_source(resource: Resource, attributes: M, client: Client) -> M:
    """Run a data source read and return its values, id included."""
    data = resource.data(config=attributes)
    resource.read(data, client)
    return {**data.state(), "id": data.id()}


class Planner:
    """Computes plans for a configuration against state.

    The client may be omitted for validation only.

    Example:
        planner = Planner(Provider(), client)
        plan = planner.plan(Configuration.load("main.yaml"), State.load("squadcast.state.yaml"))
    """

    def __init__(self, provider: Provider, client: Client | None = None):
        self.provider = provider
        self.client = client

    def _resource(self, block: ResourceConfig) -> Resource:
        if block.is_data:
            return self.provider.data_source(block.type)
        return self.provider.resource(block.type)

    def _schema_for(self, address: str) -> Resource:
        is_data, type_name, _ = split_address(address)
        if is_data:
            return self.provider.data_source(type_name)
        return self.provider.resource(type_name)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, config: Configuration) -> list[Diagnostic]:
        """Schema-check every block; references are treated as unknown values."""
        diags: list[Diagnostic] = []
        try:
            config.dependency_order()
        except ConfigError as e:
            diags.append(error(str(e)))

        for block in config.blocks():
            try:
                resource = self._resource(block)
            except ConfigError as e:
                diags.append(error(str(e), block.address))
                continue

            for address, attr in sorted(references(block.attributes)):
                target = config.get(address)
                if target is None:
                    continue
                try:
                    schema = self._schema_for(address).schema
                except ConfigError:
                    continue
                if attr != "id" and attr not in schema:
                    diags.append(error(
                        f'Unsupported attribute "{attr}" on {address}', block.address
                    ))

            attributes = resolve(block.attributes, {})
            for d in resource.validate(attributes):
                d.attribute = f"{block.address}.{d.attribute}" if d.attribute else block.address
                diags.append(d)
        return diags

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def _require_client(self) -> Client:
        if self.client is None:
            raise ConfigError("A configured provider is required for this operation")
        return self.client

    def refresh(self, state: State) -> tuple[State, list[str], list[Diagnostic]]:
        """Read every managed resource back from the API.

        Returns the refreshed state, the addresses that drifted (changed or
        deleted outside of this tool) and any diagnostics.
        """
        client = self._require_client()
        refreshed = State(version=state.version)
        drifted: list[str] = []
        diags: list[Diagnostic] = []

        for prior in state.resources:
            try:
                resource = self.provider.resource(prior.type)
            except ConfigError as e:
                diags.append(error(str(e), prior.address))
                refreshed.put(prior)
                continue

            data = resource.data(state=prior.attributes, id=prior.id)
            try:
                resource.read(data, client)
            except SquadcastError as e:
                diags.append(error(f"Error refreshing: {e}", prior.address))
                refreshed.put(prior)
                continue

            if not data.id():
                logger.warning("%s has been deleted outside of squadcast-provider", prior.address)
                drifted.append(prior.address)
                continue

            current = ResourceState(
                type=prior.type, name=prior.name, id=data.id(), attributes=data.state()
            )
            if current.attributes != _normalized_state(resource, prior.attributes):
                logger.info("%s has changed outside of squadcast-provider", prior.address)
                drifted.append(prior.address)
            refreshed.put(current)
        return refreshed, drifted, diags

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, config: Configuration, state: State, refresh: bool = True) -> Plan:
        plan = Plan(diagnostics=self.validate(config))
        if plan.has_errors:
            plan.state = copy.deepcopy(state)
            return plan

        if refresh:
            plan.state, plan.drifted, diags = self.refresh(state)
            plan.diagnostics.extend(diags)
        else:
            plan.state = copy.deepcopy(state)

        values: dict[str, M] = {r.address: r.values() for r in plan.state.resources}
        order = config.dependency_order()

        for address in order:
            block = config.get(address)
            if block is None:
                continue
            depends_on = config.dependencies(address)
            if block.is_data:
                self._plan_data(plan, block, depends_on, values)
            else:
                self._plan_resource(plan, block, depends_on, values, state)

        configured = set(order)
        for prior in reversed(plan.state.resources):
            if prior.address not in configured:
                plan.changes.append(Change(
                    address=prior.address,
                    type=prior.type,
                    name=prior.name,
                    action=Action.DELETE,
                    prior=prior,
                    reason="not in configuration",
                ))
        return plan

    def _plan_data(self, plan: Plan, block: ResourceConfig, depends_on: set[str], values: dict[str, M]) -> None:
        resource = self._resource(block)
        attributes = resolve(block.attributes, values)
        change = Change(
            address=block.address,
            type=block.type,
            name=block.name,
            action=Action.READ,
            config=block.attributes,
            depends_on=depends_on,
        )
        if contains_unknown(attributes):
            change.reason = "configuration depends on values not yet known"
            plan.changes.append(change)
            return

        try:
            result = read_data_source(resource, attributes, self._require_client())
        except SquadcastError as e:
            plan.diagnostics.append(error(f"Error reading data source: {e}", block.address))
            return
        values[block.address] = result
        plan.data_values[block.address] = result
        plan.changes.append(change)

    def _plan_resource(
        self,
        plan: Plan,
        block: ResourceConfig,
        depends_on: set[str],
        values: dict[str, M],
        original: State,
    ) -> None:
        resource = self._resource(block)
        attributes = resolve(block.attributes, values)
        prior = plan.state.get(block.address)
        change = Change(
            address=block.address,
            type=block.type,
            name=block.name,
            action=Action.NOOP,
            config=block.attributes,
            prior=prior,
            depends_on=depends_on,
        )

        if prior is None:
            change.action = Action.CREATE
            change.attributes = detect_drift(resource, attributes, {})
            if original.get(block.address) is not None:
                change.reason = "deleted outside of squadcast-provider"
            values.pop(block.address, None)
        else:
            change.attributes = detect_drift(resource, attributes, prior.attributes)
            if not change.attributes:
                change.action = Action.NOOP
            elif requires_replace(change.attributes):
                change.action = Action.REPLACE
                values.pop(block.address, None)
            else:
                change.action = Action.UPDATE
                known = {k: v for k, v in attributes.items() if not contains_unknown(v)}
                values[block.address] = {**prior.values(), **known}
        plan.changes.append(change)

    def plan_destroy(self, config: Configuration | None, state: State) -> Plan:
        """Plan the deletion of everything in state, dependents first."""
        plan = Plan(state=copy.deepcopy(state))
        order: list[str] = []
        if config is not None:
            try:
                order = [a for a in config.dependency_order() if not a.startswith("data.")]
            except ConfigError as e:
                plan.diagnostics.append(error(str(e)))
        rank = {address: i for i, address in enumerate(order)}
        in_state = list(plan.state.resources)
        # unknown addresses go first; configured ones in reverse dependency order
        in_state.sort(key=lambda r: -rank.get(r.address, len(order)))
        for prior in in_state:
            plan.changes.append(Change(
                address=prior.address,
                type=prior.type,
                name=prior.name,
                action=Action.DELETE,
                prior=prior,
                reason="destroy",
            ))
        return plan
