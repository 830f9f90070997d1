"""Execute plans, import existing objects and destroy managed resources."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..api.client import Client
from ..errors import ConfigError, ResourceError, SquadcastError
from ..provider import Provider
from ..tf import Diagnostic, ResourceData, error, has_errors
from .configuration import Configuration, contains_unknown, resolve, split_address
from .plan import Action, Change, Plan, Planner, read_data_source
from .state import ResourceState, State

logger = logging.getLogger(__name__)

M = dict[str, Any]


@dataclass
class ApplyResult:
    state: State
    applied: list[Change] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


class Applier:
    """Runs the changes of a plan against the API.

    Deletions run first, dependents before their dependencies. Everything else
    runs in dependency order with references resolved against the values
    produced so far. When ``state_path`` is set, state is written after every
    change so an interrupted apply keeps what it created.
    """

    def __init__(self, provider: Provider, client: Client, state_path: str | Path | None = None):
        self.provider = provider
        self.client = client
        self.state_path = state_path

    def _save(self, state: State) -> None:
        if self.state_path is not None:
            state.save(self.state_path)

    def apply(self, plan: Plan) -> ApplyResult:
        if plan.has_errors:
            raise ConfigError("Cannot apply a plan that has errors")

        result = ApplyResult(state=copy.deepcopy(plan.state))
        values: dict[str, M] = {r.address: r.values() for r in result.state.resources}
        values.update(plan.data_values)
        failed: set[str] = set()

        for change in plan.changes:
            if change.action == Action.DELETE:
                self._run(change, result, failed, lambda c=change: self._delete(c, result.state))

        for change in plan.changes:
            if change.action in (Action.DELETE, Action.NOOP):
                continue
            blocked = sorted(change.depends_on & failed)
            if blocked:
                failed.add(change.address)
                result.failed.append(change.address)
                result.diagnostics.append(error(
                    f"Skipped because {blocked[0]} failed", change.address
                ))
                continue
            if change.action == Action.READ:
                if change.address not in values:
                    self._run(change, result, failed, lambda c=change: self._read(c, values))
                continue
            self._run(change, result, failed, lambda c=change: self._write(c, result.state, values))

        self._save(result.state)
        return result

    def _run(self, change: Change, result: ApplyResult, failed: set[str], action: Any) -> None:
        try:
            action()
        except SquadcastError as e:
            logger.error("%s: %s failed: %s", change.address, change.action.value, e)
            failed.add(change.address)
            result.failed.append(change.address)
            result.diagnostics.append(error(str(e), change.address))
            return
        result.applied.append(change)
        self._save(result.state)

    def _read(self, change: Change, values: dict[str, M]) -> None:
        resource = self.provider.data_source(change.type)
        attributes = resolve(change.config, values)
        if contains_unknown(attributes):
            raise ResourceError("Data source configuration depends on unknown values")
        values[change.address] = read_data_source(resource, attributes, self.client)

    def _delete(self, change: Change, state: State) -> None:
        prior = change.prior or state.get(change.address)
        if prior is None:
            return
        resource = self.provider.resource(change.type)
        logger.info("%s: destroying id=%s", change.address, prior.id)
        data = resource.data(state=prior.attributes, id=prior.id)
        resource.delete(data, self.client)
        state.remove(change.address)

    def _write(self, change: Change, state: State, values: dict[str, M]) -> None:
        resource = self.provider.resource(change.type)
        attributes = resolve(change.config, values)
        if contains_unknown(attributes):
            raise ResourceError("Configuration depends on values that are still unknown")

        if change.action == Action.REPLACE:
            self._delete(change, state)

        if change.action == Action.UPDATE and change.prior is not None:
            logger.info("%s: modifying id=%s", change.address, change.prior.id)
            data = resource.data(config=attributes, state=change.prior.attributes, id=change.prior.id)
            resource.update(data, self.client)
        else:
            logger.info("%s: creating", change.address)
            data = resource.data(config=attributes)
            resource.create(data, self.client)

        if not data.id():
            raise ResourceError(
                f"Provider produced inconsistent result: {change.address} is missing after {change.action.value}"
            )
        _record(state, values, change.type, change.name, data)


def _record(state: State, values: dict[str, M], type_name: str, name: str, data: ResourceData) -> ResourceState:
    entry = ResourceState(type=type_name, name=name, id=data.id(), attributes=data.state())
    state.put(entry)
    values[entry.address] = entry.values()
    return entry


def import_resource(
    provider: Provider,
    client: Client,
    state: State,
    address: str,
    import_id: str,
) -> ResourceState:
    """Bring an existing remote object under management.

    Example:
        import_resource(provider, client, state, "squadcast_webform.status", "611262fcd5b4ea846b534a8a:1234")
    """
    is_data, type_name, name = split_address(address)
    if is_data:
        raise ConfigError("Data sources cannot be imported")
    if state.get(address) is not None:
        raise ConfigError(f"Resource already managed: {address}")

    resource = provider.resource(type_name)
    if resource.importer is None:
        raise ConfigError(f"Resource {type_name} does not support import")

    logger.info("%s: importing id=%s", address, import_id)
    imported = resource.importer(resource.data(id=import_id), client)
    if not imported:
        raise ResourceError(f"Nothing was imported for id {import_id!r}")

    data = imported[0]
    resource.read(data, client)
    if not data.id():
        raise ResourceError(
            f"Cannot import non-existent remote object: {type_name} with id {import_id!r}"
        )
    return _record(state, {}, type_name, name, data)


def destroy(
    provider: Provider,
    client: Client,
    config: Configuration | None,
    state: State,
    state_path: str | Path | None = None,
) -> ApplyResult:
    """Delete every resource in state, dependents first."""
    plan = Planner(provider, client).plan_destroy(config, state)
    return Applier(provider, client, state_path).apply(plan)
