"""squadcast_runbook resource."""

from __future__ import annotations

import logging

from ..api import runbooks
from ..api.client import Client
from ..errors import APIError, is_resource_not_found_error
from ..tf import (
    Attribute,
    Block,
    Resource,
    ResourceData,
    Type,
    decode,
    encode_and_set,
    validate_object_id,
)
from .importing import parse_2part_import_id

logger = logging.getLogger(__name__)


def _request(data: ResourceData) -> runbooks.CreateUpdateRunbookReq:
    return runbooks.CreateUpdateRunbookReq(
        name=data.get("name"),
        team_id=data.get("team_id"),
        steps=decode(data.get("steps"), list[runbooks.RunbookStep]),
    )


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating runbook name=%s", data.get("name"))
    runbook = runbooks.create_runbook(client, _request(data))
    data.set_id(runbook.id)
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading runbook id=%s name=%s", data.id(), data.get("name"))
    try:
        runbook = runbooks.get_runbook_by_id(client, data.get("team_id"), data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    encode_and_set(runbook, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating runbook id=%s", data.id())
    runbooks.update_runbook(client, data.id(), _request(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting runbook id=%s", data.id())
    try:
        runbooks.delete_runbook(client, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, name = parse_2part_import_id(data.id())
    runbook = runbooks.get_runbook_by_name(client, team_id, name)
    data.set("team_id", team_id)
    data.set_id(runbook.id)
    return [data]


resource = Resource(
    description="Runbooks are ordered lists of steps responders follow while handling incidents.",
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Runbook id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Runbook.", required=True),
        "team_id": Attribute(
            Type.STRING,
            "Team id.",
            required=True,
            force_new=True,
            validators=[validate_object_id],
        ),
        "steps": Attribute(
            Type.LIST,
            "Step by step instructions, markdown is supported.",
            required=True,
            min_items=1,
            elem=Block({
                "content": Attribute(Type.STRING, "Step content.", required=True),
            }),
        ),
    },
)
