"""squadcast_squad resource."""

from __future__ import annotations

import logging

from ..api import squads
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
    string_in_slice,
    validate_object_id,
)
from .importing import parse_2part_import_id

logger = logging.getLogger(__name__)


def _request(data: ResourceData) -> squads.CreateUpdateSquadReq:
    return squads.CreateUpdateSquadReq(
        name=data.get("name"),
        team_id=data.get("team_id"),
        members=decode(data.get("members"), list[squads.SquadMember]),
    )


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating squad name=%s", data.get("name"))
    squad = squads.create_squad(client, _request(data))
    data.set_id(squad.id)
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading squad id=%s name=%s", data.id(), data.get("name"))
    try:
        squad = squads.get_squad_by_id(client, data.get("team_id"), data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    encode_and_set(squad, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating squad id=%s", data.id())
    squads.update_squad(client, data.id(), _request(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting squad id=%s", data.id())
    try:
        squads.delete_squad(client, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, name = parse_2part_import_id(data.id())
    squad = squads.get_squad_by_name(client, team_id, name)
    data.set("team_id", team_id)
    data.set_id(squad.id)
    return [data]


resource = Resource(
    description="Squads are smaller groups of users within a team that share on-call duties.",
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Squad id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Squad.", required=True),
        "team_id": Attribute(
            Type.STRING,
            "Team id.",
            required=True,
            force_new=True,
            validators=[validate_object_id],
        ),
        "members": Attribute(
            Type.LIST,
            "Squad members.",
            optional=True,
            elem=Block({
                "user_id": Attribute(
                    Type.STRING, "User id.", required=True, validators=[validate_object_id]
                ),
                "role": Attribute(
                    Type.STRING,
                    "Member role (owner, member).",
                    optional=True,
                    default="member",
                    validators=[string_in_slice(["owner", "member"])],
                ),
            }),
        ),
    },
)
