"""squadcast_schedule_v2 resource (GraphQL schedules)."""

from __future__ import annotations

import logging

from ..api import schedules
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


def _payload(data: ResourceData) -> schedules.ScheduleV2:
    payload = schedules.ScheduleV2(
        name=data.get("name"),
        description=data.get("description"),
        time_zone=data.get("timezone"),
        team_id=data.get("team_id"),
        tags=decode(data.get("tags"), list[schedules.Tag]),
    )
    owner = decode(data.get("entity_owner"), schedules.Owner | None)
    # schedules are owned by their team unless told otherwise
    payload.owner = owner or schedules.Owner(id=payload.team_id, type="team")
    return payload


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating schedule name=%s", data.get("name"))
    schedule = schedules.create_schedule_v2(client, _payload(data))
    data.set_id(str(schedule.id))
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading schedule id=%s name=%s", data.id(), data.get("name"))
    try:
        schedule = schedules.get_schedule_v2_by_id(client, data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    encode_and_set(schedule, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating schedule id=%s", data.id())
    schedules.update_schedule_v2(client, data.id(), _payload(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting schedule id=%s", data.id())
    try:
        schedules.delete_schedule_v2_by_id(client, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, name = parse_2part_import_id(data.id())
    schedule = schedules.get_schedule_v2_by_name(client, team_id, name)
    data.set("team_id", team_id)
    data.set_id(str(schedule.id))
    return [data]


resource = Resource(
    description="Schedules hold on-call rotations and decide who is on call at any time.",
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Schedule id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Schedule.", required=True),
        "description": Attribute(Type.STRING, "Description of the Schedule.", optional=True),
        "timezone": Attribute(Type.STRING, "Timezone for the schedule.", required=True),
        "team_id": Attribute(
            Type.STRING,
            "Team id.",
            required=True,
            force_new=True,
            validators=[validate_object_id],
        ),
        "tags": Attribute(
            Type.LIST,
            "Schedule tags.",
            optional=True,
            elem=Block({
                "key": Attribute(Type.STRING, "Tag key.", required=True),
                "value": Attribute(Type.STRING, "Tag value.", required=True),
                "color": Attribute(Type.STRING, "Tag color.", optional=True),
            }),
        ),
        "entity_owner": Attribute(
            Type.LIST,
            "Schedule owner. Defaults to the team.",
            optional=True,
            computed=True,
            max_items=1,
            elem=Block({
                "type": Attribute(
                    Type.STRING,
                    "Owner type (user, squad, team).",
                    required=True,
                    validators=[string_in_slice(["user", "squad", "team"])],
                ),
                "id": Attribute(
                    Type.STRING, "Owner id.", required=True, validators=[validate_object_id]
                ),
            }),
        ),
    },
)
