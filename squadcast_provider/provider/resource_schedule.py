"""squadcast_schedule resource (legacy REST schedules)."""

from __future__ import annotations

import logging

from ..api import schedules
from ..api.client import Client
from ..errors import APIError, is_resource_not_found_error
from ..tf import Attribute, Resource, ResourceData, Type, encode_and_set, validate_object_id
from .importing import parse_2part_import_id

logger = logging.getLogger(__name__)


def _request(data: ResourceData) -> schedules.CreateUpdateScheduleReq:
    return schedules.CreateUpdateScheduleReq(
        name=data.get("name"),
        color=data.get("color"),
        description=data.get("description"),
        team_id=data.get("team_id"),
    )


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating schedule name=%s", data.get("name"))
    schedule = schedules.create_schedule(client, _request(data))
    data.set_id(schedule.id)
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading schedule id=%s name=%s", data.id(), data.get("name"))
    try:
        schedule = schedules.get_schedule_by_id(client, data.get("team_id"), data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    encode_and_set(schedule, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating schedule id=%s", data.id())
    schedules.update_schedule(client, data.id(), _request(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting schedule id=%s", data.id())
    try:
        schedules.delete_schedule(client, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, name = parse_2part_import_id(data.id())
    schedule = schedules.get_schedule_by_name(client, team_id, name)
    data.set("team_id", team_id)
    data.set_id(schedule.id)
    return [data]


resource = Resource(
    description="Legacy schedules group on-call rotations under a team.",
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Schedule id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Schedule.", required=True),
        "description": Attribute(Type.STRING, "Detailed description about the schedule.", optional=True),
        "color": Attribute(Type.STRING, "Schedule color (hex code).", optional=True, default="#0f61dd"),
        "team_id": Attribute(
            Type.STRING,
            "Team id.",
            required=True,
            force_new=True,
            validators=[validate_object_id],
        ),
    },
)
