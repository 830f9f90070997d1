"""Schedules: legacy REST schedules and GraphQL (v2) schedules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import APIError, ResourceError
from ..tf import M, encode, tf_field
from .models import Model

if TYPE_CHECKING:
    from .client import Client


# ---------------------------------------------------------------------------
# Legacy schedules (REST v3)
# ---------------------------------------------------------------------------


class OwnerRef(Model):
    id: str = ""
    type: str = ""


class Schedule(Model):
    """Legacy schedule."""

    id: str = tf_field("id", default="")
    name: str = tf_field("name", default="")
    slug: str = tf_field("-", default="")
    colour: str = tf_field("color", default="")
    description: str = tf_field("description", default="")
    owner: OwnerRef = tf_field("-", default_factory=OwnerRef)

    def encode(self) -> M:
        m = encode(self)
        m["team_id"] = self.owner.id
        return m


class CreateUpdateScheduleReq(Model):
    name: str
    color: str = tf_field(default="", alias="colour")
    description: str = ""
    team_id: str = tf_field(alias="owner_id")


def get_schedule_by_id(client: Client, team_id: str, id: str) -> Schedule:
    url = f"{client.base_url_v3}/schedules/{id}"
    return client.request("GET", url, model=Schedule, params={"owner_id": team_id})


def list_schedules(client: Client, team_id: str) -> list[Schedule]:
    url = f"{client.base_url_v3}/schedules"
    return client.request_slice("GET", url, Schedule, params={"owner_id": team_id})


def get_schedule_by_name(client: Client, team_id: str, name: str) -> Schedule:
    for schedule in list_schedules(client, team_id):
        if schedule.name == name:
            return schedule
    raise APIError(f"could not find a schedule with name `{name}`", status_code=404)


def create_schedule(client: Client, req: CreateUpdateScheduleReq) -> Schedule:
    url = f"{client.base_url_v3}/schedules"
    return client.request("POST", url, req, model=Schedule)


def update_schedule(client: Client, id: str, req: CreateUpdateScheduleReq) -> Schedule:
    url = f"{client.base_url_v3}/schedules/{id}"
    return client.request("PUT", url, req, model=Schedule)


def delete_schedule(client: Client, id: str) -> None:
    url = f"{client.base_url_v3}/schedules/{id}"
    client.request("DELETE", url)


# ---------------------------------------------------------------------------
# Schedules v2 (GraphQL)
# ---------------------------------------------------------------------------


class Owner(Model):
    id: str = tf_field("id", default="", alias="ID")
    type: str = tf_field("type", default="")


class Tag(Model):
    key: str = ""
    value: str = ""
    color: str = ""


class ScheduleV2(Model):
    id: int = tf_field("id", default=0, alias="ID")
    name: str = ""
    description: str = ""
    time_zone: str = tf_field("timezone", default="", alias="timeZone")
    team_id: str = tf_field("team_id", default="", alias="teamID")
    tags: list[Tag] = tf_field("tags", default_factory=list)
    owner: Owner | None = tf_field("entity_owner", default=None)


def parse_int_id(id: str, kind: str = "schedule") -> int:
    try:
        return int(id)
    except (TypeError, ValueError):
        raise ResourceError(f"unable to convert {kind} ID {id!r} to an integer") from None


def schedule_v2_input(payload: ScheduleV2) -> M:
    data = payload.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)
    return data


def get_schedule_v2_by_id(client: Client, id: str) -> ScheduleV2:
    return client.graphql(
        "query",
        "schedule(ID: $ID)",
        ScheduleV2,
        {"ID": parse_int_id(id)},
        {"ID": "Int!"},
    )


def list_schedules_v2(client: Client, team_id: str) -> list[ScheduleV2]:
    return client.graphql(
        "query",
        "schedules(filters: $filters)",
        ScheduleV2,
        {"filters": {"teamID": team_id}},
        {"filters": "ScheduleFilters"},
    )


def get_schedule_v2_by_name(client: Client, team_id: str, name: str) -> ScheduleV2:
    for schedule in list_schedules_v2(client, team_id):
        if schedule.name == name:
            return schedule
    raise APIError(f"could not find a schedule with name `{name}`", status_code=404)


def create_schedule_v2(client: Client, payload: ScheduleV2) -> ScheduleV2:
    return client.graphql(
        "mutation",
        "createSchedule(input: $input)",
        ScheduleV2,
        {"input": schedule_v2_input(payload)},
        {"input": "NewSchedule!"},
    )


def update_schedule_v2(client: Client, id: str, payload: ScheduleV2) -> ScheduleV2:
    return client.graphql(
        "mutation",
        "updateSchedule(ID: $ID, input: $input)",
        ScheduleV2,
        {"ID": parse_int_id(id), "input": schedule_v2_input(payload)},
        {"ID": "Int!", "input": "UpdateSchedule!"},
    )


def delete_schedule_v2_by_id(client: Client, id: str) -> ScheduleV2:
    return client.graphql(
        "mutation",
        "deleteSchedule(ID: $ID)",
        ScheduleV2,
        {"ID": parse_int_id(id)},
        {"ID": "Int!"},
    )
