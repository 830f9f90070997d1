"""Schedule rotations (GraphQL)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import APIError
from ..tf import M, tf_field
from .models import Model
from .schedules import ScheduleV2, get_schedule_v2_by_name, parse_int_id

if TYPE_CHECKING:
    from .client import Client


class Participant(Model):
    id: str = tf_field("id", default="", alias="ID")
    type: str = ""


class ParticipantGroup(Model):
    participants: list[Participant] = tf_field("participants", default_factory=list)
    everyone: bool = tf_field("-", default=False)


class Timeslot(Model):
    start_hour: int = tf_field("start_hour", default=0, alias="startHour")
    start_minute: int = tf_field("start_minute", default=0, alias="startMinute")
    duration: int = 0
    day_of_week: str = tf_field("day_of_week", default="", alias="dayOfWeek")


class Rotation(Model):
    id: int = tf_field("id", default=0, alias="ID")
    schedule_id: int = tf_field("schedule_id", default=0, alias="scheduleID")
    name: str = ""
    color: str = tf_field("-", default="")
    participant_groups: list[ParticipantGroup] = tf_field(
        "participant_groups", default_factory=list, alias="participantGroups"
    )
    start_date: str = tf_field("start_date", default="", alias="startDate")
    period: str = ""
    shift_timeslots: list[Timeslot] = tf_field(
        "shift_timeslots", default_factory=list, alias="shiftTimeSlots"
    )
    custom_period_frequency: int | None = tf_field(
        "custom_period_frequency", default=None, alias="customPeriodFrequency"
    )
    custom_period_unit: str | None = tf_field(
        "custom_period_unit", default=None, alias="customPeriodUnit"
    )
    change_participants_frequency: int = tf_field(
        "change_participants_frequency", default=0, alias="changeParticipantsFrequency"
    )
    change_participants_unit: str = tf_field(
        "change_participants_unit", default="", alias="changeParticipantsUnit"
    )
    end_date: str | None = tf_field("end_date", default=None, alias="endDate")
    ends_after_iterations: int | None = tf_field(
        "ends_after_iterations", default=None, alias="endsAfterIterations"
    )


class ScheduleWithRotations(ScheduleV2):
    rotations: list[Rotation] = tf_field("-", default_factory=list)


def rotation_input(rotation: Rotation) -> M:
    """Mutation input: everything but server-assigned and empty optional fields."""
    return rotation.model_dump(
        by_alias=True,
        exclude={"id", "schedule_id", "color"},
        exclude_none=True,
    )


def get_schedule_rotation_by_id(client: Client, id: str) -> Rotation:
    return client.graphql(
        "query",
        "rotation(ID: $ID)",
        Rotation,
        {"ID": parse_int_id(id, "rotation")},
        {"ID": "Int!"},
    )


def get_rotation_by_name(
    client: Client, team_id: str, schedule_name: str, rotation_name: str
) -> Rotation:
    schedule = get_schedule_v2_by_name(client, team_id, schedule_name)
    detailed = client.graphql(
        "query",
        "schedule(ID: $ID)",
        ScheduleWithRotations,
        {"ID": schedule.id},
        {"ID": "Int!"},
    )
    for rotation in detailed.rotations:
        if rotation.name == rotation_name:
            return rotation
    raise APIError(
        f"could not find a rotation with name `{rotation_name}` in schedule `{schedule_name}`",
        status_code=404,
    )


def create_schedule_rotation(client: Client, schedule_id: int, rotation: Rotation) -> Rotation:
    return client.graphql(
        "mutation",
        "createRotation(scheduleID: $scheduleID, input: $input)",
        Rotation,
        {"scheduleID": schedule_id, "input": rotation_input(rotation)},
        {"scheduleID": "Int!", "input": "NewRotation!"},
    )


def update_schedule_rotation(client: Client, id: str, rotation: Rotation) -> Rotation:
    return client.graphql(
        "mutation",
        "updateRotation(ID: $ID, input: $input)",
        Rotation,
        {"ID": parse_int_id(id, "rotation"), "input": rotation_input(rotation)},
        {"ID": "Int!", "input": "UpdateRotation!"},
    )


def delete_schedule_rotation_by_id(client: Client, id: str) -> Rotation:
    return client.graphql(
        "mutation",
        "deleteRotation(ID: $ID)",
        Rotation,
        {"ID": parse_int_id(id, "rotation")},
        {"ID": "Int!"},
    )
