"""squadcast_schedule_rotation resource."""

from __future__ import annotations

import logging

from ..api import rotations
from ..api.client import Client
from ..errors import APIError, ResourceError, is_resource_not_found_error
from ..tf import (
    Attribute,
    Block,
    Resource,
    ResourceData,
    Type,
    decode,
    encode_and_set,
    int_between,
    string_in_slice,
    string_len_between,
    validate_object_id,
)
from .importing import parse_3part_import_id

logger = logging.getLogger(__name__)

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _rotation(data: ResourceData) -> rotations.Rotation:
    """Build the mutation payload, enforcing the custom period rules."""
    rotation = rotations.Rotation(
        name=data.get("name"),
        start_date=data.get("start_date"),
        period=data.get("period"),
        change_participants_frequency=data.get("change_participants_frequency"),
        change_participants_unit=data.get("change_participants_unit"),
        end_date=data.get("end_date") or None,
        ends_after_iterations=data.get("ends_after_iterations") or None,
        participant_groups=decode(
            data.get("participant_groups"), list[rotations.ParticipantGroup]
        ),
    )

    shift_timeslots = data.get("shift_timeslots")
    if rotation.period != "custom" and len(shift_timeslots) > 1:
        raise ResourceError("multiple shift_timeslots can only be set when period is custom")
    rotation.shift_timeslots = decode(shift_timeslots, list[rotations.Timeslot])

    # 0 and "" mean unset
    frequency = data.get("custom_period_frequency")
    unit = data.get("custom_period_unit")
    if rotation.period == "custom":
        if frequency == 0:
            raise ResourceError("custom_period_frequency must be set when period is custom")
        if unit == "":
            raise ResourceError("custom_period_unit must be set when period is custom")
        rotation.custom_period_frequency = frequency
        rotation.custom_period_unit = unit
    else:
        if frequency != 0:
            raise ResourceError("custom_period_frequency can only be set when period is custom")
        if unit != "":
            raise ResourceError("custom_period_unit can only be set when period is custom")

    return rotation


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating rotation name=%s", data.get("name"))
    rotation = rotations.create_schedule_rotation(
        client, data.get("schedule_id"), _rotation(data)
    )
    data.set_id(str(rotation.id))
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading rotation id=%s name=%s", data.id(), data.get("name"))
    try:
        rotation = rotations.get_schedule_rotation_by_id(client, data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    if not rotation.schedule_id:
        rotation.schedule_id = data.get("schedule_id")
    encode_and_set(rotation, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating rotation id=%s", data.id())
    rotations.update_schedule_rotation(client, data.id(), _rotation(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting rotation id=%s", data.id())
    try:
        rotations.delete_schedule_rotation_by_id(client, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
        logger.info("Rotation id=%s already deleted", data.id())
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, schedule_name, rotation_name = parse_3part_import_id(data.id())
    rotation = rotations.get_rotation_by_name(client, team_id, schedule_name, rotation_name)
    data.set_id(str(rotation.id))
    return [data]


resource = Resource(
    description=(
        "Schedule rotations are used to manage on-call scheduling and determine "
        "who will be notified when an incident is triggered."
    ),
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Rotation id.", computed=True),
        "schedule_id": Attribute(
            Type.INT,
            "id of the schedule that the rotation belongs to.",
            required=True,
            force_new=True,
        ),
        "name": Attribute(
            Type.STRING, "Rotation name.", required=True, validators=[string_len_between(1, 150)]
        ),
        "participant_groups": Attribute(
            Type.LIST,
            "Ordered list of participant groups for the rotation. For each rotation "
            "the participant_groups are cycled through in order.",
            optional=True,
            elem=Block({
                "participants": Attribute(
                    Type.LIST,
                    "Group participants.",
                    optional=True,
                    elem=Block({
                        "type": Attribute(
                            Type.STRING,
                            "Participant type (user, team, squad).",
                            required=True,
                            validators=[string_in_slice(["user", "squad", "team"])],
                        ),
                        "id": Attribute(
                            Type.STRING,
                            "Participant id.",
                            required=True,
                            validators=[validate_object_id],
                        ),
                    }),
                ),
            }),
        ),
        "start_date": Attribute(
            Type.STRING, "Defines the start date of the rotation.", required=True
        ),
        "period": Attribute(
            Type.STRING,
            "Rotation period (none, daily, weekly, monthly, custom). Defines how often the rotation repeats.",
            required=True,
            validators=[string_in_slice(["none", "daily", "weekly", "monthly", "custom"])],
        ),
        "shift_timeslots": Attribute(
            Type.LIST,
            "Timeslots where the rotation is active.",
            required=True,
            min_items=1,
            elem=Block({
                "start_hour": Attribute(
                    Type.INT,
                    "Defines the start hour of the each shift in the schedule timezone.",
                    required=True,
                    validators=[int_between(0, 23)],
                ),
                "start_minute": Attribute(
                    Type.INT,
                    "Defines the start minute of the each shift in the schedule timezone.",
                    required=True,
                    validators=[int_between(0, 59)],
                ),
                "duration": Attribute(
                    Type.INT,
                    "Defines the duration of each shift. (in minutes)",
                    required=True,
                    validators=[int_between(1, 1440)],
                ),
                "day_of_week": Attribute(
                    Type.STRING,
                    "Defines the day of the week for the shift. If not specified, "
                    "the timeslot is active on all days of the week.",
                    optional=True,
                    validators=[string_in_slice(WEEKDAYS)],
                ),
            }),
        ),
        "custom_period_frequency": Attribute(
            Type.INT,
            "Frequency of the custom rotation repeat pattern. Only applicable if period is set to custom.",
            optional=True,
        ),
        "custom_period_unit": Attribute(
            Type.STRING,
            "Unit of the custom rotation repeat pattern (day, week, month). "
            "Only applicable if period is set to custom.",
            optional=True,
            validators=[string_in_slice(["day", "week", "month"])],
        ),
        "change_participants_frequency": Attribute(
            Type.INT, "Frequency with which participants change in the rotation.", required=True
        ),
        "change_participants_unit": Attribute(
            Type.STRING,
            "Unit of the frequency with which participants change in the rotation "
            "(rotation, day, week, month).",
            required=True,
            validators=[string_in_slice(["rotation", "day", "week", "month"])],
        ),
        "end_date": Attribute(
            Type.STRING, "Defines the end date of the schedule rotation.", optional=True
        ),
        "ends_after_iterations": Attribute(
            Type.INT, "Defines the number of iterations of the schedule rotation.", optional=True
        ),
    },
)
