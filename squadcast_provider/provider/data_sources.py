"""Data sources: look up existing teams, users and schedules."""

from __future__ import annotations

import logging

from ..api import schedules, teams
from ..api.client import Client
from ..tf import Attribute, Resource, ResourceData, Type, encode_and_set, validate_object_id

logger = logging.getLogger(__name__)


def read_team(data: ResourceData, client: Client) -> None:
    name = data.get("name")
    logger.info("Reading team name=%s", name)
    encode_and_set(teams.get_team_by_name(client, name), data)


def read_user(data: ResourceData, client: Client) -> None:
    email = data.get("email")
    logger.info("Reading user email=%s", email)
    encode_and_set(teams.get_user_by_email(client, email), data)


def read_schedule(data: ResourceData, client: Client) -> None:
    team_id, name = data.get("team_id"), data.get("name")
    logger.info("Reading schedule team_id=%s name=%s", team_id, name)
    encode_and_set(schedules.get_schedule_by_name(client, team_id, name), data)


team = Resource(
    description="Use this data source to get information about a specific team.",
    read=read_team,
    schema={
        "id": Attribute(Type.STRING, "Team id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Team.", required=True),
        "description": Attribute(Type.STRING, "Description of the Team.", computed=True),
        "default": Attribute(Type.BOOL, "Whether this is the default team.", computed=True),
    },
)

user = Resource(
    description="Use this data source to get information about a specific user.",
    read=read_user,
    schema={
        "id": Attribute(Type.STRING, "User id.", computed=True),
        "email": Attribute(Type.STRING, "Email of the User.", required=True),
        "first_name": Attribute(Type.STRING, "First name.", computed=True),
        "last_name": Attribute(Type.STRING, "Last name.", computed=True),
        "role": Attribute(Type.STRING, "Organization role.", computed=True),
    },
)

schedule = Resource(
    description="Use this data source to get information about a specific schedule.",
    read=read_schedule,
    schema={
        "id": Attribute(Type.STRING, "Schedule id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Schedule.", required=True),
        "team_id": Attribute(
            Type.STRING, "Team id.", required=True, validators=[validate_object_id]
        ),
        "description": Attribute(Type.STRING, "Description of the Schedule.", computed=True),
        "color": Attribute(Type.STRING, "Schedule color.", computed=True),
    },
)
