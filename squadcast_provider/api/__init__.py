"""Squadcast REST and GraphQL API client.

Usage:
    from squadcast_provider.api import Client
    from squadcast_provider.api import schedules

    client = Client(config)
    schedule = schedules.get_schedule_v2_by_id(client, "42")
"""

from . import rotations, runbooks, schedules, squads, teams, webforms
from .client import Client
from .graphql import build_operation, selection_set

__all__ = [
    "Client",
    "build_operation",
    "selection_set",
    # Resource APIs
    "rotations",
    "runbooks",
    "schedules",
    "squads",
    "teams",
    "webforms",
]
