"""The provider: resource and data source registry plus client setup."""

from __future__ import annotations

from typing import Any

from ..api.client import Client
from ..config import ProviderConfig
from ..errors import ConfigError
from ..tf import Resource
from . import (
    data_sources,
    resource_runbook,
    resource_schedule,
    resource_schedule_rotation,
    resource_schedule_v2,
    resource_squad,
    resource_webform,
)


class Provider:
    """Registry of every resource and data source type.

    Example:
        provider = Provider()
        client = provider.configure({"region": "eu"})
        webform = provider.resource("squadcast_webform")
    """

    def __init__(self) -> None:
        self.resources: dict[str, Resource] = {
            "squadcast_schedule": resource_schedule.resource,
            "squadcast_schedule_v2": resource_schedule_v2.resource,
            "squadcast_schedule_rotation": resource_schedule_rotation.resource,
            "squadcast_webform": resource_webform.resource,
            "squadcast_runbook": resource_runbook.resource,
            "squadcast_squad": resource_squad.resource,
        }
        self.data_sources: dict[str, Resource] = {
            "squadcast_team": data_sources.team,
            "squadcast_user": data_sources.user,
            "squadcast_schedule": data_sources.schedule,
        }

    def configure(self, values: dict[str, Any] | None = None) -> Client:
        """Build an API client from a provider block and the environment."""
        return Client(ProviderConfig.load(values))

    def resource(self, type_name: str) -> Resource:
        try:
            return self.resources[type_name]
        except KeyError:
            raise ConfigError(f"The provider does not support resource type {type_name!r}") from None

    def data_source(self, type_name: str) -> Resource:
        try:
            return self.data_sources[type_name]
        except KeyError:
            raise ConfigError(f"The provider does not support data source {type_name!r}") from None
