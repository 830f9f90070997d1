"""Provider configuration: region, credentials and derived API endpoints."""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

REFRESH_TOKEN_ENV_VAR = "SQUADCAST_REFRESH_TOKEN"
REGION_ENV_VAR = "SQUADCAST_REGION"

REGION_HOSTS = {
    "us": "squadcast.com",
    "eu": "eu.squadcast.com",
    "internal": "squadcast.xyz",
    "staging": "squadcast.tech",
    "dev": "localhost",
}

Region = Literal["us", "eu", "internal", "staging", "dev"]


class ProviderConfig(BaseModel):
    """Settings for talking to one Squadcast organization."""

    region: Region = Field(default="us", description="Squadcast region")
    refresh_token: str = Field(
        min_length=1,
        repr=False,
        description="Refresh token used to obtain API access tokens",
    )
    host: str | None = Field(
        default=None,
        description="Override the host derived from the region",
    )
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout (seconds)")

    @property
    def api_host(self) -> str:
        return self.host or REGION_HOSTS[self.region]

    @property
    def api_base_v3(self) -> str:
        return f"https://api.{self.api_host}/v3"

    @property
    def api_base_v4(self) -> str:
        return f"https://api.{self.api_host}/v4"

    @property
    def auth_base(self) -> str:
        return f"https://auth.{self.api_host}"

    @property
    def graphql_url(self) -> str:
        return f"{self.api_base_v3}/graphql"

    @classmethod
    def load(cls, values: dict[str, Any] | None = None) -> ProviderConfig:
        """Build a config from a ``provider:`` block and the environment.

        Explicit values win over SQUADCAST_REFRESH_TOKEN / SQUADCAST_REGION.
        """
        data: dict[str, Any] = {}
        if os.environ.get(REGION_ENV_VAR):
            data["region"] = os.environ[REGION_ENV_VAR]
        if os.environ.get(REFRESH_TOKEN_ENV_VAR):
            data["refresh_token"] = os.environ[REFRESH_TOKEN_ENV_VAR]
        data.update({k: v for k, v in (values or {}).items() if v is not None})

        if not data.get("refresh_token"):
            raise ConfigError(
                f"refresh_token must be set in the provider block or via {REFRESH_TOKEN_ENV_VAR}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid provider configuration: {e}") from e
