"""Teams and users (read only)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import APIError
from .models import Model

if TYPE_CHECKING:
    from .client import Client


class Team(Model):
    id: str = ""
    name: str = ""
    description: str = ""
    default: bool = False


class User(Model):
    id: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    role: str = ""


def get_team_by_id(client: Client, id: str) -> Team:
    return client.request("GET", f"{client.base_url_v3}/teams/{id}", model=Team)


def get_team_by_name(client: Client, name: str) -> Team:
    return client.request(
        "GET", f"{client.base_url_v3}/teams/by-name", model=Team, params={"name": name}
    )


def get_user_by_email(client: Client, email: str) -> User:
    users = client.request_slice(
        "GET", f"{client.base_url_v3}/users", User, params={"email": email}
    )
    for user in users:
        if user.email.lower() == email.lower():
            return user
    raise APIError(f"could not find a user with email `{email}`", status_code=404)
