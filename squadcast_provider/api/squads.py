"""Squads (REST v3)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import APIError
from ..tf import tf_field
from .models import Model

if TYPE_CHECKING:
    from .client import Client


class SquadMember(Model):
    user_id: str = ""
    role: str = ""


class Squad(Model):
    id: str = ""
    name: str = ""
    slug: str = tf_field("-", default="")
    team_id: str = tf_field("team_id", default="", alias="owner_id")
    members: list[SquadMember] = tf_field(default_factory=list)


class CreateUpdateSquadReq(Model):
    name: str
    team_id: str = tf_field(alias="owner_id")
    members: list[SquadMember] = tf_field(default_factory=list)


def get_squad_by_id(client: Client, team_id: str, id: str) -> Squad:
    url = f"{client.base_url_v3}/squads/{id}"
    return client.request("GET", url, model=Squad, params={"owner_id": team_id})


def list_squads(client: Client, team_id: str) -> list[Squad]:
    url = f"{client.base_url_v3}/squads"
    return client.request_slice("GET", url, Squad, params={"owner_id": team_id})


def get_squad_by_name(client: Client, team_id: str, name: str) -> Squad:
    for squad in list_squads(client, team_id):
        if squad.name == name:
            return squad
    raise APIError(f"could not find a squad with name `{name}`", status_code=404)


def create_squad(client: Client, req: CreateUpdateSquadReq) -> Squad:
    url = f"{client.base_url_v3}/squads"
    return client.request("POST", url, req, model=Squad)


def update_squad(client: Client, id: str, req: CreateUpdateSquadReq) -> Squad:
    url = f"{client.base_url_v3}/squads/{id}"
    return client.request("PUT", url, req, model=Squad)


def delete_squad(client: Client, id: str) -> None:
    url = f"{client.base_url_v3}/squads/{id}"
    client.request("DELETE", url)
