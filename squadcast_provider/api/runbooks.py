"""Runbooks (REST v3)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import APIError
from ..tf import tf_field
from .models import Model

if TYPE_CHECKING:
    from .client import Client


class RunbookStep(Model):
    content: str = ""


class Runbook(Model):
    id: str = ""
    name: str = ""
    team_id: str = tf_field("team_id", default="", alias="owner_id")
    steps: list[RunbookStep] = tf_field(default_factory=list)


class CreateUpdateRunbookReq(Model):
    name: str
    team_id: str = tf_field(alias="owner_id")
    steps: list[RunbookStep]


def get_runbook_by_id(client: Client, team_id: str, id: str) -> Runbook:
    url = f"{client.base_url_v3}/runbooks/{id}"
    return client.request("GET", url, model=Runbook, params={"owner_id": team_id})


def list_runbooks(client: Client, team_id: str) -> list[Runbook]:
    url = f"{client.base_url_v3}/runbooks"
    return client.request_slice("GET", url, Runbook, params={"owner_id": team_id})


def get_runbook_by_name(client: Client, team_id: str, name: str) -> Runbook:
    for runbook in list_runbooks(client, team_id):
        if runbook.name == name:
            return runbook
    raise APIError(f"could not find a runbook with name `{name}`", status_code=404)


def create_runbook(client: Client, req: CreateUpdateRunbookReq) -> Runbook:
    url = f"{client.base_url_v3}/runbooks"
    return client.request("POST", url, req, model=Runbook)


def update_runbook(client: Client, id: str, req: CreateUpdateRunbookReq) -> Runbook:
    url = f"{client.base_url_v3}/runbooks/{id}"
    return client.request("PATCH", url, req, model=Runbook)


def delete_runbook(client: Client, id: str) -> None:
    url = f"{client.base_url_v3}/runbooks/{id}"
    client.request("DELETE", url)
