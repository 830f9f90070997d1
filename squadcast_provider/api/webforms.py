"""Webforms (REST v3)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..tf import tf_field
from .models import Model

if TYPE_CHECKING:
    from .client import Client


class WFService(Model):
    service_id: str = ""
    webform_id: int = 0
    name: str = ""
    alias: str = ""


class WFSeverity(Model):
    type: str = ""
    description: str = ""


class Webform(Model):
    id: int = 0
    org_id: str = tf_field("-", default="")
    team_id: str = tf_field("team_id", default="", alias="owner_id")
    owner_type: str = ""
    name: str = ""
    is_cname: bool = False
    host_name: str = ""
    public_url: str = ""
    is_all_services: bool = False
    form_owner_type: str = ""
    form_owner_id: str = ""
    form_owner_name: str = ""
    header: str = ""
    title: str = ""
    description: str = ""
    footer_text: str = ""
    footer_link: str = ""
    email_on: list[str] = tf_field(default_factory=list)
    incident_count: int = 0
    mttr: int = 0
    tags: dict[str, str] = tf_field(default_factory=dict)
    services: list[WFService] = tf_field(default_factory=list)
    severity: list[WFSeverity] = tf_field(default_factory=list)


class WebformReq(Model):
    name: str
    team_id: str = tf_field(alias="owner_id")
    is_cname: bool = False
    host_name: str = ""
    form_owner_type: str
    form_owner_id: str
    form_owner_name: str
    header: str
    title: str
    description: str = ""
    footer_text: str
    footer_link: str
    email_on: list[str] = tf_field(default_factory=list)
    tags: dict[str, str] = tf_field(default_factory=dict)
    services: list[WFService] = tf_field(default_factory=list)
    severity: list[WFSeverity] = tf_field(default_factory=list)


def _url(client: Client, id: str | None = None) -> str:
    base = f"{client.base_url_v3}/webform"
    return f"{base}/{id}" if id else base


def create_webform(client: Client, team_id: str, req: WebformReq) -> Webform:
    return client.request("POST", _url(client), req, model=Webform, params={"owner_id": team_id})


def get_webform_by_id(client: Client, team_id: str, id: str) -> Webform:
    return client.request("GET", _url(client, id), model=Webform, params={"owner_id": team_id})


def update_webform(client: Client, team_id: str, id: str, req: WebformReq) -> Webform:
    return client.request("PUT", _url(client, id), req, model=Webform, params={"owner_id": team_id})


def delete_webform(client: Client, team_id: str, id: str) -> None:
    client.request("DELETE", _url(client, id), params={"owner_id": team_id})
