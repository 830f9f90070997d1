"""squadcast_webform resource."""

from __future__ import annotations

import logging

from ..api import webforms
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
    string_in_slice,
    validate_object_id,
)
from .importing import parse_2part_import_id

logger = logging.getLogger(__name__)


def _request(data: ResourceData) -> webforms.WebformReq:
    return webforms.WebformReq(
        name=data.get("name"),
        team_id=data.get("team_id"),
        form_owner_type=data.get("form_owner_type"),
        form_owner_id=data.get("form_owner_id"),
        form_owner_name=data.get("form_owner_name"),
        host_name=data.get("host_name"),
        is_cname=data.get("is_cname"),
        header=data.get("header"),
        description=data.get("description"),
        title=data.get("title"),
        footer_text=data.get("footer_text"),
        footer_link=data.get("footer_link"),
        email_on=[str(v) for v in data.get("email_on")],
        services=decode(data.get("services"), list[webforms.WFService]),
        severity=decode(data.get("severity"), list[webforms.WFSeverity]),
        tags={k: str(v) for k, v in data.get("tags").items()},
    )


def _team_id(data: ResourceData) -> str:
    team_id, ok = data.get_ok("team_id")
    if not ok:
        raise ResourceError("invalid team id provided")
    return team_id


def create(data: ResourceData, client: Client) -> None:
    logger.info("Creating webform name=%s", data.get("name"))
    webform = webforms.create_webform(client, data.get("team_id"), _request(data))
    data.set_id(str(webform.id))
    read(data, client)


def read(data: ResourceData, client: Client) -> None:
    logger.info("Reading webform id=%s name=%s", data.id(), data.get("name"))
    team_id = _team_id(data)
    try:
        webform = webforms.get_webform_by_id(client, team_id, data.id())
    except APIError as e:
        if is_resource_not_found_error(e):
            data.set_id("")
            return
        raise
    encode_and_set(webform, data)


def update(data: ResourceData, client: Client) -> None:
    logger.info("Updating webform id=%s", data.id())
    webforms.update_webform(client, data.get("team_id"), data.id(), _request(data))
    read(data, client)


def delete(data: ResourceData, client: Client) -> None:
    logger.info("Deleting webform id=%s", data.id())
    team_id = _team_id(data)
    try:
        webforms.delete_webform(client, team_id, data.id())
    except APIError as e:
        if not is_resource_not_found_error(e):
            raise
    data.set_id("")


def import_state(data: ResourceData, client: Client) -> list[ResourceData]:
    team_id, id = parse_2part_import_id(data.id())
    data.set("team_id", team_id)
    data.set_id(id)
    return [data]


resource = Resource(
    description=(
        "Squadcast Webforms let organizations host public forms so customers and "
        "internal stakeholders can create alerts from outside Squadcast."
    ),
    create=create,
    read=read,
    update=update,
    delete=delete,
    importer=import_state,
    schema={
        "id": Attribute(Type.STRING, "Webform id.", computed=True),
        "name": Attribute(Type.STRING, "Name of the Webform.", required=True),
        "team_id": Attribute(
            Type.STRING,
            "Team id.",
            required=True,
            force_new=True,
            validators=[validate_object_id],
        ),
        "owner_type": Attribute(Type.STRING, "Owner type.", computed=True),
        "host_name": Attribute(Type.STRING, "Custom hostname (URL).", optional=True),
        "is_cname": Attribute(
            Type.BOOL,
            "cname should be set to true if you want to use a custom domain name for your webform.",
            optional=True,
            default=False,
        ),
        "public_url": Attribute(Type.STRING, "Public URL of the Webform.", computed=True),
        "is_all_services": Attribute(
            Type.BOOL, "If true, the Webform will be available for all services.", computed=True
        ),
        "form_owner_type": Attribute(
            Type.STRING,
            "Form owner type (user, team, squad).",
            required=True,
            validators=[string_in_slice(["user", "team", "squad"])],
        ),
        "form_owner_id": Attribute(Type.STRING, "Form owner id.", required=True),
        "form_owner_name": Attribute(Type.STRING, "Form owner name.", required=True),
        "header": Attribute(Type.STRING, "Webform header.", required=True),
        "title": Attribute(Type.STRING, "Webform title (public).", required=True),
        "description": Attribute(Type.STRING, "Description of the Webform.", optional=True),
        "footer_text": Attribute(Type.STRING, "Footer text.", required=True),
        "footer_link": Attribute(Type.STRING, "Footer link.", required=True),
        "email_on": Attribute(
            Type.LIST,
            "Defines when to send email to the reporter (triggered, acknowledged, resolved).",
            optional=True,
            elem=Attribute(
                Type.STRING,
                validators=[string_in_slice(["triggered", "acknowledged", "resolved"])],
            ),
        ),
        "incident_count": Attribute(
            Type.INT, "Number of incidents created from this webform.", computed=True
        ),
        "mttr": Attribute(Type.INT, "Mean time to repair.", computed=True),
        "tags": Attribute(
            Type.MAP, "Webform Tags.", optional=True, elem=Attribute(Type.STRING)
        ),
        "services": Attribute(
            Type.LIST,
            "Services added to Webform.",
            required=True,
            min_items=1,
            elem=Block({
                "service_id": Attribute(Type.STRING, "Service ID.", required=True),
                "webform_id": Attribute(Type.INT, "Webform ID.", computed=True),
                "name": Attribute(Type.STRING, "Service name.", required=True),
                "alias": Attribute(Type.STRING, "Service alias.", optional=True),
            }),
        ),
        "severity": Attribute(
            Type.LIST,
            "Severity of the Incident.",
            required=True,
            min_items=1,
            elem=Block({
                "type": Attribute(Type.STRING, "Severity type.", required=True),
                "description": Attribute(Type.STRING, "Severity description.", required=True),
            }),
        ),
    },
)
