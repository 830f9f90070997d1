"""Shared fixtures: an in-memory Squadcast API behind httpx.MockTransport."""

from __future__ import annotations

import itertools
import json
import re
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from squadcast_provider.api.client import Client
from squadcast_provider.config import ProviderConfig
from squadcast_provider.provider import Provider

TEAM_ID = "611262fcd5b4ea846b534a8a"
USER_ID = "5f8891527f735f0a6646f3b6"
REFRESH_TOKEN = "refresh-token"
ACCESS_TOKEN = "access-token"

GRAPHQL_FIELD = re.compile(r"\{\s*(\w+)")


@dataclass
class RequestLog:
    """One request seen by the fake API."""

    method: str
    path: str
    params: dict[str, str]
    body: Any = None


def _response(status: int, body: Any = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    return httpx.Response(status, json=body)


def _not_found(what: str) -> httpx.Response:
    return _response(404, {"meta": {"status": 404, "error_message": f"{what} not found"}})


@dataclass
class FakeSquadcast:
    """Mutable in-memory state for the REST and GraphQL endpoints."""

    webforms: dict[str, dict] = field(default_factory=dict)
    schedules: dict[str, dict] = field(default_factory=dict)
    schedules_v2: dict[int, dict] = field(default_factory=dict)
    rotations: dict[int, dict] = field(default_factory=dict)
    runbooks: dict[str, dict] = field(default_factory=dict)
    squads: dict[str, dict] = field(default_factory=dict)
    teams: list[dict] = field(default_factory=lambda: [
        {"id": TEAM_ID, "name": "Default Team", "description": "The default team", "default": True},
    ])
    users: list[dict] = field(default_factory=lambda: [
        {"id": USER_ID, "email": "jane@example.com", "first_name": "Jane",
         "last_name": "Doe", "role": "account_owner"},
    ])
    requests: list[RequestLog] = field(default_factory=list)
    fail_next: dict[str, int] = field(default_factory=dict)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def next_int(self) -> int:
        return next(self._ids)

    def next_object_id(self) -> str:
        return f"{self.next_int():024x}"

    def calls(self, method: str, path_prefix: str = "") -> list[RequestLog]:
        return [r for r in self.requests if r.method == method and r.path.startswith(path_prefix)]

    def graphql_calls(self, field_name: str) -> list[RequestLog]:
        return [
            r for r in self.requests
            if r.path == "/v3/graphql" and GRAPHQL_FIELD.search(r.body["query"]).group(1) == field_name
        ]

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        log = RequestLog(request.method, path, dict(request.url.params), body)
        self.requests.append(log)

        if request.url.host.startswith("auth."):
            if request.headers.get("X-Refresh-Token") != REFRESH_TOKEN:
                return _response(401, {"meta": {"error_message": "invalid refresh token"}})
            return _response(200, {"data": {"access_token": ACCESS_TOKEN}})

        if request.headers.get("Authorization") != f"Bearer {ACCESS_TOKEN}":
            return _response(401, {"meta": {"error_message": "unauthorized"}})

        key = f"{request.method} {path}"
        if key in self.fail_next:
            status = self.fail_next.pop(key)
            return _response(status, {"meta": {"status": status, "error_message": "simulated failure"}})

        if path == "/v3/graphql":
            return self._graphql(body)
        return self._rest(request.method, path, log.params, body)

    def _rest(self, method: str, path: str, params: dict[str, str], body: Any) -> httpx.Response:
        parts = [p for p in path.split("/") if p][1:]
        if not parts:
            return _not_found("route")
        collection, rest = parts[0], parts[1:]

        if collection == "teams":
            if rest == ["by-name"]:
                for team in self.teams:
                    if team["name"] == params.get("name"):
                        return _response(200, {"data": team})
                return _not_found("team")
            for team in self.teams:
                if rest and team["id"] == rest[0]:
                    return _response(200, {"data": team})
            return _not_found("team")

        if collection == "users":
            email = params.get("email", "").lower()
            return _response(200, {"data": [u for u in self.users if u["email"].lower() == email]})

        stores = {
            "webform": (self.webforms, self._new_webform),
            "schedules": (self.schedules, self._new_schedule),
            "runbooks": (self.runbooks, self._new_runbook),
            "squads": (self.squads, self._new_squad),
        }
        if collection not in stores:
            return _not_found("route")
        store, factory = stores[collection]

        if not rest:
            if method == "GET":
                owner = params.get("owner_id")
                items = [v for v in store.values() if _owner(v) == owner]
                return _response(200, {"data": items})
            if method == "POST":
                item = factory(body, params)
                store[str(item["id"])] = item
                return _response(201, {"data": item})
            return _response(405)

        id = rest[0]
        if id not in store:
            return _not_found(collection)
        if method == "GET":
            return _response(200, {"data": store[id]})
        if method in ("PUT", "PATCH"):
            updated = factory(body, params, existing=store[id])
            store[id] = updated
            return _response(200, {"data": updated})
        if method == "DELETE":
            del store[id]
            return _response(204)
        return _response(405)

    def _new_webform(self, body: dict, params: dict, existing: dict | None = None) -> dict:
        id = existing["id"] if existing else self.next_int()
        services = [{**s, "webform_id": id} for s in body.get("services", [])]
        return {
            **body,
            "id": id,
            "org_id": "org",
            "owner_id": params.get("owner_id", body.get("owner_id")),
            "owner_type": "team",
            "public_url": f"https://forms.squadcast.com/{id}",
            "is_all_services": False,
            "incident_count": existing["incident_count"] if existing else 0,
            "mttr": 0,
            "services": services,
        }

    def _new_schedule(self, body: dict, params: dict, existing: dict | None = None) -> dict:
        id = existing["id"] if existing else self.next_object_id()
        return {
            "id": id,
            "name": body["name"],
            "slug": body["name"].lower().replace(" ", "-"),
            "colour": body.get("colour", ""),
            "description": body.get("description", ""),
            "owner": {"id": body["owner_id"], "type": "team"},
        }

    def _new_runbook(self, body: dict, params: dict, existing: dict | None = None) -> dict:
        id = existing["id"] if existing else self.next_object_id()
        return {"id": id, "name": body["name"], "owner_id": body["owner_id"], "steps": body["steps"]}

    def _new_squad(self, body: dict, params: dict, existing: dict | None = None) -> dict:
        id = existing["id"] if existing else self.next_object_id()
        return {
            "id": id,
            "name": body["name"],
            "slug": body["name"].lower(),
            "owner_id": body["owner_id"],
            "members": body.get("members", []),
        }

    # ------------------------------------------------------------------
    # GraphQL
    # ------------------------------------------------------------------

    def _graphql(self, body: dict) -> httpx.Response:
        field_name = GRAPHQL_FIELD.search(body["query"]).group(1)
        variables = body.get("variables") or {}
        handler = getattr(self, f"_gql_{field_name}", None)
        if handler is None:
            return _response(200, {"errors": [{"message": f"unknown field {field_name}"}]})
        return _response(200, {"data": {field_name: handler(variables)}})

    def _schedule_with_rotations(self, schedule: dict) -> dict:
        rotations = [r for r in self.rotations.values() if r["scheduleID"] == schedule["ID"]]
        return {**schedule, "rotations": rotations}

    def _gql_schedule(self, variables: dict) -> dict | None:
        schedule = self.schedules_v2.get(variables["ID"])
        return self._schedule_with_rotations(schedule) if schedule else None

    def _gql_schedules(self, variables: dict) -> list[dict]:
        team_id = (variables.get("filters") or {}).get("teamID")
        return [s for s in self.schedules_v2.values() if s["teamID"] == team_id]

    def _gql_createSchedule(self, variables: dict) -> dict:
        id = self.next_int()
        schedule = {**variables["input"], "ID": id}
        self.schedules_v2[id] = schedule
        return schedule

    def _gql_updateSchedule(self, variables: dict) -> dict | None:
        if variables["ID"] not in self.schedules_v2:
            return None
        schedule = {**variables["input"], "ID": variables["ID"]}
        self.schedules_v2[variables["ID"]] = schedule
        return schedule

    def _gql_deleteSchedule(self, variables: dict) -> dict | None:
        return self.schedules_v2.pop(variables["ID"], None)

    def _gql_rotation(self, variables: dict) -> dict | None:
        return self.rotations.get(variables["ID"])

    def _gql_createRotation(self, variables: dict) -> dict:
        id = self.next_int()
        rotation = {**variables["input"], "ID": id, "scheduleID": variables["scheduleID"], "color": "#ff0000"}
        self.rotations[id] = rotation
        return rotation

    def _gql_updateRotation(self, variables: dict) -> dict | None:
        existing = self.rotations.get(variables["ID"])
        if existing is None:
            return None
        rotation = {**variables["input"], "ID": existing["ID"], "scheduleID": existing["scheduleID"]}
        self.rotations[existing["ID"]] = rotation
        return rotation

    def _gql_deleteRotation(self, variables: dict) -> dict | None:
        return self.rotations.pop(variables["ID"], None)


def _owner(item: dict) -> str | None:
    if "owner_id" in item:
        return item["owner_id"]
    owner = item.get("owner")
    return owner.get("id") if isinstance(owner, dict) else None


@pytest.fixture
def api() -> FakeSquadcast:
    return FakeSquadcast()


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(refresh_token=REFRESH_TOKEN)


@pytest.fixture
def client(api, config):
    c = Client(config, http=httpx.Client(transport=httpx.MockTransport(api.handle)))
    yield c
    c.close()


@pytest.fixture
def provider() -> Provider:
    return Provider()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("SQUADCAST_REFRESH_TOKEN", "SQUADCAST_REGION", "SQUADCAST_LOG"):
        monkeypatch.delenv(var, raising=False)
