"""Tests for the Squadcast API client."""

import httpx
import pytest

from squadcast_provider.api.client import Client
from squadcast_provider.api.models import Model
from squadcast_provider.api.schedules import ScheduleV2
from squadcast_provider.config import ProviderConfig
from squadcast_provider.errors import APIError, AuthenticationError, is_resource_not_found_error

from conftest import ACCESS_TOKEN, TEAM_ID


class Item(Model):
    id: str = ""
    name: str = ""


def _client(handler, config=None) -> Client:
    config = config or ProviderConfig(refresh_token="t")
    return Client(config, http=httpx.Client(transport=httpx.MockTransport(handler)))


def _auth_then(handler):
    """Answer the token exchange, hand everything else to handler."""

    def wrapped(request: httpx.Request) -> httpx.Response:
        if request.url.host.startswith("auth."):
            return httpx.Response(200, json={"data": {"access_token": "tok"}})
        return handler(request)

    return wrapped


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TestAuthentication:
    def test_token_exchanged_once(self, client, api):
        client.request("GET", f"{client.base_url_v3}/teams/{TEAM_ID}")
        client.request("GET", f"{client.base_url_v3}/teams/{TEAM_ID}")
        assert client.access_token == ACCESS_TOKEN
        assert len([r for r in api.requests if r.path == "/oauth/access-token"]) == 1

    def test_invalid_refresh_token(self, api):
        c = Client(
            ProviderConfig(refresh_token="wrong"),
            http=httpx.Client(transport=httpx.MockTransport(api.handle)),
        )
        with pytest.raises(AuthenticationError, match="invalid refresh token") as exc:
            c.authenticate()
        assert exc.value.status_code == 401

    def test_missing_access_token(self):
        c = _client(lambda r: httpx.Response(200, json={"data": {}}))
        with pytest.raises(AuthenticationError, match="access token missing"):
            c.authenticate()

    def test_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={"data": {"id": "1"}})

        c = _client(_auth_then(handler))
        c.request("GET", f"{c.base_url_v3}/things/1")
        assert seen["authorization"] == "Bearer tok"
        assert seen["user-agent"].startswith("squadcast-provider/")


# ---------------------------------------------------------------------------
# REST
# ---------------------------------------------------------------------------


class TestRequest:
    def test_unwraps_data_into_model(self):
        c = _client(_auth_then(lambda r: httpx.Response(200, json={"data": {"id": "1", "name": "n"}})))
        assert c.request("GET", f"{c.base_url_v3}/items/1", model=Item) == Item(id="1", name="n")

    def test_without_model_returns_raw_data(self):
        c = _client(_auth_then(lambda r: httpx.Response(200, json={"data": {"x": 1}})))
        assert c.request("GET", f"{c.base_url_v3}/x") == {"x": 1}

    def test_empty_body(self):
        c = _client(_auth_then(lambda r: httpx.Response(204)))
        assert c.request("DELETE", f"{c.base_url_v3}/items/1") is None

    def test_error_envelope(self):
        body = {"meta": {"status": 400, "error_message": "name is required"}}
        c = _client(_auth_then(lambda r: httpx.Response(400, json=body)))
        with pytest.raises(APIError) as exc:
            c.request("POST", f"{c.base_url_v3}/items", {"name": ""})
        assert exc.value.status_code == 400
        assert exc.value.message == "name is required"
        assert str(exc.value) == f"POST {c.base_url_v3}/items returned an error:\nname is required"

    def test_not_found(self):
        c = _client(_auth_then(lambda r: httpx.Response(404, text="nope")))
        with pytest.raises(APIError) as exc:
            c.request("GET", f"{c.base_url_v3}/items/1")
        assert is_resource_not_found_error(exc.value)

    def test_payload_models_are_sent_by_alias(self):
        sent = {}

        def handler(request):
            import json

            sent.update(json.loads(request.content))
            return httpx.Response(200, json={"data": {}})

        c = _client(_auth_then(handler))
        c.request("POST", f"{c.base_url_v3}/x", ScheduleV2(name="n", time_zone="UTC", team_id="t"))
        assert sent["timeZone"] == "UTC"
        assert sent["teamID"] == "t"

    def test_unexpected_shape(self):
        c = _client(_auth_then(lambda r: httpx.Response(200, json={"data": {"id": ["not", "a", "string"]}})))
        with pytest.raises(APIError, match="unexpected response shape"):
            c.request("GET", f"{c.base_url_v3}/items/1", model=Item)

    def test_request_slice(self):
        data = {"data": [{"id": "1"}, {"id": "2"}]}
        c = _client(_auth_then(lambda r: httpx.Response(200, json=data)))
        assert [i.id for i in c.request_slice("GET", f"{c.base_url_v3}/items", Item)] == ["1", "2"]

    def test_request_slice_rejects_objects(self):
        c = _client(_auth_then(lambda r: httpx.Response(200, json={"data": {"id": "1"}})))
        with pytest.raises(APIError, match="expected a list"):
            c.request_slice("GET", f"{c.base_url_v3}/items", Item)

    def test_transport_errors_become_api_errors(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        c = _client(_auth_then(handler))
        with pytest.raises(APIError, match="connection refused"):
            c.request("GET", f"{c.base_url_v3}/items")


# ---------------------------------------------------------------------------
# GraphQL
# ---------------------------------------------------------------------------


class TestGraphQL:
    def test_returns_model(self, client, api):
        api.schedules_v2[7] = {"ID": 7, "name": "Primary", "timeZone": "UTC", "teamID": TEAM_ID}
        schedule = client.graphql("query", "schedule(ID: $ID)", ScheduleV2, {"ID": 7}, {"ID": "Int!"})
        assert schedule.id == 7
        assert schedule.time_zone == "UTC"
        sent = api.graphql_calls("schedule")[0].body
        assert sent["variables"] == {"ID": 7}
        assert sent["query"].startswith("query ($ID: Int!) { schedule(ID: $ID) {")

    def test_null_result_is_not_found(self, client):
        with pytest.raises(APIError) as exc:
            client.graphql("query", "schedule(ID: $ID)", ScheduleV2, {"ID": 1}, {"ID": "Int!"})
        assert exc.value.status_code == 404
        assert is_resource_not_found_error(exc.value)

    def test_list_result(self, client, api):
        api.schedules_v2[1] = {"ID": 1, "name": "a", "teamID": TEAM_ID}
        api.schedules_v2[2] = {"ID": 2, "name": "b", "teamID": "other"}
        result = client.graphql(
            "query", "schedules(filters: $filters)", ScheduleV2,
            {"filters": {"teamID": TEAM_ID}}, {"filters": "ScheduleFilters"},
        )
        assert [s.name for s in result] == ["a"]

    def test_errors_array(self):
        body = {"errors": [{"message": "bad input"}, {"message": "worse input"}]}
        c = _client(_auth_then(lambda r: httpx.Response(200, json=body)))
        with pytest.raises(APIError, match="bad input; worse input"):
            c.graphql("mutation", "createSchedule(input: $input)", ScheduleV2, {}, {})


class TestContextManager:
    def test_closes_http_client(self):
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with Client(ProviderConfig(refresh_token="t"), http=http):
            pass
        assert http.is_closed
