"""HTTP client for the Squadcast REST and GraphQL APIs."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .. import __version__
from ..config import ProviderConfig
from ..errors import APIError, AuthenticationError
from .graphql import build_operation, field_name

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Client:
    """Authenticated access to one Squadcast organization.

    The refresh token is exchanged for an access token on the first request.
    Responses are unwrapped from the ``{"data": ...}`` envelope and validated
    into the requested pydantic model.

    Example:
        client = Client(ProviderConfig(refresh_token="..."))
        schedule = client.request("GET", f"{client.base_url_v3}/schedules/1", model=Schedule)
    """

    def __init__(self, config: ProviderConfig, http: httpx.Client | None = None):
        self.config = config
        self.user_agent = f"squadcast-provider/{__version__}"
        self.access_token: str | None = None
        self.http = http or httpx.Client(timeout=config.timeout)

    @property
    def base_url_v3(self) -> str:
        return self.config.api_base_v3

    @property
    def base_url_v4(self) -> str:
        return self.config.api_base_v4

    def authenticate(self) -> str:
        """Exchange the refresh token for an access token."""
        url = f"{self.config.auth_base}/oauth/access-token"
        logger.debug("Requesting access token from %s", url)
        try:
            resp = self.http.get(
                url,
                headers={
                    "X-Refresh-Token": self.config.refresh_token,
                    "User-Agent": self.user_agent,
                },
            )
        except httpx.HTTPError as e:
            raise AuthenticationError(str(e), "GET", url) from e

        if resp.status_code > 299:
            raise AuthenticationError(_error_message(resp), "GET", url, resp.status_code)

        data = _json(resp).get("data") or {}
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("access token missing from response", "GET", url, resp.status_code)

        self.access_token = token
        return token

    def _headers(self) -> dict[str, str]:
        if self.access_token is None:
            self.authenticate()
        return {
            "Authorization": f"Bearer {self.access_token}",
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _send(
        self,
        method: str,
        url: str,
        payload: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        body = _jsonable(payload) if payload is not None else None
        try:
            resp = self.http.request(method, url, json=body, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise APIError(str(e), method, url) from e
        logger.debug("%s %s -> %d", method, url, resp.status_code)
        return resp

    def request(
        self,
        method: str,
        url: str,
        payload: Any = None,
        model: type[T] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a REST call and return ``data`` (validated into model if given)."""
        resp = self._send(method, url, payload, params)
        if resp.status_code > 299:
            raise APIError(_error_message(resp), method, url, resp.status_code)

        if not resp.content:
            return None
        body = _json(resp)
        data = body.get("data") if isinstance(body, dict) else body
        if model is None or data is None:
            return data
        return _validate(model, data, method, url)

    def request_slice(
        self,
        method: str,
        url: str,
        model: type[T],
        payload: Any = None,
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        """Make a REST call whose ``data`` is a list of model objects."""
        data = self.request(method, url, payload, params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise APIError(f"expected a list response, got {type(data).__name__}", method, url)
        return [_validate(model, item, method, url) for item in data]

    def graphql(
        self,
        kind: str,
        field_call: str,
        model: type[T],
        variables: dict[str, Any] | None = None,
        var_types: dict[str, str] | None = None,
    ) -> Any:
        """Run a GraphQL query or mutation whose selection set comes from model.

        Returns a model instance, or a list of them when the field returns a
        list. A null result is reported as a not-found APIError.
        """
        url = self.config.graphql_url
        query = build_operation(kind, field_call, model, var_types or {})
        key = field_name(field_call)
        logger.debug("GraphQL %s %s", kind, key)

        resp = self._send("POST", url, {"query": query, "variables": variables or {}})
        if resp.status_code > 299:
            raise APIError(_error_message(resp), "POST", url, resp.status_code)

        body = _json(resp)
        errors = body.get("errors") or []
        if errors:
            message = "; ".join(str(e.get("message", e)) for e in errors)
            raise APIError(message, "POST", url, resp.status_code)

        data = (body.get("data") or {}).get(key)
        if data is None:
            raise APIError(f"{key}: not found", "POST", url, 404)
        if isinstance(data, list):
            return [_validate(model, item, "POST", url) for item in data]
        return _validate(model, data, "POST", url)

    def close(self) -> None:
        """Close the HTTP client."""
        self.http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, mode="json")
    if isinstance(payload, dict):
        return {k: _jsonable(v) for k, v in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_jsonable(v) for v in payload]
    return payload


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {}


def _error_message(resp: httpx.Response) -> str:
    """Extract the message from a ``{"meta": {"error_message": ...}}`` envelope."""
    body = _json(resp)
    if isinstance(body, dict):
        meta = body.get("meta")
        if isinstance(meta, dict) and meta.get("error_message"):
            return str(meta["error_message"])
        if body.get("error"):
            return str(body["error"])
        if body.get("message"):
            return str(body["message"])
    return resp.text or resp.reason_phrase


def _validate(model: type[T], data: Any, method: str, url: str) -> T:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise APIError(f"unexpected response shape: {e}", method, url) from e
