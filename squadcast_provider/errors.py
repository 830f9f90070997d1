"""Exceptions raised by the provider."""

from __future__ import annotations


class SquadcastError(Exception):
    """Base class for provider errors."""


class ConfigError(SquadcastError):
    """Invalid provider or configuration input."""


class ImportIDError(SquadcastError):
    """Malformed import identifier."""


class ResourceError(SquadcastError):
    """Invalid attribute combination detected by a resource handler."""


class DecodeError(SquadcastError):
    """A configuration tree could not be decoded into an API structure."""


class APIError(SquadcastError):
    """Error response returned by the Squadcast API."""

    def __init__(
        self,
        message: str,
        method: str = "",
        url: str = "",
        status_code: int | None = None,
    ):
        self.message = message
        self.method = method
        self.url = url
        self.status_code = status_code
        if method and url:
            super().__init__(f"{method} {url} returned an error:\n{message}")
        else:
            super().__init__(message)


class AuthenticationError(APIError):
    """The refresh token could not be exchanged for an access token."""


def is_resource_not_found_error(err: BaseException) -> bool:
    """Return True if err says the remote object does not exist."""
    if not isinstance(err, APIError):
        return False
    if err.status_code == 404:
        return True
    return "not found" in err.message.lower()
