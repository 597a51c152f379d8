"""
Error taxonomy shared by services and the API layer.

Upstream errors carry whatever the failing attempt produced: a status code
and body when a response came back, or neither when the connection failed.
"""
from typing import Any, Optional


class CallerInputError(ValueError):
    """Missing or invalid caller-supplied parameters. Never retried."""


class RouteNotFoundError(CallerInputError):
    """The router answered but could not connect the requested points."""


class ConfigurationError(RuntimeError):
    """A required upstream credential or setting is missing."""


class UpstreamError(Exception):
    """Base class for failures talking to a third-party API."""

    retryable = False

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: str = "",
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url
        self.body = body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class UpstreamAuthError(UpstreamError):
    """Upstream rejected our credentials (401/403)."""


class UpstreamRateLimited(UpstreamError):
    """Upstream throttled us (429)."""


class UpstreamClientError(UpstreamError):
    """Any other 4xx: the request itself was wrong."""


class UpstreamServerError(UpstreamError):
    """5xx response, or no response at all."""

    retryable = True


def error_for_status(status_code: Optional[int], message: str, url: str = "", body: Any = None) -> UpstreamError:
    """Build the UpstreamError subclass matching a status code (None = no response)."""
    if status_code is None or status_code >= 500:
        cls = UpstreamServerError
    elif status_code in (401, 403):
        cls = UpstreamAuthError
    elif status_code == 429:
        cls = UpstreamRateLimited
    else:
        cls = UpstreamClientError
    return cls(message, status_code=status_code, url=url, body=body)
