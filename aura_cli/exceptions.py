"""
Error taxonomy for the Aura CLI.

Every failure the gateway, authentication provider or operation tracker can
report is a subclass of :class:`AuraError`. None of them are handled inside
the library; the command boundary formats them and picks the exit code.
"""

from typing import Any, Dict, List, Optional


class AuraError(Exception):
    """Base class for all Aura CLI errors."""


class ConfigError(AuraError, ValueError):
    """Configuration value is missing or invalid."""


class AuthError(AuraError):
    """No usable credential or token is available."""


class TransportError(AuraError):
    """Network level failure: connection refused, DNS failure, transport timeout."""

    def __init__(self, method: str, url: str, reason: str):
        super().__init__(f"{method} {url} failed: {reason}")
        self.method = method
        self.url = url
        self.reason = reason


class MalformedResponse(AuraError):
    """A response body could not be decoded into the expected envelope."""

    summary = "Malformed response"

    def __init__(self, status_code: int, detail: str, body: str = ""):
        super().__init__(f"{self.summary} (HTTP {status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail
        self.body = body


class MalformedErrorResponse(MalformedResponse):
    """A non-2xx response whose body is not a valid error envelope."""

    summary = "Request failed with an unreadable error body"


class RemoteError(AuraError):
    """
    Non-2xx response carrying a decodable error envelope.

    Attributes:
        status_code: HTTP status code of the response
        messages: Every reported ``message``, in response order
        errors: The raw error entries (``message``, ``reason``, ``field``)
    """

    def __init__(
        self,
        status_code: int,
        messages: List[str],
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__("; ".join(messages) if messages else f"Request failed with HTTP {status_code}")
        self.status_code = status_code
        self.messages = messages
        self.errors = errors or []


class OperationFailed(AuraError):
    """Polling observed a terminal failure status."""

    def __init__(self, status: str, resource: Optional[Dict[str, Any]] = None):
        super().__init__(f"Operation failed with status '{status}'")
        self.status = status
        self.resource = resource


class PollTimeout(AuraError):
    """Polling used its whole attempt budget without reaching a terminal status."""

    def __init__(self, last_status: Optional[str], attempts: int):
        super().__init__(
            f"Gave up waiting after {attempts} attempts, last status was '{last_status}'"
        )
        self.last_status = last_status
        self.attempts = attempts
