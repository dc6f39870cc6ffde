"""
Error taxonomy for controller conversations.

Every request-scoped failure derives from ControllerError and renders a
human-readable ``message`` naming the step where it happened:

- TransportError: TCP/TLS/DNS failure or timeout reaching the controller
- UpstreamStatusError: controller answered with a non-2xx status
- SchemaError: body was not JSON or lacked the expected fields
- NotFoundError: no wired client matched the requested MAC
"""

from enum import Enum


class ControllerStep(str, Enum):
    """Steps of the reset sequence, valued by their user-facing phrase."""

    LOGIN = "Error logging in to UniFi server"
    SITES = "Error getting list of available sites from UniFi server"
    CLIENTS = "Error getting list of clients from UniFi server"
    COMMAND = "Error requesting reset of switch port"


class ControllerError(Exception):
    """Base class for failures talking to the UniFi controller."""

    def __init__(self, detail: str, step: ControllerStep | None = None):
        super().__init__(detail)
        self.detail = detail
        self.step = step

    @property
    def prefix(self) -> str:
        return self.step.value if self.step else "Error talking to UniFi server"

    @property
    def message(self) -> str:
        return f"{self.prefix}: {self.detail}"

    def __str__(self) -> str:
        return self.message


class TransportError(ControllerError):
    """Controller could not be reached or the call timed out."""


class UpstreamStatusError(ControllerError):
    """Controller returned a non-2xx status."""

    def __init__(
        self,
        status: int,
        reason: str | None,
        body: str,
        step: ControllerStep | None = None,
    ):
        self.status = status
        self.reason = reason or ""
        self.body = body
        super().__init__(f"{self.status_line}: {body}", step)

    @property
    def status_line(self) -> str:
        return f"{self.status} {self.reason}".strip()

    @property
    def message(self) -> str:
        return (
            f"{self.prefix}, returned status code: {self.status_line}. "
            f"Returned message: {self.body}"
        )


class SchemaError(ControllerError):
    """Response body was not valid JSON or was missing expected fields."""

    @property
    def message(self) -> str:
        return f"{self.prefix} - processing JSON: {self.detail}"


class NotFoundError(ControllerError):
    """No wired client on any site matched the requested MAC."""

    def __init__(self, mac: str):
        self.mac = mac
        super().__init__(f"no wired client with mac address {mac}")

    @property
    def message(self) -> str:
        return f"No devices found on UniFi server with mac address {self.mac}"
