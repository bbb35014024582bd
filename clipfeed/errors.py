"""Service errors carrying an HTTP status code, a machine reason and a message."""

from __future__ import annotations


class ServiceError(Exception):
    """An error reported to clients.

    Two errors are equal when they share the status code and the reason;
    the message is only descriptive.
    """

    def __init__(self, code: int, reason: str, message: str) -> None:
        super().__init__(code, reason, message)
        self.code = code
        self.reason = reason
        self.message = message

    def __str__(self) -> str:
        return f"error: code = {self.code} reason = {self.reason} message = {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceError):
            return NotImplemented
        return self.code == other.code and self.reason == other.reason

    def __hash__(self) -> int:
        return hash((self.code, self.reason))


def bad_request(reason: str, message: str) -> ServiceError:
    """Build an error for a malformed or disallowed request."""
    return ServiceError(400, reason, message)


def forbidden(reason: str, message: str) -> ServiceError:
    """Build an error for a request the caller may not make."""
    return ServiceError(403, reason, message)


def not_found(reason: str, message: str) -> ServiceError:
    """Build an error for a missing resource."""
    return ServiceError(404, reason, message)


ALREADY_FOLLOW = bad_request("ALREADY_FOLLOW", "already followed")
NOT_FOLLOW = bad_request("NOT_FOLLOW", "not followed")

PERMISSION_DENIED = forbidden("PERMISSION_DENIED", "permission denied")
ROLE_NOT_FOUND = not_found("ROLE_NOT_FOUND", "role not found")
INVALID_ROLE = bad_request("INVALID_ROLE", "invalid role")