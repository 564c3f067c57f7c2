"""
issue_tracker.services.errors

Service-level failures that are not identity/authorization conditions.
"""

from __future__ import annotations


class ServiceError(Exception):
    code = "SERVICE_ERROR"
    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ServiceError):
    code = "NOT_FOUND"
    default_message = "Not found"


class Conflict(ServiceError):
    code = "CONFLICT"
    default_message = "Already exists"
