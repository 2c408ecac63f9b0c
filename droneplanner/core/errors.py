#!/usr/bin/env python3


class PlannerError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequestError(PlannerError):
    status_code = 400
    default_detail = "Bad request"


class ValidationError(BadRequestError):
    """A document failed a field-level rule before being persisted."""


class NotFoundError(PlannerError):
    # Also raised when the document exists but belongs to another user
    status_code = 404
    default_detail = "Not found"


class ConflictError(PlannerError):
    status_code = 409
    default_detail = "Conflict"
