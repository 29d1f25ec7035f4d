"""
Structured errors returned to clients as ``{"error": message}`` bodies.

- BadRequestError: missing or invalid client input (400)
- NotFoundError / RecipeNotFoundError: nothing to return (404)
- UpstreamError / MissingCredentialError: provider failure or no key (502)
"""

from typing import Any


class MealMatchError(Exception):
    """Base error carrying an HTTP status and extra body fields."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_body(self) -> dict:
        return {"error": self.message, **self.extra}


class BadRequestError(MealMatchError):
    status_code = 400


class NotFoundError(MealMatchError):
    status_code = 404


class RecipeNotFoundError(NotFoundError):
    def __init__(self, message: str = "Recipe not found", **extra: Any):
        super().__init__(message, **extra)


class UpstreamError(MealMatchError):
    """A provider call failed (non-2xx, transport error or bad payload)."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None, **extra: Any):
        super().__init__(message, **extra)
        self.upstream_status = upstream_status


class MissingCredentialError(UpstreamError):
    pass
