"""JSON:API parameter exceptions.

All exceptions inherit from ``JsonApiError`` and provide ``to_dict()``
for API-friendly error responses. Store failures (unknown columns,
unknown relationships, driver errors) are never wrapped.
"""

from __future__ import annotations

from typing import Any


class JsonApiError(Exception):
    """Root exception for the JSON:API parameter translator."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ParameterShapeError(JsonApiError, ValueError):
    """A request parameter has the wrong shape (e.g. a scalar where a mapping
    is required).

    Raised while compiling, before the session is touched.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_PARAMETER",
            "message": self.message,
            "path": self.path,
        }


class UnsupportedFilterValueError(ParameterShapeError):
    """Raised when an ordering comparison (lt/lte/gt/gte) gets a value list."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_FILTER_VALUE",
            "message": self.message,
            "path": self.path,
        }


class ConfigurationError(JsonApiError):
    """Raised when registration-time configuration is invalid."""


__all__: list[str] = [
    "ConfigurationError",
    "JsonApiError",
    "ParameterShapeError",
    "UnsupportedFilterValueError",
]
