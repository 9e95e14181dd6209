"""Errors raised by the TheLott results client."""

from __future__ import annotations


class TheLottAPIError(RuntimeError):
    """Raised when the results service returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> TheLottAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"TheLott results search HTTP {status_code}", status_code=status_code)


class TheLottResponseShapeError(RuntimeError):
    """Raised when a search response lacks the expected structure."""

    @classmethod
    def missing(cls, field: str) -> TheLottResponseShapeError:
        """Return an error for a missing or mistyped response field."""
        return cls(f"TheLott search response missing expected field: {field}")
