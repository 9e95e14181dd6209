"""Draw store error types."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class TimezoneAwareRequiredError(ValueError):
    """Raised when a naive datetime reaches a timestamp column."""

    def __init__(self, context: str) -> None:
        """Attach a consistent message for the failing context."""
        super().__init__(f"{context} must be timezone aware")

    @classmethod
    def for_draw_date(cls) -> TimezoneAwareRequiredError:
        """Return an error indicating a draw date was naive."""
        return cls("draw date")


class DocumentPathError(ValueError):
    """Raised when a draw cannot be addressed by a document path."""

    @classmethod
    def missing(cls, field: str) -> DocumentPathError:
        """Return an error for a draw lacking a path component."""
        return cls(f"draw has no usable {field!r} for its document path")

    @classmethod
    def invalid_segment(cls, field: str, value: str) -> DocumentPathError:
        """Return an error for a path component containing a separator."""
        return cls(f"draw field {field!r} value {value!r} contains '/'")


class DrawPersistError(RuntimeError):
    """Raised when one or more concurrent draw writes fail.

    Attributes
    ----------
    exceptions
        The underlying failures, in draw order.

    """

    exceptions: tuple[Exception, ...]

    def __init__(self, exceptions: cabc.Sequence[Exception]) -> None:
        """Initialise with the failures collected from the write tasks."""
        self.exceptions = tuple(exceptions)
        super().__init__(
            f"Persisting draws failed: {len(self.exceptions)} error(s) occurred"
        )
