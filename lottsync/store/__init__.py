"""Document store for canonical draws."""

from __future__ import annotations

from .errors import DocumentPathError, DrawPersistError, TimezoneAwareRequiredError
from .services import DEFAULT_MAX_CONCURRENT_WRITES, DrawDocumentStore, draw_document_path
from .storage import Base, DrawDocument, UTCDateTime, init_draw_storage

__all__ = [
    "DEFAULT_MAX_CONCURRENT_WRITES",
    "Base",
    "DocumentPathError",
    "DrawDocument",
    "DrawDocumentStore",
    "DrawPersistError",
    "TimezoneAwareRequiredError",
    "UTCDateTime",
    "draw_document_path",
    "init_draw_storage",
]
