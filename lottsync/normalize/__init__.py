"""Normalization pipeline from TheLott payloads to canonical draws."""

from __future__ import annotations

from .draws import (
    DRAW_DATE_FIELD,
    DRAW_ID_FIELD,
    PRODUCT_ID_FIELD,
    CanonicalDraw,
    normalize_draw,
    normalize_draws,
)
from .fields import FieldEdit, remove_field, rename_field, set_field
from .keys import (
    JSONValue,
    KeyTransform,
    camel_case,
    camel_case_key,
    rekey_deep,
    rekey_shallow,
    upper_first,
    upper_first_key,
)

__all__ = [
    "DRAW_DATE_FIELD",
    "DRAW_ID_FIELD",
    "PRODUCT_ID_FIELD",
    "CanonicalDraw",
    "FieldEdit",
    "JSONValue",
    "KeyTransform",
    "camel_case",
    "camel_case_key",
    "normalize_draw",
    "normalize_draws",
    "rekey_deep",
    "rekey_shallow",
    "remove_field",
    "rename_field",
    "set_field",
    "upper_first",
    "upper_first_key",
]
