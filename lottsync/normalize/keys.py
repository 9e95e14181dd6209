"""Recursive key casing for JSON-shaped values.

`rekey_deep` rewrites every mapping key at every nesting level using a
`KeyTransform`, leaving list order, nesting depth and scalar values alone. Two
transforms ship with the module: `camel_case_key` for inbound service payloads
and `upper_first_key` for the outbound search request.

Examples
--------
>>> rekey_deep({"DrawNumber": 1, "Dividends": [{"PoolTotal": 2}]}, camel_case_key)
{'drawNumber': 1, 'dividends': [{'poolTotal': 2}]}

"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

JSONValue: typ.TypeAlias = (
    dict[str, "JSONValue"] | list["JSONValue"] | str | int | float | bool | None
)
KeyTransform: typ.TypeAlias = cabc.Callable[[typ.Any, str], str]


def _starts_word(previous: str, char: str, following: str) -> bool:
    """Return True when ``char`` opens a new word after ``previous``."""
    if previous.isdigit() != char.isdigit():
        return True
    if not char.isupper():
        return False
    # "drawNumber" breaks before N; "HTTPStatus" breaks before the S of Status.
    return not previous.isupper() or following.islower()


def split_words(key: str) -> list[str]:
    """Split a key into words on separators and case or digit boundaries.

    Letters of any script count; characters without case stay in the
    current word.
    """
    words: list[str] = []
    current: list[str] = []
    for index, char in enumerate(key):
        if not char.isalnum():
            if current:
                words.append("".join(current))
                current = []
            continue
        following = key[index + 1 : index + 2]
        if current and _starts_word(current[-1], char, following):
            words.append("".join(current))
            current = []
        current.append(char)
    if current:
        words.append("".join(current))
    return words


def camel_case(key: str) -> str:
    """Return ``key`` in lowerCamelCase.

    Examples
    --------
    >>> camel_case("DrawNumber")
    'drawNumber'
    >>> camel_case("draw_date")
    'drawDate'
    >>> camel_case("HTTPStatus")
    'httpStatus'

    """
    words = split_words(key)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word.lower().capitalize() for word in tail)


def upper_first(key: str) -> str:
    """Capitalise the first character of ``key`` only."""
    return key[:1].upper() + key[1:]


def camel_case_key(value: object, key: str) -> str:
    """KeyTransform adapter for :func:`camel_case`."""
    del value
    return camel_case(key)


def upper_first_key(value: object, key: str) -> str:
    """KeyTransform adapter for :func:`upper_first`."""
    del value
    return upper_first(key)


def rekey_shallow(
    mapping: cabc.Mapping[str, typ.Any], transform: KeyTransform
) -> dict[str, typ.Any]:
    """Rewrite only the top-level keys of ``mapping``."""
    return {transform(value, key): value for key, value in mapping.items()}


def rekey_deep(value: typ.Any, transform: KeyTransform) -> typ.Any:  # noqa: ANN401
    """Return a copy of ``value`` with every mapping key rewritten.

    Mappings and lists are rebuilt at every level; other values are returned
    as they are. When two keys of one mapping transform to the same new key the
    later entry in iteration order wins. The input is never mutated.
    """
    match value:
        case cabc.Mapping():
            rekeyed: dict[str, typ.Any] = {}
            for key, item in value.items():
                new_key = transform(item, key)
                rekeyed[new_key] = rekey_deep(item, transform)
            return rekeyed
        case list():
            return [rekey_deep(item, transform) for item in value]
        case tuple():
            return tuple(rekey_deep(item, transform) for item in value)
        case _:
            return value


__all__ = [
    "JSONValue",
    "KeyTransform",
    "camel_case",
    "camel_case_key",
    "rekey_deep",
    "rekey_shallow",
    "split_words",
    "upper_first",
    "upper_first_key",
]
