"""Key decoding utilities for separator-delimited variable names."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias

from env_vars_to_json.errors import MalformedPathError, PrefixMismatchError


_INDEX_PATTERN = re.compile(r"\+?[0-9]+")
_MAX_INDEX = 2**64 - 1
_MAX_INDEX_DIGITS = len(str(_MAX_INDEX))


@dataclass(frozen=True, slots=True)
class Field:
    """Object field segment."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Index:
    """Array index segment."""

    position: int

    def __str__(self) -> str:
        return str(self.position)


Segment: TypeAlias = Field | Index
KeyPath: TypeAlias = tuple[Segment, ...]


def classify_segment(token: str) -> Segment:
    """Return an Index when the token is an unsigned integer, a Field otherwise."""
    if _INDEX_PATTERN.fullmatch(token):
        digits = token.lstrip("+").lstrip("0") or "0"
        if len(digits) <= _MAX_INDEX_DIGITS and int(digits) <= _MAX_INDEX:
            return Index(int(digits))
    return Field(token)


def decode_key(key: str, separator: str = "__") -> KeyPath:
    """Split a key on the separator into lowercase, classified segments."""
    if not separator:
        msg = "separator must not be empty"
        raise ValueError(msg)

    path = tuple(classify_segment(part.lower()) for part in key.split(separator))
    if isinstance(path[0], Index):
        msg = f"first key part cannot be a number: {key!r}"
        raise MalformedPathError(msg)
    return path


def encode_key(path: KeyPath, separator: str = "__") -> str:
    """Join segments back into a (lowercase) key."""
    if not path:
        msg = "at least one key part is required"
        raise ValueError(msg)
    return separator.join(str(segment) for segment in path)


class KeyMapper:
    """Map between prefixed variable keys and decoded key paths."""

    def __init__(self, prefix: str | None = None, separator: str = "__") -> None:
        super().__init__()
        if not separator:
            msg = "separator must not be empty"
            raise ValueError(msg)

        self.prefix = prefix
        self.separator = separator

    def matches(self, key: str) -> bool:
        """Return True when a key carries the configured prefix."""
        return self.prefix is None or key.startswith(self.prefix)

    def strip_prefix(self, key: str) -> str:
        """Remove the configured prefix from a key."""
        if self.prefix is None:
            return key
        if not key.startswith(self.prefix):
            msg = f"key {key!r} does not match prefix {self.prefix!r}"
            raise PrefixMismatchError(msg, key=key)
        return key.removeprefix(self.prefix)

    def decode(self, relative_key: str) -> KeyPath:
        """Decode an already stripped key into segments."""
        return decode_key(relative_key, self.separator)

    def full_key(self, path: KeyPath) -> str:
        """Build the prefixed key a path would be read from (uppercased)."""
        relative = encode_key(path, self.separator).upper()
        return relative if self.prefix is None else self.prefix + relative
