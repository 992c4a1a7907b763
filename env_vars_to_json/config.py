"""Parser configuration."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, TypeAlias


if TYPE_CHECKING:
    from collections.abc import Iterable


PatternLike: TypeAlias = str | re.Pattern[str]


def _compile_all(patterns: Iterable[PatternLike]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as error:
            msg = f"invalid filter pattern {pattern!r}: {error}"
            raise ValueError(msg) from error
    return tuple(compiled)


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Options controlling how variables are filtered and unflattened.

    Parameters
    ----------
    prefix
        Only keys starting with this literal are considered; it is stripped
        before decoding.
    separator
        Delimiter between key path segments.
    include
        Allow-list of patterns, searched in the original (prefixed) key. One
        must match when the list is not empty.
    exclude
        Deny-list of patterns, searched in the original key. None may match.
    seed
        Object to merge the variables into. It is copied, never mutated.
    strict
        Abort on the first failing variable. When False, failing variables
        are skipped and reported.
    """

    prefix: str | None = None
    separator: str = "__"
    include: tuple[re.Pattern[str], ...] = field(default=())
    exclude: tuple[re.Pattern[str], ...] = field(default=())
    seed: dict[str, Any] | None = None
    strict: bool = True

    def __post_init__(self) -> None:
        if not self.separator:
            msg = "separator must not be empty"
            raise ValueError(msg)
        if self.prefix == "":
            object.__setattr__(self, "prefix", None)
        if self.seed is not None and not isinstance(self.seed, dict):
            msg = f"seed must be an object, got {type(self.seed).__name__}"
            raise ValueError(msg)
        object.__setattr__(self, "include", _compile_all(self.include))
        object.__setattr__(self, "exclude", _compile_all(self.exclude))

    def with_prefix(self, prefix: str | None) -> ParserConfig:
        """Return a copy using ``prefix``."""
        return replace(self, prefix=prefix)

    def with_separator(self, separator: str) -> ParserConfig:
        """Return a copy using ``separator``."""
        return replace(self, separator=separator)

    def with_include(self, *patterns: PatternLike) -> ParserConfig:
        """Return a copy with the given allow-list patterns."""
        return replace(self, include=patterns)

    def with_exclude(self, *patterns: PatternLike) -> ParserConfig:
        """Return a copy with the given deny-list patterns."""
        return replace(self, exclude=patterns)

    def with_seed(self, seed: dict[str, Any] | None) -> ParserConfig:
        """Return a copy merging into ``seed``."""
        return replace(self, seed=seed)

    def with_strict(self, strict: bool) -> ParserConfig:  # noqa: FBT001
        """Return a copy with the given strictness."""
        return replace(self, strict=strict)

    def new_tree(self) -> dict[str, Any]:
        """Return a fresh result tree: a deep copy of the seed, or an empty object."""
        if self.seed is None:
            return {}
        return copy.deepcopy(self.seed)
