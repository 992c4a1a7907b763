"""Turn a flat set of key/value variables into one nested tree."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from .coercion import coerce
from .config import ParserConfig
from .errors import ParseError
from .key_mapping import KeyMapper, splice


if TYPE_CHECKING:
    from collections.abc import Iterable

    from .backends import Backend


logger = logging.getLogger(__name__)

Pairs: TypeAlias = "Mapping[str, str] | Iterable[tuple[str, str]]"


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Tree built from the variables plus the errors of skipped variables."""

    tree: dict[str, Any]
    errors: tuple[ParseError, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True when every variable was applied."""
        return not self.errors


def _as_pairs(pairs: Pairs) -> Iterable[tuple[str, str]]:
    if isinstance(pairs, Mapping):
        return pairs.items()
    return pairs


class VariableSet:
    """Filter, order and splice variables into a result tree."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        super().__init__()
        self.config = ParserConfig() if config is None else config
        self._mapper = KeyMapper(prefix=self.config.prefix, separator=self.config.separator)

    def is_key_valid(self, key: str) -> bool:
        """Check a key against the include and exclude patterns."""
        include = self.config.include
        if include and not any(pattern.search(key) for pattern in include):
            return False

        exclude = self.config.exclude
        return not (exclude and any(pattern.search(key) for pattern in exclude))

    def preprocess(self, pairs: Pairs) -> list[tuple[str, str]]:
        """Filter variables, strip the prefix and sort by key, longest paths first.

        Descending order puts ``STRUCT__INT`` before ``STRUCT`` so deeper
        structure is already in place when an ancestor key is applied.
        """
        selected: list[tuple[str, str]] = []
        for key, value in _as_pairs(pairs):
            if not self._mapper.matches(key):
                continue
            if not self.is_key_valid(key):
                logger.debug("variable %s filtered out", key)
                continue
            selected.append((self._mapper.strip_prefix(key), value))

        selected.sort(key=lambda pair: pair[0], reverse=True)
        return selected

    def apply(self, tree: dict[str, Any], key: str, raw_value: str) -> None:
        """Decode, coerce and splice a single (stripped) variable into ``tree``."""
        path = self._mapper.decode(key)
        value = coerce(raw_value)
        splice(tree, path, value)
        logger.debug("spliced %s = %r", key, value)

    def collect(self, pairs: Pairs) -> ParseResult:
        """Build the tree and return it with the errors of skipped variables.

        In strict mode the first error is raised instead and no tree is
        returned.
        """
        variables = self.preprocess(pairs)
        tree = self.config.new_tree()
        errors: list[ParseError] = []

        for key, raw_value in variables:
            try:
                self.apply(tree, key, raw_value)
            except ParseError as error:
                if error.key is None:
                    error.key = key
                if self.config.strict:
                    raise
                logger.warning("skipping variable: %s", error)
                errors.append(error)

        logger.info("parsed %d variables (%d skipped)", len(variables), len(errors))
        return ParseResult(tree=tree, errors=tuple(errors))

    def parse(self, pairs: Pairs) -> dict[str, Any]:
        """Return the tree built from ``pairs``."""
        return self.collect(pairs).tree

    def parse_env(self, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Return the tree built from the process environment (or ``environ``)."""
        return self.parse(os.environ if environ is None else environ)

    async def parse_backend(self, backend: Backend) -> dict[str, Any]:
        """Return the tree built from the variables stored in ``backend``."""
        pairs = await backend.items(self.config.prefix or "")
        return self.parse(pairs)


def parse(pairs: Pairs, config: ParserConfig | None = None) -> dict[str, Any]:
    """Unflatten ``pairs`` into a nested tree."""
    return VariableSet(config).parse(pairs)


def parse_env(environ: Mapping[str, str] | None = None, config: ParserConfig | None = None) -> dict[str, Any]:
    """Unflatten the process environment into a nested tree."""
    return VariableSet(config).parse_env(environ)


def load(backend: Backend, config: ParserConfig | None = None) -> dict[str, Any]:
    """Read every variable from ``backend``, close it and return the tree."""

    async def _run() -> dict[str, Any]:
        try:
            return await VariableSet(config).parse_backend(backend)
        finally:
            await backend.close()

    return asyncio.run(_run())
