"""In-memory and process environment backends."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, override

from .protocol import Backend


if TYPE_CHECKING:
    from collections.abc import Mapping


class InMemoryBackend(Backend):
    """Backend over a plain dictionary, for local development and tests."""

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._store: dict[str, str] = {} if data is None else dict(data)

    @override
    async def get(self, key: str) -> str | None:
        """Return raw value for key, or None when key does not exist."""
        return self._store.get(key)

    @override
    async def list_keys(self, prefix: str) -> list[str]:
        """List all keys beginning with prefix in sorted order."""
        return sorted(key for key in self._store if key.startswith(prefix))

    @override
    async def close(self) -> None:
        """Release backend resources."""
        return


class EnvironmentBackend(Backend):
    """Backend reading the process environment.

    The environment is read live on every call; pass ``environ`` to read a
    fixed mapping instead.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._environ = os.environ if environ is None else environ

    @override
    async def get(self, key: str) -> str | None:
        """Return the variable value, or None when it is not set."""
        return self._environ.get(key)

    @override
    async def list_keys(self, prefix: str) -> list[str]:
        """List all variable names beginning with prefix in sorted order."""
        return sorted(key for key in self._environ if key.startswith(prefix))

    @override
    async def close(self) -> None:
        """Nothing to release."""
        return
