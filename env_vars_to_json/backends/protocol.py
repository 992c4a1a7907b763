"""Backend interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Backend(ABC):
    """Async, read-only source of raw key/value variables."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return raw value for key, or None when key does not exist."""

    @abstractmethod
    async def list_keys(self, prefix: str) -> list[str]:
        """List all keys beginning with prefix."""

    @abstractmethod
    async def close(self) -> None:
        """Close any backend resources."""

    async def items(self, prefix: str = "") -> list[tuple[str, str]]:
        """Return every ``(key, value)`` pair whose key begins with prefix.

        Keys removed between listing and reading are skipped.
        """
        pairs: list[tuple[str, str]] = []
        for key in await self.list_keys(prefix):
            value = await self.get(key)
            if value is None:
                continue
            pairs.append((key, value))
        return pairs
