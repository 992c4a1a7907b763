"""Read variables from a NATS JetStream key/value bucket."""

from __future__ import annotations

import asyncio
from typing import Any, override


try:
    import nats as nats_module
except ImportError:  # pragma: no cover - exercised when dependency is absent
    nats_module = None

from .protocol import Backend


# nats-py signals absent buckets, keys and empty buckets with these classes
_ABSENT_ERRORS = frozenset({"BucketNotFoundError", "KeyNotFoundError", "NoKeysError"})


def _is_absent(error: Exception) -> bool:
    return type(error).__name__ in _ABSENT_ERRORS


def _entry_text(entry: Any) -> str | None:
    raw = entry.value
    if raw is None:
        return None
    return raw.decode() if isinstance(raw, bytes) else raw


class NatsBackend(Backend):
    """Variables stored one per entry in a JetStream KV bucket.

    NATS subjects only allow ``[-/_=.a-zA-Z0-9]`` in key names, so a bucket
    usually holds ``app.db.port`` style keys parsed with ``separator="."``.
    The bucket must already exist.
    """

    def __init__(
        self,
        url: str = "nats://localhost:4222",
        bucket: str = "env_vars",
        *,
        client: Any | None = None,
    ) -> None:
        """Point the backend at ``bucket`` on ``url``, or on an already connected ``client``."""
        super().__init__()
        self._url = url
        self._bucket_name = bucket
        self._client = client
        self._bucket: Any | None = None

    async def _connect(self) -> Any:
        if self._client is None:
            if nats_module is None:
                msg = "nats-py dependency is required for NatsBackend; install with `pip install env-vars-to-json[nats]`"
                raise RuntimeError(msg)
            self._client = await nats_module.connect(servers=[self._url])
        return self._client

    async def _open_bucket(self) -> Any:
        if self._bucket is not None:
            return self._bucket

        client = await self._connect()
        try:
            self._bucket = await client.jetstream().key_value(self._bucket_name)
        except Exception as error:
            if not _is_absent(error):
                raise
            msg = f"jetstream KV bucket '{self._bucket_name}' is not available"
            raise RuntimeError(msg) from error
        return self._bucket

    async def _read(self, bucket: Any, key: str) -> str | None:
        try:
            entry = await bucket.get(key)
        except Exception as error:
            if _is_absent(error):
                return None
            raise
        return _entry_text(entry)

    @override
    async def get(self, key: str) -> str | None:
        return await self._read(await self._open_bucket(), key)

    @override
    async def list_keys(self, prefix: str) -> list[str]:
        bucket = await self._open_bucket()
        try:
            keys = await bucket.keys()
        except Exception as error:
            if _is_absent(error):
                return []
            raise
        return sorted(key for key in keys or () if key.startswith(prefix))

    @override
    async def items(self, prefix: str = "") -> list[tuple[str, str]]:
        """Read every matching entry concurrently, skipping deleted ones."""
        bucket = await self._open_bucket()
        keys = await self.list_keys(prefix)
        values = await asyncio.gather(*(self._read(bucket, key) for key in keys))
        return [(key, value) for key, value in zip(keys, values, strict=True) if value is not None]

    @override
    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
