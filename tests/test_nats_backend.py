import pytest

from env_vars_to_json import ParserConfig, VariableSet
from env_vars_to_json.backends import nats as nats_module
from env_vars_to_json.backends.nats import NatsBackend


class BucketNotFoundError(Exception):
    pass


class KeyNotFoundError(Exception):
    pass


class NoKeysError(Exception):
    pass


class _FakeEntry:
    def __init__(self, value: bytes | str | None) -> None:
        self.value = value
        super().__init__()


class _FakeKVBucket:
    def __init__(self, store: dict[str, bytes | None] | None = None) -> None:
        self.store: dict[str, bytes | None] = {} if store is None else store
        super().__init__()

    async def get(self, key: str) -> _FakeEntry:
        if key not in self.store:
            raise KeyNotFoundError
        return _FakeEntry(self.store[key])

    async def keys(self) -> list[str]:
        if not self.store:
            raise NoKeysError
        return list(self.store)


class _FakeJetStream:
    def __init__(self, buckets: dict[str, _FakeKVBucket]) -> None:
        self.buckets = buckets
        super().__init__()

    async def key_value(self, bucket: str) -> _FakeKVBucket:
        if bucket not in self.buckets:
            raise BucketNotFoundError
        return self.buckets[bucket]


class _FakeNatsClient:
    def __init__(self, buckets: dict[str, _FakeKVBucket] | None = None) -> None:
        super().__init__()
        self._js = _FakeJetStream({} if buckets is None else buckets)
        self.closed = False

    def jetstream(self) -> _FakeJetStream:
        return self._js

    async def close(self) -> None:
        self.closed = True


def _backend(store: dict[str, bytes | None]) -> NatsBackend:
    return NatsBackend(client=_FakeNatsClient({"env_vars": _FakeKVBucket(store)}), bucket="env_vars")


@pytest.mark.asyncio
async def test_nats_backend_get_existing_and_missing() -> None:
    backend = _backend({"app.user": b"alice"})

    assert await backend.get("app.user") == "alice"
    assert await backend.get("app.missing") is None


@pytest.mark.asyncio
async def test_nats_backend_list_keys_filters_and_sorts() -> None:
    backend = _backend({"app.z": b"1", "app.a": b"2", "other.x": b"3"})

    assert await backend.list_keys("app.") == ["app.a", "app.z"]


@pytest.mark.asyncio
async def test_nats_backend_empty_bucket_lists_nothing() -> None:
    backend = _backend({})

    assert await backend.list_keys("app.") == []
    assert await backend.items("app.") == []


@pytest.mark.asyncio
async def test_nats_backend_items_skip_deleted_entries() -> None:
    backend = _backend({"app.b": b"2", "app.gone": None, "app.a": b"1", "other.x": b"3"})

    assert await backend.items("app.") == [("app.a", "1"), ("app.b", "2")]


@pytest.mark.asyncio
async def test_nats_backend_feeds_variable_set() -> None:
    backend = _backend({"app.db.port": b"5432", "app.db.hosts.0": b"primary", "app.debug": b"false"})
    variables = VariableSet(ParserConfig(prefix="app.", separator="."))

    assert await variables.parse_backend(backend) == {"db": {"port": 5432, "hosts": ["primary"]}, "debug": False}


@pytest.mark.asyncio
async def test_nats_backend_missing_bucket_raises_runtime_error() -> None:
    backend = NatsBackend(client=_FakeNatsClient({}), bucket="env_vars")

    with pytest.raises(RuntimeError, match="jetstream KV bucket 'env_vars' is not available"):
        _ = await backend.get("app.user")


@pytest.mark.asyncio
async def test_nats_backend_close_closes_client() -> None:
    client = _FakeNatsClient({"env_vars": _FakeKVBucket()})
    backend = NatsBackend(client=client, bucket="env_vars")

    await backend.close()
    assert client.closed is True


@pytest.mark.asyncio
async def test_nats_backend_close_without_client_is_noop() -> None:
    backend = NatsBackend(client=None)
    await backend.close()


@pytest.mark.asyncio
async def test_nats_backend_requires_dependency_without_injected_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(nats_module, "nats_module", None)
    backend = NatsBackend(client=None)

    with pytest.raises(RuntimeError, match="nats-py dependency is required"):
        _ = await backend.get("app.user")
