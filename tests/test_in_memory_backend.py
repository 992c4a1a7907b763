import pytest

from env_vars_to_json import ParserConfig, VariableSet, load
from env_vars_to_json.backends.in_memory import EnvironmentBackend, InMemoryBackend


@pytest.mark.asyncio
async def test_get_existing_and_missing() -> None:
    backend = InMemoryBackend({"APP__PORT": "8080"})
    assert await backend.get("APP__PORT") == "8080"
    assert await backend.get("missing") is None


@pytest.mark.asyncio
async def test_list_keys_filters_by_prefix_and_sorts() -> None:
    backend = InMemoryBackend({"APP__Z": "1", "APP__A": "2", "OTHER__X": "3"})

    assert await backend.list_keys("APP__") == ["APP__A", "APP__Z"]
    assert await backend.list_keys("OTHER__") == ["OTHER__X"]
    assert await backend.list_keys("missing") == []


@pytest.mark.asyncio
async def test_items_returns_pairs_under_prefix() -> None:
    backend = InMemoryBackend({"APP__Z": "1", "APP__A": "2", "OTHER__X": "3"})
    assert await backend.items("APP__") == [("APP__A", "2"), ("APP__Z", "1")]
    assert len(await backend.items()) == 3


@pytest.mark.asyncio
async def test_backend_data_is_copied() -> None:
    data = {"APP__A": "1"}
    backend = InMemoryBackend(data)
    data["APP__B"] = "2"
    assert await backend.list_keys("APP__") == ["APP__A"]


@pytest.mark.asyncio
async def test_close_is_noop() -> None:
    backend = InMemoryBackend({"k": "v"})
    await backend.close()
    assert await backend.get("k") == "v"


@pytest.mark.asyncio
async def test_environment_backend_reads_injected_mapping() -> None:
    backend = EnvironmentBackend({"APP__B": "2", "APP__A": "1", "HOME": "/root"})
    assert await backend.items("APP__") == [("APP__A", "1"), ("APP__B", "2")]
    assert await backend.get("HOME") == "/root"
    await backend.close()


@pytest.mark.asyncio
async def test_environment_backend_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    backend = EnvironmentBackend()
    monkeypatch.setenv("BACKENDTEST__VALUE", "x")
    assert await backend.items("BACKENDTEST__") == [("BACKENDTEST__VALUE", "x")]


@pytest.mark.asyncio
async def test_parse_backend_builds_tree() -> None:
    backend = InMemoryBackend({"APP__DB__HOSTS__1": "b", "APP__DB__HOSTS__0": "a", "APP__DEBUG": "true", "X": "1"})
    variables = VariableSet(ParserConfig(prefix="APP__"))
    assert await variables.parse_backend(backend) == {"db": {"hosts": ["a", "b"]}, "debug": True}


class _TrackingBackend(InMemoryBackend):
    def __init__(self, data: dict[str, str]) -> None:
        super().__init__(data)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_load_parses_and_closes_backend() -> None:
    backend = _TrackingBackend({"APP__STRUCT__INT": "1", "APP__STRUCT__STRING": "string"})
    assert load(backend, ParserConfig(prefix="APP__")) == {"struct": {"int": 1, "string": "string"}}
    assert backend.closed is True


def test_load_closes_backend_on_error() -> None:
    backend = _TrackingBackend({"APP__0": "1"})
    with pytest.raises(ValueError, match="first key part cannot be a number"):
        _ = load(backend, ParserConfig(prefix="APP__"))
    assert backend.closed is True
