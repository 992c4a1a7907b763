"""Variable sources for the unflattening engine."""

from .in_memory import EnvironmentBackend, InMemoryBackend
from .nats import NatsBackend
from .postgres import PostgresBackend
from .protocol import Backend
from .redis import RedisBackend


__all__ = ["Backend", "EnvironmentBackend", "InMemoryBackend", "NatsBackend", "PostgresBackend", "RedisBackend"]
