"""Minimal example reading prefixed variables from a Redis-compatible store."""

import asyncio

from env_vars_to_json import ParserConfig, VariableSet
from env_vars_to_json.backends.redis import RedisBackend


async def main() -> None:
    """Print the tree stored under ``app:`` in Redis/Dragonfly."""
    backend = RedisBackend(url="redis://redis:6379/0")
    try:
        variables = VariableSet(ParserConfig(prefix="app:", separator=":"))
        print("config:", await variables.parse_backend(backend))
    finally:
        await backend.close()


if __name__ == "__main__":
    asyncio.run(main())
