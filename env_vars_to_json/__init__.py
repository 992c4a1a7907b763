"""env-vars-to-json - unflatten environment variables into nested JSON trees"""

import importlib.metadata

from .backends import Backend, EnvironmentBackend, InMemoryBackend
from .coercion import coerce
from .config import ParserConfig
from .errors import InvalidScalarError, MalformedPathError, ParseError, PrefixMismatchError, ShapeConflictError
from .key_mapping import KeyMapper, decode_key, resolve, splice
from .variables import ParseResult, VariableSet, load, parse, parse_env


try:
    __version__ = importlib.metadata.version("env-vars-to-json")
except importlib.metadata.PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


__all__ = [
    "Backend",
    "EnvironmentBackend",
    "InMemoryBackend",
    "InvalidScalarError",
    "KeyMapper",
    "MalformedPathError",
    "ParseError",
    "ParseResult",
    "ParserConfig",
    "PrefixMismatchError",
    "ShapeConflictError",
    "VariableSet",
    "__version__",
    "coerce",
    "decode_key",
    "load",
    "parse",
    "parse_env",
    "resolve",
    "splice",
]
