"""Interface for ``python -m env_vars_to_json``."""

from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import __version__
from .config import ParserConfig
from .errors import ParseError
from .variables import VariableSet


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Send log records to stderr so stdout only carries the JSON document."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-5s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))


def build_parser() -> ArgumentParser:
    """Argument parser for the CLI."""
    parser = ArgumentParser(
        prog="env-vars-to-json",
        description="Convert environment variables into a nested JSON document.",
    )
    _ = parser.add_argument("-v", "--version", action="version", version=__version__)
    _ = parser.add_argument("-p", "--prefix", help="only read variables starting with this prefix")
    _ = parser.add_argument("-s", "--separator", default="__", help="nesting separator (default: %(default)s)")
    _ = parser.add_argument(
        "-i", "--include", action="append", default=[], metavar="PATTERN", help="regex a variable must match"
    )
    _ = parser.add_argument(
        "-e", "--exclude", action="append", default=[], metavar="PATTERN", help="regex a variable must not match"
    )
    _ = parser.add_argument("--seed", type=Path, metavar="FILE", help="JSON object to merge the variables into")
    _ = parser.add_argument("--indent", type=int, default=None, help="indent the JSON output")
    _ = parser.add_argument("--lenient", action="store_true", help="skip invalid variables instead of failing")
    _ = parser.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level"
    )
    return parser


def _load_seed(path: Path | None) -> dict[str, Any] | None:
    if path is None:
        return None
    with path.open(encoding="utf-8") as handle:
        seed = json.load(handle)
    if not isinstance(seed, dict):
        msg = f"seed file {path} must contain a JSON object"
        raise ValueError(msg)
    return seed


def main(args: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    options = build_parser().parse_args(args)
    setup_logging(options.log_level)

    try:
        config = ParserConfig(
            prefix=options.prefix,
            separator=options.separator,
            include=options.include,
            exclude=options.exclude,
            seed=_load_seed(options.seed),
            strict=not options.lenient,
        )
        tree = VariableSet(config).parse_env(environ)
    except (ParseError, ValueError, OSError) as error:
        logger.debug("conversion failed", exc_info=True)
        print(f"error: {error}", file=sys.stderr)
        return 1

    print(json.dumps(tree, indent=options.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
