"""Minimal example converting the process environment into a nested tree."""

import json
import os

from env_vars_to_json import ParserConfig, parse_env


def main() -> None:
    """Set a few prefixed variables and print the tree they decode to."""
    os.environ["DEMO__SERVER__HOST"] = "0.0.0.0"  # noqa: S104
    os.environ["DEMO__SERVER__PORT"] = "8080"
    os.environ["DEMO__SERVER__ALLOWED_ORIGINS__1"] = "https://example.org"
    os.environ["DEMO__SERVER__ALLOWED_ORIGINS__0"] = "https://example.com"
    os.environ["DEMO__DEBUG"] = "false"

    config = ParserConfig(prefix="DEMO__", seed={"server": {"workers": 4}})
    print(json.dumps(parse_env(config=config), indent=2))


if __name__ == "__main__":
    main()
