"""Scalar type inference for raw variable values."""

from __future__ import annotations

import math
import re
from typing import Any

from .errors import InvalidScalarError


_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_FLOAT_PATTERN = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_INT64_DIGITS = len(str(INT64_MAX))


def _parse_int(raw: str) -> int | None:
    if not _INT_PATTERN.fullmatch(raw):
        return None
    digits = raw.lstrip("+-").lstrip("0") or "0"
    if len(digits) > _INT64_DIGITS:
        return None
    number = -int(digits) if raw.startswith("-") else int(digits)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _parse_float(raw: str) -> float | None:
    if not (_FLOAT_PATTERN.fullmatch(raw) or _SPECIAL_FLOAT_PATTERN.fullmatch(raw)):
        return None
    number = float(raw)
    if not math.isfinite(number):
        msg = f"failed to parse float: {raw!r} has no finite representation"
        raise InvalidScalarError(msg)
    return number


def coerce(raw: str) -> Any:
    """Convert a raw string into an int, float, bool or the string itself.

    Trials run in a fixed order and the first success wins: signed 64-bit
    integer, float, ``true``/``false``, string. Only the exact lowercase
    boolean spellings are recognized and strings keep their original case.

    Raises
    ------
    InvalidScalarError
        When the value reads as a float but is not finite (``nan``, ``inf``,
        ``1e400``).
    """
    integer = _parse_int(raw)
    if integer is not None:
        return integer

    number = _parse_float(raw)
    if number is not None:
        return number

    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw
