"""Key decoding, tree navigation and path splicing utilities."""

from .mapper import Field, Index, KeyMapper, KeyPath, Segment, classify_segment, decode_key, encode_key
from .nested import MISSING, locate, resolve, splice


__all__ = [
    "MISSING",
    "Field",
    "Index",
    "KeyMapper",
    "KeyPath",
    "Segment",
    "classify_segment",
    "decode_key",
    "encode_key",
    "locate",
    "resolve",
    "splice",
]
