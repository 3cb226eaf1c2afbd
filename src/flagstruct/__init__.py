"""
flagstruct - populate dataclasses from command-line arguments.

Each dataclass field declares the flag it is bound to in its metadata, with
optional ``required``, ``default=`` and ``allowed=`` options. Values are
converted according to the field's type, including fixed-width numbers,
durations, ``;``-separated lists and types implementing their own ``decode``.
"""

from .annotation import Annotation, lookup, parse_annotation, resolve
from .coercion import CustomDecodable, parse_duration
from .decoder import FLAG_METADATA_KEY, decode, safe_decode
from .errors import (
    CoercionError,
    ConflictingAnnotationError,
    CustomDecodeError,
    FlagStructError,
    InvalidTargetError,
    MalformedAnnotationError,
    MissingRequiredFlagError,
    ValueNotAllowedError,
)
from .sources import args_from_mapping, load_args_file
from .types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)

__version__ = "1.0.0"
__all__ = [
    "Annotation",
    "CoercionError",
    "ConflictingAnnotationError",
    "CustomDecodable",
    "CustomDecodeError",
    "FLAG_METADATA_KEY",
    "Float32",
    "Float64",
    "FlagStructError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidTargetError",
    "MalformedAnnotationError",
    "MissingRequiredFlagError",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "ValueNotAllowedError",
    "args_from_mapping",
    "decode",
    "load_args_file",
    "lookup",
    "parse_annotation",
    "parse_duration",
    "resolve",
    "safe_decode",
]
