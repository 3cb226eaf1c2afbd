"""
Type coercion for resolved flag values.

This module decides, once per field, what kind of value a dataclass field holds
(see `classify`) and converts resolved strings into that kind. It covers
booleans, fixed-width integers and floats, durations (`datetime.timedelta`),
strings, untyped values, ``;``-separated lists and types that know how to
decode themselves (`CustomDecodable`).
"""

import dataclasses
import enum
import logging
import math
import re
import struct
import types
import typing
from datetime import timedelta
from typing import Any, Optional, Protocol, Union, runtime_checkable

from .errors import CustomDecodeError
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

logger = logging.getLogger(__name__)


@runtime_checkable
class CustomDecodable(Protocol):
    """
    A type that decodes a flag value into itself.

    Fields whose declared type implements ``decode`` bypass the built-in
    coercion, and dataclasses implementing it are not descended into. The
    method updates the instance in place and raises to report failure.
    """

    def decode(self, value: str) -> None: ...


class Kind(enum.Enum):
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"
    UINT = "uint"
    DURATION = "duration"
    STRING = "string"
    ANY = "any"
    SEQUENCE = "sequence"
    STRUCT = "struct"
    CUSTOM = "custom"
    UNSUPPORTED = "unsupported"


PRIMITIVE_KINDS = frozenset(
    {Kind.BOOL, Kind.FLOAT, Kind.INT, Kind.UINT, Kind.DURATION, Kind.STRING, Kind.ANY}
)

# (kind, bit width) per declared type
_TYPE_TABLE: dict[Any, tuple[Kind, int]] = {
    bool: (Kind.BOOL, 0),
    float: (Kind.FLOAT, 64),
    Float32: (Kind.FLOAT, 32),
    Float64: (Kind.FLOAT, 64),
    int: (Kind.INT, 64),
    Int8: (Kind.INT, 8),
    Int16: (Kind.INT, 16),
    Int32: (Kind.INT, 32),
    Int64: (Kind.INT, 64),
    UInt: (Kind.UINT, 64),
    UInt8: (Kind.UINT, 8),
    UInt16: (Kind.UINT, 16),
    UInt32: (Kind.UINT, 32),
    UInt64: (Kind.UINT, 64),
    timedelta: (Kind.DURATION, 64),
    str: (Kind.STRING, 0),
    Any: (Kind.ANY, 0),
    object: (Kind.ANY, 0),
}

# bytes has a ``decode`` method but is not a custom decodable type
_NOT_CUSTOM = (bytes, bytearray)


@dataclasses.dataclass(frozen=True)
class FieldKind:
    """The classification of a declared field type."""

    kind: Kind
    type: Any
    bits: int = 0
    optional: bool = False
    element: Optional["FieldKind"] = None

    @property
    def name(self) -> str:
        if self.kind is Kind.ANY:
            return "any"
        if self.kind is Kind.SEQUENCE and self.element is not None:
            return f"list[{self.element.name}]"
        return getattr(self.type, "__name__", repr(self.type)).lower()

    def __str__(self) -> str:
        return self.name


def _get_optional_inner_type(type_hint: Any) -> Optional[Any]:
    """
    If type_hint is Optional[T] (Union[T, None] or T | None), return T.
    Otherwise, return None.
    """
    if typing.get_origin(type_hint) in (Union, types.UnionType):
        args = typing.get_args(type_hint)
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return None


def classify(type_hint: Any) -> FieldKind:
    """Map a declared field type onto the closed set of kinds."""
    optional = False
    inner = _get_optional_inner_type(type_hint)
    if inner is not None:
        type_hint, optional = inner, True

    try:
        kind, bits = _TYPE_TABLE[type_hint]
    except (KeyError, TypeError):
        pass
    else:
        return FieldKind(kind, type_hint, bits, optional)

    if type_hint is list or typing.get_origin(type_hint) is list:
        args = typing.get_args(type_hint)
        element = classify(args[0] if args else str)
        return FieldKind(Kind.SEQUENCE, type_hint, optional=optional, element=element)

    if isinstance(type_hint, type) and typing.get_origin(type_hint) is None:
        if not issubclass(type_hint, _NOT_CUSTOM) and issubclass(
            type_hint, CustomDecodable
        ):
            return FieldKind(Kind.CUSTOM, type_hint, optional=optional)
        if dataclasses.is_dataclass(type_hint):
            return FieldKind(Kind.STRUCT, type_hint, optional=optional)

    return FieldKind(Kind.UNSUPPORTED, type_hint, optional=optional)


def parse_bool(value: str) -> bool:
    """
    Parse a string to a boolean value strictly.

    Accepts 1, t, T, TRUE, true, True and 0, f, F, FALSE, false, False.
    Raises ValueError for any other string.
    """
    if value in ("1", "t", "T", "TRUE", "true", "True"):
        return True
    elif value in ("0", "f", "F", "FALSE", "false", "False"):
        return False
    else:
        raise ValueError(f"invalid boolean value: {value!r}")


def parse_float(value: str, bits: int = 64) -> float:
    """
    Parse a decimal or hexadecimal (``0x1p-2``) float, or ``inf``/``nan``.

    With ``bits=32`` the result is rounded to single precision.
    """
    if not value or value != value.strip() or "_" in value:
        raise ValueError(f"invalid float literal: {value!r}")
    try:
        number = float(value)
    except ValueError:
        if not re.match(r"[+-]?0[xX]", value) or "p" not in value.lower():
            raise ValueError(f"invalid float literal: {value!r}") from None
        try:
            number = float.fromhex(value)
        except (ValueError, OverflowError):
            raise ValueError(f"invalid float literal: {value!r}") from None

    if math.isinf(number) and "inf" not in value.lower():
        raise ValueError(f"{value!r} is out of range for a {bits}-bit float")
    if bits == 32:
        try:
            (number,) = struct.unpack("f", struct.pack("f", number))
        except OverflowError:
            raise ValueError(f"{value!r} is out of range for a 32-bit float") from None
        if math.isinf(number) and "inf" not in value.lower():
            raise ValueError(f"{value!r} is out of range for a 32-bit float")
    return number


def parse_int(value: str, bits: int = 64, signed: bool = True) -> int:
    """
    Parse an integer, detecting the base from its prefix.

    ``0x`` is hexadecimal, ``0o`` or a bare leading ``0`` octal, ``0b`` binary,
    anything else decimal. Underscores may separate digits. The result must fit
    in a `bits`-wide signed or unsigned integer.
    """
    body = value
    negative = False
    if signed and body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]
    if not body or not body.isascii() or not all(c.isalnum() or c == "_" for c in body):
        raise ValueError(f"invalid integer literal: {value!r}")

    try:
        if len(body) > 1 and body[0] == "0" and body[1] in "0123456789_":
            number = int(body, 8)
        else:
            number = int(body, 0)
    except ValueError:
        raise ValueError(f"invalid integer literal: {value!r}") from None
    if negative:
        number = -number

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= number <= high:
        sign = "signed" if signed else "unsigned"
        raise ValueError(f"{value!r} is out of range for a {bits}-bit {sign} integer")
    return number


_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")
_MAX_NANOSECONDS = 1 << 63


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration literal such as ``300ms``, ``-1.5h`` or ``2h45m``.

    Each component is a decimal number followed by one of the units
    ns, us (or µs), ms, s, m, h. A bare ``0`` is accepted without unit.
    Precision below one microsecond is truncated.
    """
    text = value
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    total = 0
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        whole, fraction, unit = match.groups()
        if not whole and not fraction:
            raise ValueError(f"invalid duration: {value!r}")
        if not unit:
            raise ValueError(f"missing unit in duration: {value!r}")
        if unit not in _DURATION_UNITS:
            raise ValueError(f"unknown unit {unit!r} in duration: {value!r}")
        scale = _DURATION_UNITS[unit]
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _MAX_NANOSECONDS - (0 if negative else 1):
            raise ValueError(f"duration out of range: {value!r}")
        pos = match.end()

    microseconds = total // 1_000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def coerce_primitive(field_kind: FieldKind, value: str, current: Any = None) -> Any:
    """
    Convert `value` into the representation of `field_kind`.

    Kinds without a built-in conversion return `current` unchanged.
    Conversion failures raise ValueError.
    """
    kind = field_kind.kind
    if kind is Kind.BOOL:
        return parse_bool(value)
    if kind is Kind.FLOAT:
        return parse_float(value, field_kind.bits)
    if kind is Kind.INT:
        return parse_int(value, field_kind.bits, signed=True)
    if kind is Kind.UINT:
        return parse_int(value, field_kind.bits, signed=False)
    if kind is Kind.DURATION:
        return parse_duration(value)
    if kind in (Kind.STRING, Kind.ANY):
        return value
    return current


def run_custom_decode(instance: CustomDecodable, value: str) -> None:
    """Call ``instance.decode(value)``, wrapping whatever it raises."""
    try:
        instance.decode(value)
    except Exception as e:
        raise CustomDecodeError(value, type(instance).__name__, e) from e


def _decode_element(element: FieldKind, segment: str) -> Any:
    if element.kind is Kind.CUSTOM:
        try:
            instance = element.type()
        except Exception as e:
            raise CustomDecodeError(segment, element.name, e) from e
        run_custom_decode(instance, segment)
        return instance
    return coerce_primitive(element, segment)


def decode_slice(field_kind: FieldKind, value: str) -> list:
    """
    Decode a ``;``-separated value into a list of the field's element kind.

    Segments are stripped and blank ones discarded. Segments that fail to
    decode are dropped, so the result holds only the successes, in order.
    """
    element = field_kind.element or classify(str)
    segments = [segment.strip() for segment in value.split(";")]
    segments = [segment for segment in segments if segment]

    if element.kind not in PRIMITIVE_KINDS and element.kind is not Kind.CUSTOM:
        logger.debug(
            "cannot decode list elements of kind %s, dropping %d segment(s)",
            element,
            len(segments),
        )
        return []

    result = []
    for segment in segments:
        try:
            result.append(_decode_element(element, segment))
        except (ValueError, CustomDecodeError) as e:
            logger.debug("dropping list element %r: %s", segment, e)
    return result
