"""
Decode command-line arguments into a dataclass instance.

Fields are bound through the ``"flag"`` key of their metadata::

    @dataclass
    class Config:
        host: str = field(default="", metadata={"flag": "host,default=localhost"})
        port: int = field(default=0, metadata={"flag": "port,allowed=80;443"})

    config = decode(Config(), ["-port=443"])

Nested dataclasses are descended into and resolved against the same
arguments. Fields whose name starts with an underscore are never touched.
"""

import dataclasses
import logging
import sys
import typing
from typing import Any, Optional, Sequence, TypeVar

from result import Err, Ok, Result

from .annotation import resolve
from .coercion import (
    PRIMITIVE_KINDS,
    FieldKind,
    Kind,
    classify,
    coerce_primitive,
    decode_slice,
    run_custom_decode,
)
from .errors import CoercionError, FlagStructError, InvalidTargetError

logger = logging.getLogger(__name__)

FLAG_METADATA_KEY = "flag"

T = TypeVar("T")


def _check_target(target: Any) -> None:
    if (
        target is None
        or isinstance(target, type)
        or not dataclasses.is_dataclass(target)
    ):
        raise InvalidTargetError(target)
    if type(target).__dataclass_params__.frozen:
        raise InvalidTargetError(target)


def _field_types(cls: type) -> dict[str, Any]:
    """
    Resolve field annotations.

    If the class as a whole cannot be resolved (e.g. a postponed annotation
    names a class local to a function), each field is resolved on its own and
    the unresolvable ones are left out.
    """
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        pass

    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    localns = dict(vars(cls))
    hints = {}
    for field in dataclasses.fields(cls):
        if not isinstance(field.type, str):
            hints[field.name] = field.type
            continue
        holder = type(cls.__name__, (), {"__annotations__": {field.name: field.type}})
        try:
            hints.update(typing.get_type_hints(holder, globalns, localns))
        except (NameError, TypeError) as e:
            logger.debug(
                "cannot resolve annotation %r of field %s: %s", field.type, field.name, e
            )
    return hints


def decode(target: T, args: Optional[Sequence[str]] = None) -> T:
    """
    Populate the fields of `target` from command-line arguments.

    Args:
        target: A mutable dataclass instance. It is updated in place.
        args: Raw arguments such as ``["-port=443", "--host=example.org"]``.
            If None, uses ``sys.argv[1:]``.

    Returns:
        The same `target` instance.

    Raises:
        InvalidTargetError: If `target` is not a mutable dataclass instance.
        FlagStructError: For the first annotation, lookup or conversion error.
            Fields processed before the error keep their new values.
    """
    if args is None:
        args = sys.argv[1:]
    _check_target(target)
    _decode_fields(target, list(args))
    return target


def safe_decode(
    target: T, args: Optional[Sequence[str]] = None
) -> Result[T, str]:
    """
    Like `decode`, but report failures as a value instead of raising.

    Returns:
        Result[T, str]:
            - Ok with the populated target,
            - Err with the error message if decoding fails.
    """
    try:
        return Ok(decode(target, args))
    except FlagStructError as e:
        return Err(str(e))


def _decode_fields(target: Any, args: list[str]) -> None:
    hints = _field_types(type(target))
    for field in dataclasses.fields(target):
        if field.name.startswith("_"):
            logger.debug("skipping unexported field %s", field.name)
            continue

        if field.name not in hints:
            logger.debug("skipping field %s with unresolved type", field.name)
            continue

        field_kind = classify(hints[field.name])
        current = getattr(target, field.name, None)

        if field_kind.kind is Kind.STRUCT:
            if current is None:
                logger.debug("nested field %s is None, not descending", field.name)
            else:
                logger.debug("descending into %s", field.name)
                _check_target(current)
                _decode_fields(current, args)

        raw = field.metadata.get(FLAG_METADATA_KEY)
        if not raw:
            continue

        value = resolve(args, raw)
        if not value:
            logger.debug("no value for %s, leaving it untouched", field.name)
            continue

        _assign(target, field.name, field_kind, current, value)


def _assign(
    target: Any, name: str, field_kind: FieldKind, current: Any, value: str
) -> None:
    kind = field_kind.kind
    if kind is Kind.CUSTOM:
        if current is None:
            logger.debug("field %s is None, not decoding %r", name, value)
            return
        run_custom_decode(current, value)
    elif kind is Kind.SEQUENCE:
        setattr(target, name, decode_slice(field_kind, value))
    elif kind in PRIMITIVE_KINDS:
        try:
            converted = coerce_primitive(field_kind, value, current)
        except ValueError as e:
            raise CoercionError(value, field_kind.name, e) from e
        setattr(target, name, converted)
    else:
        logger.debug("field %s has unsupported kind %s, ignoring %r", name, field_kind, value)
