"""
Argument lookup and annotation resolution.

An annotation is the string stored under the ``"flag"`` key of a dataclass
field's metadata::

    <flagName>[,required][,default=<value>][,allowed=<v1>;<v2>;...]

Resolving an annotation turns it, together with the raw argument list, into
the single string that will be assigned to the field.
"""

import dataclasses
import logging
from typing import Optional, Sequence

from .errors import (
    ConflictingAnnotationError,
    MalformedAnnotationError,
    MissingRequiredFlagError,
    ValueNotAllowedError,
)

logger = logging.getLogger(__name__)

REQUIRED_OPTION = "required"
DEFAULT_OPTION = "default="
ALLOWED_OPTION = "allowed="


def lookup(args: Sequence[str], name: str) -> Optional[str]:
    """
    Return the value of the first argument whose key ends with `name`.

    Arguments are expected as ``<prefix><name>=<value>``; the prefix (dashes or
    anything else) is not checked, so ``"a"`` also matches ``"-data=1"``.
    Arguments without ``=`` are ignored. Returns None when nothing matches and
    ``""`` when the matching argument has an empty value.
    """
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            continue
        if key.endswith(name):
            return value
    return None


@dataclasses.dataclass(frozen=True)
class Annotation:
    """Structured view of a field's ``flag`` metadata."""

    flag_name: str
    default: Optional[str] = None
    required: bool = False
    allowed: Optional[tuple[str, ...]] = None

    def allows(self, value: str) -> bool:
        if self.allowed is None:
            return True
        return value in self.allowed


def parse_annotation(raw: str) -> Annotation:
    """
    Parse an annotation string.

    Unknown options are ignored. The first ``default=`` and the first
    ``allowed=`` option win.

    Raises:
        MalformedAnnotationError: If the flag name is empty.
        ConflictingAnnotationError: If both ``required`` and ``default=`` are given.
    """
    parts = raw.split(",")
    flag_name = parts[0]
    if not flag_name:
        raise MalformedAnnotationError(raw)

    required = False
    default: Optional[str] = None
    allowed: Optional[tuple[str, ...]] = None
    for option in parts[1:]:
        if option.startswith(REQUIRED_OPTION):
            required = True
        elif option.startswith(DEFAULT_OPTION):
            if default is None:
                default = option[len(DEFAULT_OPTION) :]
        elif option.startswith(ALLOWED_OPTION):
            if allowed is None:
                entries = option[len(ALLOWED_OPTION) :].split(";")
                allowed = tuple(entry for entry in entries if entry)

    if required and default is not None:
        raise ConflictingAnnotationError(raw)

    return Annotation(
        flag_name=flag_name, default=default, required=required, allowed=allowed
    )


def resolve(args: Sequence[str], raw: str) -> str:
    """
    Resolve an annotation against the argument list.

    The matching argument wins over the default. An empty result means the
    field should be left untouched.

    Raises:
        MalformedAnnotationError, ConflictingAnnotationError: For a bad annotation.
        MissingRequiredFlagError: If a required flag has no matching argument.
        ValueNotAllowedError: If the value is not in the ``allowed=`` list.
    """
    annotation = parse_annotation(raw)
    value = lookup(args, annotation.flag_name)

    if value is None:
        if annotation.required:
            raise MissingRequiredFlagError(annotation.flag_name)
        value = annotation.default or ""
        if value:
            logger.debug("flag %r not given, using default %r", annotation.flag_name, value)

    if value and not annotation.allows(value):
        raise ValueNotAllowedError(value, annotation.allowed or ())

    return value
