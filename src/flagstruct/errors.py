"""
Exceptions raised while decoding command-line arguments into a dataclass.

Every error derives from FlagStructError so callers can catch the whole family
at once. Where it makes sense the classes also derive from the matching builtin
exception (TypeError, ValueError, LookupError).
"""

from typing import Any, Optional, Sequence


class FlagStructError(Exception):
    """Base class for all decoding errors."""


class InvalidTargetError(FlagStructError, TypeError):
    """The decode target is not a mutable dataclass instance."""

    def __init__(self, target: Any) -> None:
        self.target = target
        super().__init__(
            f"flagstruct: expected a mutable dataclass instance, got {type(target).__name__}"
        )


class MalformedAnnotationError(FlagStructError, ValueError):
    def __init__(self, annotation: str) -> None:
        self.annotation = annotation
        super().__init__(
            f"flagstruct: malformed annotation {annotation!r}, `flag` name must be defined"
        )


class ConflictingAnnotationError(FlagStructError, ValueError):
    def __init__(self, annotation: str) -> None:
        self.annotation = annotation
        super().__init__(
            "flagstruct: could not specify 'default' and 'required' in the same annotation"
        )


class MissingRequiredFlagError(FlagStructError, LookupError):
    def __init__(self, flag_name: str) -> None:
        self.flag_name = flag_name
        super().__init__(f"flagstruct: flag '{flag_name}' is missing")


class ValueNotAllowedError(FlagStructError, ValueError):
    def __init__(self, value: str, allowed: Sequence[str]) -> None:
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"flagstruct: the provided value {value!r} is not allowed, "
            f"instead use one of {list(self.allowed)}"
        )


class CoercionError(FlagStructError, ValueError):
    """A resolved value could not be converted to the field's kind.

    The underlying parse error is chained as ``__cause__``.
    """

    def __init__(self, value: str, kind: str, reason: Optional[BaseException]) -> None:
        self.value = value
        self.kind = kind
        super().__init__(
            f"flagstruct: could not decode value `{value}` to kind `{kind}`: {reason}"
        )


class CustomDecodeError(FlagStructError):
    """A field's own ``decode`` method raised."""

    def __init__(self, value: str, type_name: str, reason: BaseException) -> None:
        self.value = value
        self.type_name = type_name
        super().__init__(
            f"flagstruct: could not decode value `{value}` into `{type_name}`: {reason}"
        )
