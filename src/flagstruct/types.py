"""
Width-specific numeric aliases for dataclass fields.

Python's ``int`` and ``float`` have no declared width, so fields that need the
range checks of a fixed-size integer or the precision of a single-precision
float are annotated with one of these aliases instead::

    @dataclass
    class Config:
        retries: UInt8 = field(default=UInt8(3), metadata={"flag": "retries"})
        ratio: Float32 = field(default=Float32(0.5), metadata={"flag": "ratio"})

At runtime the values are plain ``int`` and ``float`` objects.
"""

from typing import NewType

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

UInt = NewType("UInt", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)

Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

__all__ = [
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",
]
