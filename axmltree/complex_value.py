"""
Packed 32 bit "complex" values as used by TYPE_DIMENSION and TYPE_FRACTION.

Layout (see ResourceTypes.h, Res_value):

    bits 0..3   unit
    bits 4..5   radix, position of the binary point in the mantissa
    bits 6..7   unused
    bits 8..31  signed mantissa
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from .errors import FormatError
from .internal_types import (
    COMPLEX_MANTISSA_MASK,
    COMPLEX_MANTISSA_SHIFT,
    COMPLEX_RADIX_MASK,
    COMPLEX_RADIX_SHIFT,
    COMPLEX_UNIT_DIP,
    COMPLEX_UNIT_FRACTION,
    COMPLEX_UNIT_FRACTION_PARENT,
    COMPLEX_UNIT_IN,
    COMPLEX_UNIT_MASK,
    COMPLEX_UNIT_MM,
    COMPLEX_UNIT_PT,
    COMPLEX_UNIT_PX,
    COMPLEX_UNIT_SHIFT,
    COMPLEX_UNIT_SP,
    RADIX_MULTS,
)

MANTISSA_SIGN_BIT = 0x800000


class ComplexUnit(Enum):
    PX = (COMPLEX_UNIT_PX, "px", False)
    DIP = (COMPLEX_UNIT_DIP, "dip", False)
    SP = (COMPLEX_UNIT_SP, "sp", False)
    PT = (COMPLEX_UNIT_PT, "pt", False)
    IN = (COMPLEX_UNIT_IN, "in", False)
    MM = (COMPLEX_UNIT_MM, "mm", False)
    FRACTION = (COMPLEX_UNIT_FRACTION, "%", True)
    FRACTION_PARENT = (COMPLEX_UNIT_FRACTION_PARENT, "%p", True)

    def __init__(self, code: int, suffix: str, fraction: bool) -> None:
        self.code = code
        self.suffix = suffix
        self.fraction = fraction

    @classmethod
    def from_code(cls, code: int, fraction: bool = False) -> "ComplexUnit":
        """
        Look up the unit for the 4 bit unit field.
        Dimensions and fractions share the code space, so the caller has to
        say which one the value is.

        :raises FormatError: if the code is not defined for that kind of value
        """
        for unit in cls:
            if unit.code == code and unit.fraction == fraction:
                return unit
        raise FormatError(
            "Unknown {} unit 0x{:x}".format("fraction" if fraction else "dimension", code)
        )


@dataclass(frozen=True)
class ComplexValue:
    magnitude: float
    unit: ComplexUnit
    radix: int

    def __str__(self):
        if self.unit.fraction:
            return "{:f}{}".format(self.magnitude * 100, self.unit.suffix)
        return "{:f}{}".format(self.magnitude, self.unit.suffix)


def decode_complex(data: int, fraction: bool = False) -> ComplexValue:
    """
    Unpack a complex value and check that packing it again yields the
    same bits.

    :param data: the raw 32 bit payload, signed or unsigned
    :param fraction: `True` for TYPE_FRACTION payloads
    :raises FormatError: on unknown units or if the round trip fails
    :returns: the decoded value
    """
    data &= 0xFFFFFFFF
    unit = ComplexUnit.from_code((data >> COMPLEX_UNIT_SHIFT) & COMPLEX_UNIT_MASK, fraction)
    radix = (data >> COMPLEX_RADIX_SHIFT) & COMPLEX_RADIX_MASK
    mantissa = (data >> COMPLEX_MANTISSA_SHIFT) & COMPLEX_MANTISSA_MASK
    if mantissa & MANTISSA_SIGN_BIT:
        mantissa -= COMPLEX_MANTISSA_MASK + 1

    value = ComplexValue((mantissa << COMPLEX_MANTISSA_SHIFT) * RADIX_MULTS[radix], unit, radix)
    logger.debug(f"decode_complex: 0x{data:08x} -> {value}")

    reencoded = encode_complex(value)
    if reencoded != data:
        raise FormatError(
            "Miscalculated: Original complex value is 0x{:08x}; reinterpreted is 0x{:08x}".format(
                data, reencoded
            )
        )
    return value


def encode_complex(value: ComplexValue) -> int:
    """
    Pack a complex value into its unsigned 32 bit representation.
    """
    step = RADIX_MULTS[value.radix] * (1 << COMPLEX_MANTISSA_SHIFT)
    mantissa = int(round(value.magnitude / step))
    return (
        ((mantissa & COMPLEX_MANTISSA_MASK) << COMPLEX_MANTISSA_SHIFT)
        | ((value.radix & COMPLEX_RADIX_MASK) << COMPLEX_RADIX_SHIFT)
        | ((value.unit.code & COMPLEX_UNIT_MASK) << COMPLEX_UNIT_SHIFT)
    )
