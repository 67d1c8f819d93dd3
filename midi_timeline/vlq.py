"""MIDI variable-length quantity decoding."""

from typing import Tuple

from .exceptions import TruncatedQuantityError


def read_variable_length(data: bytes, offset: int) -> Tuple[int, int]:
    """
    Read a variable-length quantity starting at offset.

    Each byte carries 7 bits of the value, most significant group first.
    A set high bit means another byte follows.

    Args:
        data: Buffer to read from
        offset: Index of the first byte of the quantity

    Returns:
        (value, consumed) where consumed is the number of bytes read (>= 1)

    Raises:
        TruncatedQuantityError: Buffer ends before the terminating byte
    """
    value = 0
    index = offset
    while True:
        if index >= len(data):
            raise TruncatedQuantityError(
                "Variable-length quantity runs past end of data", offset=offset
            )
        byte = data[index]
        value = (value << 7) | (byte & 0x7F)
        index += 1
        if not byte & 0x80:
            break
    return value, index - offset
