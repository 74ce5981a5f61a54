"""
Simple Code Checksum Calculations
=================================

This module provides the checksum calculation for Simple Code images.

Image Checksum
--------------
The checksum stored in the end record is calculated as:
- Algorithm: 32-bit wrapping sum of every byte in the file, excluding
  the trailing 4-byte checksum field itself
- Stored value: the two's complement of that sum, (~sum + 1) mod 2^32

Adding the stored checksum to the byte sum therefore gives zero modulo
2^32, which is the property `checksum_residue()` exposes.

By convention the checksum field is both the last 4 bytes of the file
and the body of the end record.
"""

from dataclasses import dataclass
from typing import Optional

from simread.errors import FileTooShortError
from simread.sim.records import Buffer


CHECKSUM_SIZE = 4
CHECKSUM_MASK = 0xFFFFFFFF


@dataclass
class ChecksumResult:
    """
    Result of verifying an image checksum.

    Attributes:
        calculated: The checksum calculated from the file bytes
        stored: The checksum carried by the end record, or None if no end
            record was decoded
        message: Human-readable explanation of the result
    """
    calculated: int
    stored: Optional[int] = None
    message: str = ""

    @property
    def is_valid(self) -> bool:
        """True if an end record was decoded and its checksum matches."""
        return self.stored is not None and self.stored == self.calculated


def sum_bytes(data: Buffer) -> int:
    """
    Sum the bytes covered by the checksum.

    Every byte before the trailing 4-byte checksum field is added into a
    32-bit accumulator with wraparound.

    Raises:
        FileTooShortError: If the data is shorter than the checksum field
    """
    if len(data) < CHECKSUM_SIZE:
        raise FileTooShortError(len(data))
    return sum(data[:len(data) - CHECKSUM_SIZE]) & CHECKSUM_MASK


def calculate_checksum(data: Buffer) -> int:
    """
    Calculate the checksum expected in the end record.

    Args:
        data: The complete image, checksum field included

    Returns:
        32-bit checksum value (0x00000000 - 0xFFFFFFFF)

    Raises:
        FileTooShortError: If the data is shorter than 4 bytes

    Example:
        >>> calculate_checksum(bytes([0x01, 0x02, 0, 0, 0, 0]))
        4294967293
    """
    return (~sum_bytes(data) + 1) & CHECKSUM_MASK


def checksum_residue(data: Buffer) -> int:
    """Byte sum plus calculated checksum, modulo 2^32. Always zero."""
    return (sum_bytes(data) + calculate_checksum(data)) & CHECKSUM_MASK


def verify_checksum(data: Buffer, stored: Optional[int]) -> ChecksumResult:
    """
    Calculate the checksum and compare it with the stored value.

    Args:
        data: The complete image, checksum field included
        stored: Checksum from the end record, or None if there is none

    Returns:
        ChecksumResult with both values and the match outcome

    Raises:
        FileTooShortError: If the data is shorter than 4 bytes
    """
    calculated = calculate_checksum(data)

    if stored is None:
        message = "No end record, stored checksum unavailable"
    elif stored == calculated:
        message = "Checksum valid"
    else:
        message = (
            f"Checksum mismatch: stored 0x{stored:08X}, "
            f"calculated 0x{calculated:08X}"
        )

    return ChecksumResult(calculated=calculated, stored=stored, message=message)
