"""
Simple Code Record Type Definitions
===================================

This module defines the data structures for Simple Code (.sim) firmware
images, the record-based format emitted by IAR embedded toolchains.

Image Structure Overview
------------------------
A Simple Code file contains:
1. Header (14 bytes): magic, program flags, program byte count, version
2. Records (variable): data and entry records
3. End record (5 bytes): tag 0x03 + 32-bit checksum

All multi-byte integers are big-endian.

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    0       4       Magic number
    4       4       Program flags
    8       4       Number of program bytes
    12      2       Version information

Record Formats
--------------
Each record starts with a one byte tag that fixes its layout, so the
length of a record is known once its tag (and, for data records, its
byte count) has been read.

**Data record** (tag $01):
    Byte 0:     Tag
    Byte 1:     Segment type
    Byte 2-3:   Record flags
    Byte 4-7:   Start address
    Byte 8-11:  Number of program bytes (n)
    Byte 12+:   Program bytes (n bytes)

**Entry record** (tag $02):
    Byte 0:     Tag
    Byte 1-4:   Entry address
    Byte 5:     Segment type

**End record** (tag $03):
    Byte 0:     Tag
    Byte 1-4:   Checksum

Reference
---------
- IAR Simple Code format: http://netstorage.iar.com/SuppDB/Public/UPDINFO/006220/simple_code.htm
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Union
import struct

from simread.errors import TruncatedHeaderError, TruncatedRecordError


# =============================================================================
# Layout Constants
# =============================================================================

HEADER_SIZE = 14

# Fixed part of each record, tag byte included
DATA_RECORD_FIXED_SIZE = 12
ENTRY_RECORD_SIZE = 6
END_RECORD_SIZE = 5

_HEADER_STRUCT = struct.Struct(">IIIH")
_DATA_FIELDS_STRUCT = struct.Struct(">BHII")
_ENTRY_FIELDS_STRUCT = struct.Struct(">IB")
_END_FIELDS_STRUCT = struct.Struct(">I")

Buffer = Union[bytes, bytearray, memoryview]


# =============================================================================
# Enumeration Types
# =============================================================================

class RecordTag(IntEnum):
    """
    Record tag identifiers.

    The first byte of every record selects one of these layouts.
    """
    DATA = 0x01
    ENTRY = 0x02
    END = 0x03

    @classmethod
    def get_name(cls, tag: int) -> str:
        """Get a human-readable name for a record tag."""
        names = {
            0x01: "Data record",
            0x02: "Entry record",
            0x03: "End record",
        }
        return names.get(tag, f"Unknown (0x{tag:02X})")


class ScanState(Enum):
    """State of a record stream scan."""
    SCANNING = "scanning"
    DONE = "done"
    FAILED = "failed"


# =============================================================================
# Header
# =============================================================================

@dataclass(frozen=True)
class Header:
    """
    Simple Code file header (14 bytes at offset 0).

    Field values are decoded as-is. The magic number is not compared
    against any expected constant, and the program byte count is not
    checked against the records; that is left to the caller.
    """
    magic_number: int = 0
    program_flags: int = 0
    program_byte_count: int = 0
    version: int = 0

    @classmethod
    def from_bytes(cls, data: Buffer) -> "Header":
        """
        Decode a header from the start of a buffer.

        Args:
            data: At least 14 bytes of image data

        Returns:
            The decoded Header

        Raises:
            TruncatedHeaderError: If fewer than 14 bytes are available
        """
        if len(data) < HEADER_SIZE:
            raise TruncatedHeaderError(
                f"header truncated: need {HEADER_SIZE} bytes, got {len(data)}",
                offset=len(data),
            )

        magic_number, program_flags, program_byte_count, version = (
            _HEADER_STRUCT.unpack_from(data, 0)
        )
        return cls(
            magic_number=magic_number,
            program_flags=program_flags,
            program_byte_count=program_byte_count,
            version=version,
        )


def decode_header(data: Buffer) -> Header:
    """
    Decode the 14-byte header of a Simple Code image.

    Raises:
        TruncatedHeaderError: If fewer than 14 bytes are available
    """
    return Header.from_bytes(data)


# =============================================================================
# Bounds Checking
# =============================================================================

def _require(
    data: Buffer,
    offset: int,
    needed: int,
    what: str,
    base_offset: int,
    record_index: Optional[int],
) -> None:
    """Raise TruncatedRecordError unless `needed` bytes remain at `offset`."""
    available = len(data) - offset
    if available < needed:
        raise TruncatedRecordError(
            f"{what} truncated: need {needed} bytes, {max(available, 0)} available",
            offset=base_offset + offset,
            record_index=record_index,
        )


# =============================================================================
# Record Base Class
# =============================================================================

@dataclass(frozen=True)
class SimRecord:
    """
    Base class for Simple Code records.

    Attributes:
        tag: The record tag byte
        offset: Absolute file offset of the tag byte (not compared)
    """
    tag: int
    offset: int = field(default=0, compare=False)

    def get_size(self) -> int:
        """Get the number of bytes this record occupies in the file."""
        raise NotImplementedError("Subclasses must implement get_size()")

    def get_type_name(self) -> str:
        """Get a human-readable name for this record type."""
        return RecordTag.get_name(self.tag)


# =============================================================================
# Data Record
# =============================================================================

@dataclass(frozen=True)
class DataRecord(SimRecord):
    """
    Data record (tag $01): program bytes placed at a start address.

    The payload is always decoded in full; hiding it is a display option.
    """
    tag: int = field(default=RecordTag.DATA, init=False)
    segment_type: int = 0
    flags: int = 0
    start_address: int = 0
    byte_count: int = 0
    payload: bytes = field(default_factory=bytes, repr=False)

    def get_size(self) -> int:
        return DATA_RECORD_FIXED_SIZE + self.byte_count

    @classmethod
    def from_bytes(
        cls,
        data: Buffer,
        offset: int = 0,
        base_offset: int = 0,
        record_index: Optional[int] = None,
    ) -> tuple["DataRecord", int]:
        """
        Parse a data record starting at its tag byte.

        The declared byte count is checked against the remaining buffer
        before any payload byte is copied.

        Args:
            data: Record stream buffer
            offset: Offset of the tag byte within `data`
            base_offset: Absolute file offset of `data[0]`, for error reports
            record_index: Index of this record in the stream, for error reports

        Returns:
            Tuple of (DataRecord, bytes_consumed)

        Raises:
            TruncatedRecordError: If the record extends past the buffer end
        """
        _require(data, offset, DATA_RECORD_FIXED_SIZE, "data record header",
                 base_offset, record_index)
        segment_type, flags, start_address, byte_count = (
            _DATA_FIELDS_STRUCT.unpack_from(data, offset + 1)
        )

        payload_offset = offset + DATA_RECORD_FIXED_SIZE
        _require(data, payload_offset, byte_count, "data record payload",
                 base_offset, record_index)
        payload = bytes(data[payload_offset:payload_offset + byte_count])

        record = cls(
            offset=base_offset + offset,
            segment_type=segment_type,
            flags=flags,
            start_address=start_address,
            byte_count=byte_count,
            payload=payload,
        )
        return record, DATA_RECORD_FIXED_SIZE + byte_count


# =============================================================================
# Entry Record
# =============================================================================

@dataclass(frozen=True)
class EntryRecord(SimRecord):
    """Entry record (tag $02): program entry point."""
    tag: int = field(default=RecordTag.ENTRY, init=False)
    entry_address: int = 0
    segment_type: int = 0

    def get_size(self) -> int:
        return ENTRY_RECORD_SIZE

    @classmethod
    def from_bytes(
        cls,
        data: Buffer,
        offset: int = 0,
        base_offset: int = 0,
        record_index: Optional[int] = None,
    ) -> tuple["EntryRecord", int]:
        """Parse an entry record starting at its tag byte."""
        _require(data, offset, ENTRY_RECORD_SIZE, "entry record",
                 base_offset, record_index)
        entry_address, segment_type = _ENTRY_FIELDS_STRUCT.unpack_from(data, offset + 1)
        record = cls(
            offset=base_offset + offset,
            entry_address=entry_address,
            segment_type=segment_type,
        )
        return record, ENTRY_RECORD_SIZE


# =============================================================================
# End Record
# =============================================================================

@dataclass(frozen=True)
class EndRecord(SimRecord):
    """End record (tag $03): terminates the stream and carries the checksum."""
    tag: int = field(default=RecordTag.END, init=False)
    checksum: int = 0

    def get_size(self) -> int:
        return END_RECORD_SIZE

    @classmethod
    def from_bytes(
        cls,
        data: Buffer,
        offset: int = 0,
        base_offset: int = 0,
        record_index: Optional[int] = None,
    ) -> tuple["EndRecord", int]:
        """Parse an end record starting at its tag byte."""
        _require(data, offset, END_RECORD_SIZE, "end record",
                 base_offset, record_index)
        (checksum,) = _END_FIELDS_STRUCT.unpack_from(data, offset + 1)
        return cls(offset=base_offset + offset, checksum=checksum), END_RECORD_SIZE


Record = Union[DataRecord, EntryRecord, EndRecord]
