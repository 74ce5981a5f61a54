"""
simread Error Hierarchy
=======================

This module defines the exception hierarchy for simread. All exceptions
inherit from SimError, allowing callers to catch every decoder failure
with a single except clause.

Exception Hierarchy
-------------------
SimError (base)
└── SimFormatError - structural problem in a Simple Code image
    ├── FileTooShortError - no room for the trailing checksum field
    ├── FileTooLargeError - file at or above the accepted size ceiling
    ├── TruncationError - data ends before a structure is complete
    │   ├── TruncatedHeaderError - fewer than 14 header bytes
    │   └── TruncatedRecordError - record body or end record missing
    └── UnknownRecordTagError - tag byte is not Data/Entry/End

Every format error records the decode stage that failed ("size check",
"header", "record", "checksum"), the absolute byte offset where the
problem was detected, and for record errors the zero-based record index.

Error messages follow this format:
    record 2 at offset 0x0000001A: error: unknown record tag 0x07
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SimError(Exception):
    """
    Base exception for all simread errors.

        try:
            parser = SimParser.from_file("firmware.sim")
        except SimError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Format Exceptions
# =============================================================================

class SimFormatError(SimError):
    """
    Base exception for malformed Simple Code images.

    Attributes:
        message: The error description
        offset: Absolute file offset where the problem was found (optional)
        record_index: Zero-based index of the failing record (optional)
    """

    stage = "decode"

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        record_index: Optional[int] = None,
    ):
        self.message = message
        self.offset = offset
        self.record_index = record_index
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with stage and location.

        Example output:
            header at offset 0x00000009: error: header truncated
        """
        location = self.stage
        if self.record_index is not None:
            location += f" {self.record_index}"
        if self.offset is not None:
            location += f" at offset 0x{self.offset:08X}"
        return f"{location}: error: {self.message}"


class FileTooShortError(SimFormatError):
    """
    File is too short to hold the trailing 4-byte checksum field.

    Raised by the checksum verifier; without 4 bytes there is no checksum
    region to exclude from the sum.
    """

    stage = "checksum"

    def __init__(self, size: int):
        self.size = size
        super().__init__(
            f"file too short for checksum ({size} bytes, need at least 4)",
            offset=size,
        )


class FileTooLargeError(SimFormatError):
    """
    File size is at or above the accepted maximum.

    The whole image is loaded into memory before decoding, so the ceiling
    is checked against the file size before anything is read.
    """

    stage = "size check"

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"file size too large ({size} >= {limit} bytes)")


class TruncationError(SimFormatError):
    """Data ends before a header or record is complete."""
    pass


class TruncatedHeaderError(TruncationError):
    """
    Fewer than 14 bytes are available for the header.

    No partial header is ever returned.
    """

    stage = "header"


class TruncatedRecordError(TruncationError):
    """
    A record extends past the end of the buffer.

    Raised when:
    - A fixed-width record field would be read past the buffer end
    - A data record declares more payload bytes than remain
    - The buffer is exhausted before an end record was seen
    """

    stage = "record"


class UnknownRecordTagError(SimFormatError):
    """
    Record tag byte is not one of Data (0x01), Entry (0x02) or End (0x03).

    The stream cannot be resynchronised because record length depends on
    the tag, so decoding stops here.
    """

    stage = "record"

    def __init__(self, tag: int, offset: int, record_index: Optional[int] = None):
        self.tag = tag
        super().__init__(
            f"unknown record tag 0x{tag:02X}",
            offset=offset,
            record_index=record_index,
        )
