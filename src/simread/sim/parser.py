"""
Simple Code Image Parser
========================

This module provides the decoders for Simple Code (.sim) images.

RecordReader
------------
The RecordReader walks the bytes after the header one record at a time.
It is a lazy, single-use iterator: every call to next() decodes exactly
one record, and the scan ends on the end record or on the first error.
Scan state is explicit (SCANNING, DONE, FAILED) and the failure that
stopped a scan is kept on the reader.

SimParser
---------
The SimParser class runs the whole pipeline over an in-memory image:
header, record stream, checksum. It keeps the decoded records and
offers summary queries for inspection tools.

Loading
-------
read_image_file() checks the file size against the configured ceiling
before reading, then loads the whole file.

Usage Examples
--------------
Streaming records as they are decoded:
    >>> data = read_image_file("firmware.sim")
    >>> header = decode_header(data)
    >>> for record in iter_records(data[HEADER_SIZE:], base_offset=HEADER_SIZE):
    ...     print(record.get_type_name())

Decoding a whole file:
    >>> parser = SimParser.from_file("firmware.sim")
    >>> print(f"Checksum valid: {parser.checksum.is_valid}")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union
import logging

from simread.config import DEFAULT_MAX_FILE_SIZE
from simread.errors import (
    FileTooLargeError,
    SimError,
    SimFormatError,
    TruncatedRecordError,
    UnknownRecordTagError,
)
from simread.sim.checksum import ChecksumResult, verify_checksum
from simread.sim.records import (
    HEADER_SIZE,
    Buffer,
    DataRecord,
    EndRecord,
    EntryRecord,
    Header,
    Record,
    RecordTag,
    ScanState,
    decode_header,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Record Stream Decoder
# =============================================================================

_RECORD_CLASSES = {
    RecordTag.DATA: DataRecord,
    RecordTag.ENTRY: EntryRecord,
    RecordTag.END: EndRecord,
}


class RecordReader:
    """
    Lazy decoder for the record stream that follows the header.

    The reader borrows the buffer and keeps only a cursor, which moves
    forward by the size of each decoded record. Once the end record has
    been returned, or a decode error has been raised, iteration stops.

    Attributes:
        state: Current ScanState
        offset: Cursor position relative to the start of the buffer
        records_read: Number of records decoded so far
        error: The error that stopped the scan, if any
        trailing_bytes: Bytes left after the end record (set when DONE)

    Example:
        >>> reader = RecordReader(data[HEADER_SIZE:], base_offset=HEADER_SIZE)
        >>> for record in reader:
        ...     print(record)
        >>> reader.state
        <ScanState.DONE: 'done'>
    """

    def __init__(self, data: Buffer, base_offset: int = 0) -> None:
        """
        Initialize the reader.

        Args:
            data: The record stream bytes (everything after the header)
            base_offset: Absolute file offset of data[0], used in records
                and error reports
        """
        self._data = memoryview(data)
        self.base_offset = base_offset
        self.offset = 0
        self.records_read = 0
        self.state = ScanState.SCANNING
        self.error: Optional[SimFormatError] = None
        self.trailing_bytes = 0

    def __iter__(self) -> "RecordReader":
        return self

    def __next__(self) -> Record:
        if self.state is not ScanState.SCANNING:
            raise StopIteration

        try:
            record = self._read_record()
        except SimFormatError as e:
            self.state = ScanState.FAILED
            self.error = e
            logger.debug(f"Record scan failed: {e}")
            raise

        self.offset += record.get_size()
        self.records_read += 1

        if isinstance(record, EndRecord):
            self.state = ScanState.DONE
            self.trailing_bytes = len(self._data) - self.offset
            if self.trailing_bytes:
                logger.warning(
                    f"{self.trailing_bytes} bytes after end record at offset "
                    f"0x{self.base_offset + self.offset:08X} ignored"
                )

        return record

    @property
    def absolute_offset(self) -> int:
        """Cursor position as an absolute file offset."""
        return self.base_offset + self.offset

    def _read_record(self) -> Record:
        """Decode the record under the cursor."""
        index = self.records_read

        if self.offset >= len(self._data):
            raise TruncatedRecordError(
                "missing end record: data ends before an end record",
                offset=self.absolute_offset,
                record_index=index,
            )

        tag = self._data[self.offset]
        record_class = _RECORD_CLASSES.get(tag)
        if record_class is None:
            raise UnknownRecordTagError(tag, offset=self.absolute_offset,
                                        record_index=index)

        record, size = record_class.from_bytes(
            self._data, self.offset,
            base_offset=self.base_offset, record_index=index,
        )
        logger.debug(
            f"Record {index}: {record.get_type_name()} at offset "
            f"0x{record.offset:08X} ({size} bytes)"
        )
        return record


def iter_records(data: Buffer, base_offset: int = 0) -> RecordReader:
    """
    Create a lazy record iterator over the bytes that follow the header.

    Args:
        data: The record stream bytes
        base_offset: Absolute file offset of data[0]

    Returns:
        A RecordReader positioned at the first record
    """
    return RecordReader(data, base_offset=base_offset)


# =============================================================================
# File Loading
# =============================================================================

def check_file_size(size: int, max_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
    """
    Reject files at or above the size ceiling.

    Raises:
        FileTooLargeError: If size >= max_size
    """
    if size >= max_size:
        raise FileTooLargeError(size, max_size)


def read_image_file(
    filepath: Union[str, Path],
    max_size: int = DEFAULT_MAX_FILE_SIZE,
) -> bytes:
    """
    Read a whole Simple Code image into memory.

    The reported size is checked before reading, so an oversized regular
    file is never loaded. At most max_size bytes are then read and the
    count is checked again, which covers pipes and device files whose
    stat() size is 0.

    Args:
        filepath: Path to the .sim file
        max_size: Files of this many bytes or more are rejected

    Returns:
        The file contents

    Raises:
        FileNotFoundError: If the file doesn't exist
        FileTooLargeError: If the file is at or above max_size
    """
    filepath = Path(filepath)
    size = filepath.stat().st_size
    check_file_size(size, max_size)
    logger.debug(f"Reading {filepath} ({size} bytes)")
    with filepath.open("rb") as f:
        data = f.read(max_size)
    check_file_size(len(data), max_size)
    return data


# =============================================================================
# Image Parser
# =============================================================================

@dataclass
class SimParser:
    """
    Parser for complete Simple Code images.

    Decodes the header, every record up to the end record, and verifies
    the checksum. On failure the error is logged and re-raised; use
    RecordReader directly to keep records decoded before a failure.

    Attributes:
        data: The raw image bytes
        header: The decoded header
        records: Decoded records, end record included
        checksum: Checksum verification result
        trailing_bytes: Bytes present after the end record
        is_valid: True if the whole image decoded
        error_message: Message of the error that stopped decoding

    Example:
        >>> parser = SimParser.from_file("firmware.sim")
        >>> for record in parser.data_records():
        ...     print(f"0x{record.start_address:08X}: {record.byte_count} bytes")
    """
    # Raw image data (private, not exposed in repr)
    data: bytes = field(repr=False)

    header: Optional[Header] = None
    records: list[Record] = field(default_factory=list)
    checksum: Optional[ChecksumResult] = None
    trailing_bytes: int = 0

    is_valid: bool = False
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        """Parse the image data after initialization."""
        self._parse()

    @classmethod
    def from_file(
        cls,
        filepath: Union[str, Path],
        max_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> "SimParser":
        """
        Create a SimParser from a file path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            SimFormatError: If the file is too large or cannot be decoded
        """
        return cls(data=read_image_file(filepath, max_size))

    @classmethod
    def from_bytes(cls, data: bytes) -> "SimParser":
        """Create a SimParser from raw bytes."""
        return cls(data=data)

    def _parse(self) -> None:
        try:
            self.header = decode_header(self.data)
            self._parse_records()
            self._verify_checksum()
            self.is_valid = True
        except SimError as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Failed to parse image: {e}")
            raise

    def _parse_records(self) -> None:
        self.records.clear()

        reader = iter_records(memoryview(self.data)[HEADER_SIZE:], base_offset=HEADER_SIZE)
        for record in reader:
            self.records.append(record)

        self.trailing_bytes = reader.trailing_bytes

        total = self.get_program_byte_total()
        if self.header is not None and total != self.header.program_byte_count:
            logger.warning(
                f"Program byte count mismatch: header declares "
                f"{self.header.program_byte_count}, data records hold {total}"
            )

    def _verify_checksum(self) -> None:
        end = self.end_record
        self.checksum = verify_checksum(self.data, end.checksum if end else None)
        if self.checksum.is_valid:
            logger.debug("Image checksum valid")
        else:
            logger.warning(self.checksum.message)

    # =========================================================================
    # Public Query Methods
    # =========================================================================

    @property
    def end_record(self) -> Optional[EndRecord]:
        """The end record, if one was decoded."""
        if self.records and isinstance(self.records[-1], EndRecord):
            return self.records[-1]
        return None

    def data_records(self) -> list[DataRecord]:
        """List all data records in stream order."""
        return [r for r in self.records if isinstance(r, DataRecord)]

    def entry_records(self) -> list[EntryRecord]:
        """List all entry records in stream order."""
        return [r for r in self.records if isinstance(r, EntryRecord)]

    def iter_data_records(self) -> Iterator[DataRecord]:
        """Iterate over data records without building a list."""
        for record in self.records:
            if isinstance(record, DataRecord):
                yield record

    def get_program_byte_total(self) -> int:
        """Total number of program bytes carried by data records."""
        return sum(record.byte_count for record in self.iter_data_records())

    def get_info(self) -> dict:
        """
        Get summary information about the image.

        Returns:
            Dictionary with image information
        """
        if self.header is None:
            return {"error": self.error_message or "Image not parsed"}

        info = {
            "file_size": len(self.data),
            "magic_number": f"0x{self.header.magic_number:08X}",
            "program_flags": f"0x{self.header.program_flags:08X}",
            "version": f"0x{self.header.version:04X}",
            "declared_program_bytes": self.header.program_byte_count,
            "program_bytes": self.get_program_byte_total(),
            "program_bytes_match": (
                self.get_program_byte_total() == self.header.program_byte_count
            ),
            "data_record_count": len(self.data_records()),
            "entry_record_count": len(self.entry_records()),
            "total_records": len(self.records),
            "trailing_bytes": self.trailing_bytes,
        }
        if self.checksum is not None:
            stored = self.checksum.stored
            info["stored_checksum"] = None if stored is None else f"0x{stored:08X}"
            info["calculated_checksum"] = f"0x{self.checksum.calculated:08X}"
            info["checksum_valid"] = self.checksum.is_valid
        return info


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_sim(data: bytes) -> SimParser:
    """
    Parse a Simple Code image from bytes.

    Raises:
        SimFormatError: If the data is not a well-formed image
    """
    return SimParser.from_bytes(data)


def parse_sim_file(
    filepath: Union[str, Path],
    max_size: int = DEFAULT_MAX_FILE_SIZE,
) -> SimParser:
    """
    Parse a Simple Code image from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SimFormatError: If the file is too large or not a well-formed image
    """
    return SimParser.from_file(filepath, max_size)
