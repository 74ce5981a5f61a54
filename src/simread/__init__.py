"""
simread - Inspector for IAR Simple Code Firmware Images
=======================================================

This package reads Simple Code (.sim) files, the record-based image
format produced by IAR embedded toolchains, and renders them in a
human-readable form.

A Simple Code file is a 14-byte header followed by data and entry
records and a terminating end record that carries a 32-bit checksum.
simread decodes every structure with bounds checks, reports the stage
and byte offset of any failure, and recalculates the checksum so it can
be compared with the stored one.

Main Components
---------------
- **sim**: Header and record decoders, checksum verification, rendering
- **config**: Size limit and display settings
- **cli**: The `simread` command-line tool

Quick Start
-----------
    >>> from simread import SimParser
    >>> parser = SimParser.from_file("firmware.sim")
    >>> print(parser.get_info())

Or use the command-line tool:
    $ simread firmware.sim
    $ simread firmware.sim -h        # hide program bytes
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from simread.config import SimreadConfig, DEFAULT_MAX_FILE_SIZE
from simread.errors import (
    SimError,
    SimFormatError,
    FileTooShortError,
    FileTooLargeError,
    TruncationError,
    TruncatedHeaderError,
    TruncatedRecordError,
    UnknownRecordTagError,
)
from simread.sim import (
    Header,
    DataRecord,
    EntryRecord,
    EndRecord,
    RecordTag,
    ScanState,
    ChecksumResult,
    RecordReader,
    SimParser,
    decode_header,
    iter_records,
    calculate_checksum,
    verify_checksum,
    read_image_file,
    parse_sim,
    parse_sim_file,
)

__all__ = [
    "__version__",
    # Configuration
    "SimreadConfig",
    "DEFAULT_MAX_FILE_SIZE",
    # Errors
    "SimError",
    "SimFormatError",
    "FileTooShortError",
    "FileTooLargeError",
    "TruncationError",
    "TruncatedHeaderError",
    "TruncatedRecordError",
    "UnknownRecordTagError",
    # Decoding
    "Header",
    "DataRecord",
    "EntryRecord",
    "EndRecord",
    "RecordTag",
    "ScanState",
    "ChecksumResult",
    "RecordReader",
    "SimParser",
    "decode_header",
    "iter_records",
    "calculate_checksum",
    "verify_checksum",
    "read_image_file",
    "parse_sim",
    "parse_sim_file",
]
