"""
Simple Code Image Handling
==========================

This module provides read-only support for IAR Simple Code (.sim)
firmware images: a 14-byte header followed by tagged data and entry
records, terminated by an end record that carries a 32-bit checksum.

This module provides:
- **Header / decode_header**: Decode the fixed 14-byte header
- **RecordReader / iter_records**: Lazily decode the record stream
- **Checksum utilities**: Recalculate and verify the image checksum
- **SimParser**: Decode a complete image and summarize it
- **Rendering helpers**: Turn decoded values into text lines

Quick Start
-----------
Reading an image:

    >>> from simread.sim import SimParser
    >>> parser = SimParser.from_file("firmware.sim")
    >>> for record in parser.data_records():
    ...     print(f"0x{record.start_address:08X} {record.byte_count} bytes")
    >>> parser.checksum.is_valid
    True

Reference
---------
- IAR Simple Code format: http://netstorage.iar.com/SuppDB/Public/UPDINFO/006220/simple_code.htm
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Record type definitions and enums
from simread.sim.records import (
    # Layout constants
    HEADER_SIZE,
    DATA_RECORD_FIXED_SIZE,
    ENTRY_RECORD_SIZE,
    END_RECORD_SIZE,
    # Enums
    RecordTag,
    ScanState,
    # Data structures
    Header,
    SimRecord,
    DataRecord,
    EntryRecord,
    EndRecord,
    Record,
    decode_header,
)

# Checksum utilities
from simread.sim.checksum import (
    CHECKSUM_SIZE,
    ChecksumResult,
    sum_bytes,
    calculate_checksum,
    checksum_residue,
    verify_checksum,
)

# Parser classes and functions
from simread.sim.parser import (
    RecordReader,
    SimParser,
    iter_records,
    check_file_size,
    read_image_file,
    parse_sim,
    parse_sim_file,
)

# Rendering helpers
from simread.sim.render import (
    RenderOptions,
    format_file_size,
    format_header,
    format_payload,
    format_record,
    format_checksum,
)

# =============================================================================
# Module-level __all__ for explicit exports
# =============================================================================

__all__ = [
    # Layout constants
    "HEADER_SIZE",
    "DATA_RECORD_FIXED_SIZE",
    "ENTRY_RECORD_SIZE",
    "END_RECORD_SIZE",
    # Enums
    "RecordTag",
    "ScanState",
    # Data structures
    "Header",
    "SimRecord",
    "DataRecord",
    "EntryRecord",
    "EndRecord",
    "Record",
    "decode_header",
    # Checksum utilities
    "CHECKSUM_SIZE",
    "ChecksumResult",
    "sum_bytes",
    "calculate_checksum",
    "checksum_residue",
    "verify_checksum",
    # Parser
    "RecordReader",
    "SimParser",
    "iter_records",
    "check_file_size",
    "read_image_file",
    "parse_sim",
    "parse_sim_file",
    # Rendering
    "RenderOptions",
    "format_file_size",
    "format_header",
    "format_payload",
    "format_record",
    "format_checksum",
]
