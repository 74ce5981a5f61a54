"""
Text rendering for decoded Simple Code images.

Each function returns a list of lines without trailing newlines; callers
decide where the lines go. Payload visibility is a rendering option only;
the decoders always produce full payloads.
"""

from dataclasses import dataclass
from typing import Optional

from simread.config import DEFAULT_PAYLOAD_BYTES_PER_LINE, SimreadConfig
from simread.sim.checksum import ChecksumResult
from simread.sim.records import DataRecord, EndRecord, EntryRecord, Header, SimRecord


@dataclass
class RenderOptions:
    hide_program_bytes: bool = False
    payload_bytes_per_line: int = DEFAULT_PAYLOAD_BYTES_PER_LINE

    @classmethod
    def from_config(cls, config: SimreadConfig) -> "RenderOptions":
        return cls(
            hide_program_bytes=config.hide_program_bytes,
            payload_bytes_per_line=config.payload_bytes_per_line,
        )


def format_file_size(size: int) -> list[str]:
    return [f"File size = {size}"]


def format_header(header: Header) -> list[str]:
    return [
        "Header",
        f"Magic number = 0x{header.magic_number:08X}",
        f"Program flags = 0x{header.program_flags:08X}",
        f"Number of Program Bytes = {header.program_byte_count}",
        f"Version Information = 0x{header.version:04X}",
    ]


def format_payload(payload: bytes, bytes_per_line: int = DEFAULT_PAYLOAD_BYTES_PER_LINE) -> list[str]:
    """
    Format program bytes as rows of hex values.

    Example:
        >>> format_payload(bytes([0xDE, 0xAD, 0xBE, 0xEF]))
        ['  0000: DE AD BE EF']
    """
    lines = []
    for i in range(0, len(payload), bytes_per_line):
        chunk = payload[i:i + bytes_per_line]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        lines.append(f"  {i:04X}: {hex_str}")
    return lines


def format_record(
    record: SimRecord,
    options: Optional[RenderOptions] = None,
) -> list[str]:
    """Format one decoded record."""
    if options is None:
        options = RenderOptions()

    lines = [f"{record.get_type_name()} (offset 0x{record.offset:08X})"]

    if isinstance(record, DataRecord):
        lines.append(f"Segment type = 0x{record.segment_type:02X}")
        lines.append(f"Record flags = 0x{record.flags:04X}")
        lines.append(f"Record start address = 0x{record.start_address:08X}")
        lines.append(f"Number of program bytes = {record.byte_count}")
        if options.hide_program_bytes:
            lines.append("[Program bytes hidden]")
        elif record.byte_count:
            lines.append("Program bytes =")
            lines.extend(format_payload(record.payload, options.payload_bytes_per_line))
        else:
            lines.append("Program bytes = (none)")

    elif isinstance(record, EntryRecord):
        lines.append(f"Entry address = 0x{record.entry_address:08X}")
        lines.append(f"Segment type = 0x{record.segment_type:02X}")

    elif isinstance(record, EndRecord):
        lines.append(f"Checksum = 0x{record.checksum:08X}")

    return lines


def format_checksum(result: ChecksumResult) -> list[str]:
    lines = ["----", f"Calculated checksum = 0x{result.calculated:08X}"]
    if result.stored is None:
        lines.append("Stored checksum = (no end record)")
    else:
        lines.append(f"Stored checksum = 0x{result.stored:08X}")
    lines.append(f"Checksum: {'OK' if result.is_valid else 'MISMATCH'}")
    return lines
