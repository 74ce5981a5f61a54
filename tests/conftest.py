"""
Shared fixtures for simread tests.

simread has no writer, so these fixtures build Simple Code images with
struct.pack for the decoders to read back.
"""

import struct

import pytest


def encode_header(magic=1, flags=0, program_bytes=0, version=0x0100) -> bytes:
    return struct.pack(">IIIH", magic, flags, program_bytes, version)


def encode_data_record(payload: bytes, segment_type=0, flags=0, start_address=0) -> bytes:
    return struct.pack(">BBHII", 0x01, segment_type, flags, start_address, len(payload)) + payload


def encode_entry_record(entry_address: int, segment_type=0) -> bytes:
    return struct.pack(">BIB", 0x02, entry_address, segment_type)


def encode_end_record(checksum: int) -> bytes:
    return struct.pack(">BI", 0x03, checksum)


def build_image(*records: bytes, magic=1, version=0x0100, checksum=None) -> bytes:
    """
    Build a complete image from encoded data/entry records.

    The header's program byte count is filled in from the data records.
    When checksum is None the correct checksum is calculated and stored.
    """
    body = b"".join(records)
    program_bytes = 0
    offset = 0
    while offset < len(body):
        tag = body[offset]
        if tag == 0x01:
            (count,) = struct.unpack_from(">I", body, offset + 8)
            program_bytes += count
            offset += 12 + count
        else:
            offset += 6

    prefix = encode_header(magic=magic, program_bytes=program_bytes, version=version) + body
    if checksum is None:
        # End record tag is summed; the checksum field is not
        checksum = (-(sum(prefix) + 0x03)) & 0xFFFFFFFF
    return prefix + encode_end_record(checksum)


@pytest.fixture
def example_image() -> bytes:
    """
    Header, one 4-byte data record and an end record with checksum 0.

        00000001 00000000 00000004 0100
        01 00 0000 00000000 00000004 DEADBEEF
        03 00000000
    """
    return (
        bytes.fromhex("00000001" "00000000" "00000004" "0100")
        + bytes.fromhex("01" "00" "0000" "00000000" "00000004" "DEADBEEF")
        + bytes.fromhex("03" "00000000")
    )


@pytest.fixture
def valid_image() -> bytes:
    """Two data records and an entry record, with a correct checksum."""
    return build_image(
        encode_data_record(bytes([0x86, 0x41, 0x39]), segment_type=1, start_address=0x8000),
        encode_data_record(bytes(range(20)), segment_type=2, flags=0x0010, start_address=0x9000),
        encode_entry_record(0x8000, segment_type=1),
    )


@pytest.fixture
def image_file(tmp_path, valid_image):
    """Write valid_image to disk and return its path."""
    path = tmp_path / "firmware.sim"
    path.write_bytes(valid_image)
    return path


class Encoders:
    """Namespace handed to tests that need to build their own images."""
    header = staticmethod(encode_header)
    data_record = staticmethod(encode_data_record)
    entry_record = staticmethod(encode_entry_record)
    end_record = staticmethod(encode_end_record)
    image = staticmethod(build_image)


@pytest.fixture
def enc() -> Encoders:
    return Encoders()
