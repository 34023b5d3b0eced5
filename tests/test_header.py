"""
+3DOS Header Unit Tests
=======================

Test Categories
---------------
1. Build: header layout, checksum and autostart sentinel
2. Read: signature recognition and autostart extraction
"""

import logging

import pytest

from plus3basic.errors import HeaderError
from plus3basic.header import (
    HEADER_SIZE,
    NO_AUTOSTART,
    FileType,
    Plus3DosHeader,
    build_header,
    calculate_checksum,
    has_header,
    read_header,
)


# =============================================================================
# Header Build Tests
# =============================================================================

class TestBuildHeader:
    """Tests for building +3DOS headers."""

    def test_length(self):
        """Test that the header is exactly 128 bytes."""
        assert len(build_header(100, 10)) == HEADER_SIZE

    def test_fixed_fields(self):
        """Test signature, soft-EOF, issue and version."""
        header = build_header(100, 10)
        assert header[0:8] == b"PLUS3DOS"
        assert header[8] == 0x1A
        assert header[9] == 0x01
        assert header[10] == 0x00

    def test_sizes(self):
        """Test total size and both program length fields."""
        header = build_header(100, 10)
        assert header[11:15] == (100 + 128).to_bytes(4, "little")
        assert header[15] == FileType.PROGRAM
        assert header[16:18] == (100).to_bytes(2, "little")
        assert header[20:22] == (100).to_bytes(2, "little")

    def test_autostart(self):
        """Test that the autostart line is stored little-endian."""
        header = build_header(100, 1000)
        assert header[18:20] == bytes([0xE8, 0x03])

    def test_reserved_bytes_zero(self):
        """Test that bytes 22-126 are zero."""
        assert build_header(100, 10)[22:127] == bytes(105)

    def test_checksum(self):
        """Test that byte 127 is the sum of bytes 0-126 modulo 256."""
        for length, autostart in [(0, None), (100, 10), (65535, 9999)]:
            header = build_header(length, autostart)
            assert header[127] == sum(header[:127]) % 256
            assert header[127] == calculate_checksum(header)

    def test_sentinel_autostart(self):
        """Test that 32768 is written as the no-autostart sentinel."""
        header = build_header(10, NO_AUTOSTART)
        assert header[18:20] == (32768).to_bytes(2, "little")

    def test_out_of_range_autostart_becomes_sentinel(self):
        """Test that None, negative and large values mean no autostart."""
        for autostart in (None, -1, 32768, 40000):
            header = build_header(10, autostart)
            assert header[18:20] == bytes([0x00, 0x80])

    def test_largest_autostart(self):
        """Test that 32767 is still a valid line."""
        assert build_header(10, 32767)[18:20] == bytes([0xFF, 0x7F])

    def test_large_program_masked(self, caplog):
        """Test that lengths above 65535 keep the full total and mask the 16-bit fields."""
        with caplog.at_level(logging.WARNING):
            header = build_header(70000, NO_AUTOSTART)
        assert len(header) == HEADER_SIZE
        assert header[11:15] == (70000 + 128).to_bytes(4, "little")
        assert header[16:18] == (70000 & 0xFFFF).to_bytes(2, "little")
        assert header[20:22] == (70000 & 0xFFFF).to_bytes(2, "little")
        assert header[127] == sum(header[:127]) % 256
        assert "70000" in caplog.text

    def test_negative_length(self):
        """Test that a negative length raises HeaderError."""
        with pytest.raises(HeaderError):
            build_header(-1, None)


# =============================================================================
# Header Read Tests
# =============================================================================

class TestReadHeader:
    """Tests for recognizing and reading +3DOS headers."""

    def test_read_built_header(self):
        """Test that a built header reads back."""
        header = read_header(build_header(50, 20) + bytes(50))
        assert header is not None
        assert header.autostart == 20
        assert header.program_length == 50
        assert header.file_size == 178
        assert header.variables_offset == 50

    def test_sentinel_reads_as_none(self):
        """Test that autostart 32768 is not surfaced."""
        header = read_header(build_header(10, NO_AUTOSTART))
        assert header is not None
        assert header.autostart_line == NO_AUTOSTART
        assert header.autostart is None

    def test_headerless_input(self):
        """Test that a raw program is not mistaken for a header."""
        data = bytes([0x00, 0x0A, 0x02, 0x00, 0xFB, 0x0D]) * 30
        assert read_header(data) is None
        assert not has_header(data)

    def test_too_short(self):
        """Test that a signature without 128 bytes is not a header."""
        assert read_header(b"PLUS3DOS" + bytes(50)) is None

    def test_alternate_signature(self):
        """Test that the 7-byte ZXPLUS3 prefix is accepted."""
        data = bytearray(build_header(10, 30))
        data[0:8] = b"ZXPLUS3?"
        header = read_header(bytes(data))
        assert header is not None
        assert header.autostart == 30

    def test_wrong_signature(self):
        """Test that a near-miss signature is rejected."""
        data = bytearray(build_header(10, 30))
        data[7:8] = b"X"
        assert read_header(bytes(data)) is None

    def test_checksum_mismatch_still_reads(self, caplog):
        """Test that a bad checksum is reported but not fatal."""
        data = bytearray(build_header(10, 30))
        data[127] ^= 0xFF
        with caplog.at_level(logging.WARNING):
            header = read_header(bytes(data))
        assert header is not None
        assert header.autostart == 30
        assert not header.verify_checksum(bytes(data))
        assert "checksum" in caplog.text

    def test_dataclass_round_trip(self):
        """Test to_bytes/from_bytes on Plus3DosHeader."""
        original = Plus3DosHeader.for_program(300, 100)
        restored = Plus3DosHeader.from_bytes(original.to_bytes())
        assert restored.program_length == 300
        assert restored.autostart == 100
        assert restored.checksum == original.checksum

    def test_from_bytes_too_short(self):
        """Test that short data raises ValueError."""
        with pytest.raises(ValueError):
            Plus3DosHeader.from_bytes(bytes(20))

    def test_file_type_names(self):
        """Test human-readable file type names."""
        assert FileType.get_name(0) == "Program"
        assert FileType.get_name(3) == "Code"
        assert "Unknown" in FileType.get_name(9)
