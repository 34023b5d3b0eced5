"""
Program Record Unit Tests
=========================

Tests for ProgramLine and ProgramImage serialization, including the
truncated-file policy.
"""

import pytest

from plus3basic.errors import TruncatedLineError
from plus3basic.header import HEADER_SIZE, build_header
from plus3basic.program import ProgramImage, ProgramLine


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def two_line_program() -> bytes:
    """
    Two line records:
        10 CLS
        20 STOP
    """
    return bytes([
        0x00, 0x0A, 0x02, 0x00, 0xFB, 0x0D,
        0x00, 0x14, 0x02, 0x00, 0xE2, 0x0D,
    ])


# =============================================================================
# Program Line Tests
# =============================================================================

class TestProgramLine:
    """Tests for single line records."""

    def test_to_bytes_format(self):
        """Test [BE number][LE length][content][$0D]."""
        line = ProgramLine(number=10, content=bytes([0xFB]))
        assert line.to_bytes() == bytes([0x00, 0x0A, 0x02, 0x00, 0xFB, 0x0D])

    def test_line_number_big_endian(self):
        """Test that the line number is stored high byte first."""
        data = ProgramLine(number=1000).to_bytes()
        assert data[0:2] == bytes([0x03, 0xE8])

    def test_length_little_endian(self):
        """Test that the length is stored low byte first and counts $0D."""
        data = ProgramLine(number=1, content=b"A" * 300).to_bytes()
        assert data[2:4] == bytes([0x2D, 0x01])  # 301
        assert len(data) == 4 + 301

    def test_get_size(self):
        """Test record size calculation."""
        assert ProgramLine(number=5, content=b"AB").get_size() == 7

    def test_from_bytes(self, two_line_program: bytes):
        """Test reading consecutive records."""
        first, offset = ProgramLine.from_bytes(two_line_program)
        assert first.number == 10
        assert first.content == bytes([0xFB])
        assert offset == 6

        second, offset = ProgramLine.from_bytes(two_line_program, offset)
        assert second.number == 20
        assert second.content == bytes([0xE2])
        assert offset == 12

    def test_from_bytes_short_prefix(self):
        """Test that fewer than 4 bytes raise TruncatedLineError."""
        with pytest.raises(TruncatedLineError):
            ProgramLine.from_bytes(bytes([0x00, 0x0A]))

    def test_from_bytes_short_body(self):
        """Test that a body running past the buffer raises TruncatedLineError."""
        with pytest.raises(TruncatedLineError) as exc_info:
            ProgramLine.from_bytes(bytes([0x00, 0x0A, 0x14, 0x00, 0xFB, 0x0D]))
        assert exc_info.value.offset == 0

    def test_missing_terminator_only(self):
        """Test that a record cut just before its $0D is still read."""
        line, offset = ProgramLine.from_bytes(bytes([0x00, 0x0A, 0x02, 0x00, 0xFB]))
        assert line.content == bytes([0xFB])
        assert offset == 6


# =============================================================================
# Program Image Tests
# =============================================================================

class TestProgramImage:
    """Tests for whole-program parsing and serialization."""

    def test_from_bytes_headerless(self, two_line_program: bytes):
        """Test parsing a program without a header."""
        image = ProgramImage.from_bytes(two_line_program)
        assert [line.number for line in image] == [10, 20]
        assert image.header is None
        assert image.autostart is None
        assert not image.truncated

    def test_from_bytes_with_header(self, two_line_program: bytes):
        """Test that the header is stripped and its autostart kept."""
        data = build_header(len(two_line_program), 10) + two_line_program
        image = ProgramImage.from_bytes(data)
        assert len(image) == 2
        assert image.header is not None
        assert image.autostart == 10

    def test_empty(self):
        """Test that an empty buffer gives an empty program."""
        image = ProgramImage.from_bytes(b"")
        assert len(image) == 0
        assert not image.truncated

    def test_truncated_keeps_complete_lines(self, two_line_program: bytes):
        """Test that reading stops at an incomplete record."""
        data = two_line_program + bytes([0x00, 0x1E, 0x14, 0x00, 0xFB, 0x0D])
        image = ProgramImage.from_bytes(data)
        assert [line.number for line in image] == [10, 20]
        assert image.truncated

    def test_trailing_garbage_byte(self, two_line_program: bytes):
        """Test that a lone trailing byte marks the image truncated."""
        image = ProgramImage.from_bytes(two_line_program + b"\x00")
        assert len(image) == 2
        assert image.truncated

    def test_to_bytes_round_trip(self, two_line_program: bytes):
        """Test that parsing then serializing reproduces the records."""
        image = ProgramImage.from_bytes(two_line_program)
        assert image.to_bytes(with_header=False) == two_line_program

    def test_to_bytes_with_header(self, two_line_program: bytes):
        """Test that the header carries the program length and autostart."""
        image = ProgramImage.from_bytes(two_line_program)
        image.autostart = 20
        data = image.to_bytes()
        assert len(data) == HEADER_SIZE + len(two_line_program)
        assert data[:HEADER_SIZE] == build_header(len(two_line_program), 20)
        assert data[HEADER_SIZE:] == two_line_program

    def test_add_line_chaining(self):
        """Test building a program line by line."""
        image = ProgramImage().add_line(10, b"\xfb").add_line(20, b"\xe2")
        assert image.program_bytes() == bytes([
            0x00, 0x0A, 0x02, 0x00, 0xFB, 0x0D,
            0x00, 0x14, 0x02, 0x00, 0xE2, 0x0D,
        ])
