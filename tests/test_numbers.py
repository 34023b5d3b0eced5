"""
Hidden Number Unit Tests
========================

Tests for the 5-byte value stored after each numeric literal: the small
integer form and the zero fallback.
"""

from plus3basic.numbers import ZERO_NUMBER, pack_number, unpack_number


# =============================================================================
# Pack Tests
# =============================================================================

class TestPackNumber:
    """Tests for the 5-byte hidden number packer."""

    def test_positive_integer(self):
        """Test packing 42."""
        assert pack_number(42) == bytes([0x00, 0x00, 0x2A, 0x00, 0x00])

    def test_negative_integer(self):
        """Test packing -42 (sign byte $FF, magnitude follows)."""
        assert pack_number(-42) == bytes([0x00, 0xFF, 0x2A, 0x00, 0x00])

    def test_fraction_falls_back_to_zero(self):
        """Test that non-integers produce five zero bytes."""
        assert pack_number(3.14) == bytes(5)
        assert pack_number(0.5) == ZERO_NUMBER

    def test_integral_float(self):
        """Test that 10.0 packs like 10."""
        assert pack_number(10.0) == pack_number(10)

    def test_range_limits(self):
        """Test the +/-65535 boundary."""
        assert pack_number(65535) == bytes([0x00, 0x00, 0xFF, 0xFF, 0x00])
        assert pack_number(-65535) == bytes([0x00, 0xFF, 0xFF, 0xFF, 0x00])
        assert pack_number(65536) == ZERO_NUMBER
        assert pack_number(-65536) == ZERO_NUMBER

    def test_little_endian_magnitude(self):
        """Test byte order of the magnitude."""
        assert pack_number(1000) == bytes([0x00, 0x00, 0xE8, 0x03, 0x00])

    def test_non_finite(self):
        """Test that infinity and NaN fall back to zero."""
        assert pack_number(float("inf")) == ZERO_NUMBER
        assert pack_number(float("nan")) == ZERO_NUMBER

    def test_negative_zero(self):
        """Test that -0.0 packs as plain zero."""
        assert pack_number(-0.0) == bytes(5)


# =============================================================================
# Unpack Tests
# =============================================================================

class TestUnpackNumber:
    """Tests for reading the small integer form."""

    def test_reads_packed_values(self):
        """Test reading back values written by pack_number."""
        assert unpack_number(pack_number(42)) == 42
        assert unpack_number(pack_number(-1000)) == -1000

    def test_rejects_floating_point_form(self):
        """Test that a full floating-point encoding is not recognized."""
        assert unpack_number(bytes([0x81, 0x00, 0x00, 0x00, 0x00])) is None

    def test_rejects_wrong_length(self):
        """Test that short data is not recognized."""
        assert unpack_number(bytes(3)) is None
