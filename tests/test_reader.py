"""Tests for the little-endian byte reader."""

import pytest

from mapping_builder import fstring, i32, u16, u32
from mapping_tables.errors import InvalidEncodingError, InvalidFormatError, TruncatedInputError
from mapping_tables.reader import ByteReader


class TestIntegers:
    """Tests for fixed-width integer reads."""

    def test_little_endian(self):
        """Test that multi-byte values are little-endian."""
        reader = ByteReader(bytes([0x01, 0xC4, 0x30, 0x78, 0x56, 0x34, 0x12]))
        assert reader.read_u8() == 1
        assert reader.read_u16() == 0x30C4
        assert reader.read_u32() == 0x12345678
        assert reader.remaining == 0

    def test_signed(self):
        """Test that i32 reads are signed."""
        reader = ByteReader(i32(-1) + i32(7))
        assert reader.read_i32() == -1
        assert reader.read_i32() == 7

    def test_bool(self):
        """Test that any non-zero byte is true."""
        reader = ByteReader(bytes([0, 1, 2]))
        assert reader.read_bool() is False
        assert reader.read_bool() is True
        assert reader.read_bool() is True

    def test_read_uint_widths(self):
        """Test the variable-width reads used for lengths and counts."""
        reader = ByteReader(bytes([0x05]) + u16(300))
        assert reader.read_uint(1) == 5
        assert reader.read_uint(2) == 300
        with pytest.raises(ValueError):
            reader.read_uint(4)

    def test_position_tracking(self):
        """Test position, length and remaining."""
        reader = ByteReader(b"\x00" * 10)
        reader.read_u32()
        assert reader.position == 4
        assert reader.length == 10
        assert reader.remaining == 6


class TestTruncation:
    """Tests for reads past the end of the buffer."""

    def test_truncated_u32(self):
        """Test that a short fixed-width read fails with context."""
        reader = ByteReader(b"\x01\x02")
        with pytest.raises(TruncatedInputError) as exc_info:
            reader.read_u32()
        assert exc_info.value.needed == 4
        assert exc_info.value.available == 2
        assert exc_info.value.position == 0

    def test_truncated_bytes(self):
        """Test that read_bytes does not return partial data."""
        reader = ByteReader(b"abc")
        with pytest.raises(TruncatedInputError):
            reader.read_bytes(4)
        assert reader.position == 0


class TestStrings:
    """Tests for string reads."""

    def test_utf8(self):
        """Test decoding of UTF-8 bytes."""
        data = "Größe".encode("utf-8")
        reader = ByteReader(data)
        assert reader.read_utf8(len(data)) == "Größe"

    def test_invalid_utf8(self):
        """Test that bad UTF-8 is an encoding error."""
        reader = ByteReader(b"\xff\xfe")
        with pytest.raises(InvalidEncodingError):
            reader.read_utf8(2)

    def test_fstring_utf8(self):
        """Test a positive-length engine string."""
        reader = ByteReader(fstring("/Script/Engine"))
        assert reader.read_fstring() == "/Script/Engine"
        assert reader.remaining == 0

    def test_fstring_utf16(self):
        """Test a negative-length engine string."""
        encoded = "Ünï".encode("utf-16-le") + b"\x00\x00"
        reader = ByteReader(i32(-4) + encoded)
        assert reader.read_fstring() == "Ünï"

    def test_fstring_empty(self):
        """Test a zero-length engine string."""
        reader = ByteReader(i32(0))
        assert reader.read_fstring() == ""


class TestArrays:
    """Tests for counted arrays."""

    def test_read_array(self):
        """Test an i32-counted array of u32 values."""
        reader = ByteReader(i32(3) + u32(1) + u32(2) + u32(3))
        assert reader.read_array(lambda r: r.read_u32()) == [1, 2, 3]

    def test_negative_count(self):
        """Test that a negative count is a format error."""
        reader = ByteReader(i32(-2))
        with pytest.raises(InvalidFormatError):
            reader.read_array(lambda r: r.read_u8())
