"""
+3DOS File Header
=================

Files written by +3DOS (the disk operating system of the ZX Spectrum +3,
also used by esxDOS and NextZXOS) start with a 128-byte header that
records the file type, its size and, for BASIC programs, the autostart
line.

Header Layout
-------------
    Offset  Size    Description
    ------  ----    -----------
    0       8       Signature "PLUS3DOS"
    8       1       Soft-EOF marker ($1A)
    9       1       Issue number ($01)
    10      1       Version number ($00)
    11      4       Total file size including this header (little-endian)
    15      1       File type (0 = program)
    16      2       Program length (little-endian)
    18      2       Autostart line, 32768 = none (little-endian)
    20      2       Offset of the variables area = program length
    22      105     Reserved (zero)
    127     1       Checksum: sum of bytes 0-126, modulo 256

Bytes 15-22 are the 8-byte BASIC header that a tape file would carry, so
the program length appears twice: once as the file length and once as
the start of the (empty) variables area.

Recognition
-----------
A buffer is treated as having a header when it is at least 128 bytes
long and starts with "PLUS3DOS", or with "ZXPLUS3" (written by some
emulators). Anything else is treated as a headerless program.

Reference
---------
- +3 manual, chapter 8 part 27 (+3DOS file headers)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional
import logging
import struct

from plus3basic.errors import HeaderError

# Logger for this module
logger = logging.getLogger(__name__)


# Header size in bytes
HEADER_SIZE = 128

# Signature written by +3DOS, and the alternate prefix accepted on read
SIGNATURE = b"PLUS3DOS"
ALT_SIGNATURE = b"ZXPLUS3"

SOFT_EOF = 0x1A
ISSUE = 0x01
VERSION = 0x00

# Autostart value meaning "do not auto-run"
NO_AUTOSTART = 32768

# Offset of the autostart word
AUTOSTART_OFFSET = 18

# Offset of the checksum byte
CHECKSUM_OFFSET = 127

# Largest program length the 16-bit length fields can hold
MAX_PROGRAM_LENGTH = 0xFFFF

# Largest program length the 32-bit total size field can hold
MAX_FILE_LENGTH = 0xFFFFFFFF - HEADER_SIZE


class FileType(IntEnum):
    """+3DOS file type byte (offset 15)."""
    PROGRAM = 0
    NUMBER_ARRAY = 1
    CHARACTER_ARRAY = 2
    CODE = 3

    @classmethod
    def get_name(cls, type_byte: int) -> str:
        """Get a human-readable name for a type byte."""
        try:
            return cls(type_byte).name.replace("_", " ").title()
        except ValueError:
            return f"Unknown (0x{type_byte:02X})"


# =============================================================================
# Checksum
# =============================================================================

def calculate_checksum(header: bytes) -> int:
    """
    Calculate the +3DOS header checksum.

    Args:
        header: At least the first 127 bytes of a header

    Returns:
        Sum of bytes 0-126 modulo 256
    """
    if len(header) < CHECKSUM_OFFSET:
        raise ValueError(
            f"Header too short: need at least {CHECKSUM_OFFSET} bytes, got {len(header)}"
        )
    return sum(header[:CHECKSUM_OFFSET]) % 256


def normalize_autostart(autostart: Optional[int]) -> int:
    """
    Map an autostart line to the value stored in the header.

    Lines 0-32767 are stored as given. None, negative values and anything
    from 32768 up are stored as the NO_AUTOSTART sentinel.
    """
    if autostart is None or not 0 <= autostart < NO_AUTOSTART:
        return NO_AUTOSTART
    return autostart


# =============================================================================
# Header Record
# =============================================================================

@dataclass
class Plus3DosHeader:
    """
    A +3DOS header describing a BASIC program.

    Attributes:
        program_length: Length of the program that follows the header
        autostart_line: Raw autostart word (NO_AUTOSTART = none)
        file_type: File type byte (FileType.PROGRAM for BASIC)
        variables_offset: Offset of the variables area (normally the
            program length, since programs are saved without variables)
        file_size: Total file size including the header
        signature: First 8 bytes of the header
        issue: Issue byte
        version: Version byte
        checksum: Stored checksum byte (recomputed by to_bytes)
    """
    program_length: int = 0
    autostart_line: int = NO_AUTOSTART
    file_type: int = FileType.PROGRAM
    variables_offset: Optional[int] = None
    file_size: Optional[int] = None
    signature: bytes = SIGNATURE
    issue: int = ISSUE
    version: int = VERSION
    checksum: int = 0

    def __post_init__(self) -> None:
        if self.variables_offset is None:
            self.variables_offset = self.program_length
        if self.file_size is None:
            self.file_size = self.program_length + HEADER_SIZE

    @property
    def autostart(self) -> Optional[int]:
        """Autostart line, or None when the sentinel is stored."""
        if self.autostart_line == NO_AUTOSTART:
            return None
        return self.autostart_line

    @classmethod
    def for_program(cls, program_length: int, autostart: Optional[int] = None) -> "Plus3DosHeader":
        """
        Create the header for a BASIC program of the given length.

        Lengths above 65535 are stored in full in the total size field and
        masked to 16 bits in the program length fields, with a warning.

        Raises:
            HeaderError: If the length is negative or the total size does
                not fit in 32 bits
        """
        if not 0 <= program_length <= MAX_FILE_LENGTH:
            raise HeaderError(
                f"Program length {program_length} out of range "
                f"(0-{MAX_FILE_LENGTH} bytes)"
            )
        if program_length > MAX_PROGRAM_LENGTH:
            logger.warning(
                f"Program length {program_length} exceeds {MAX_PROGRAM_LENGTH} bytes; "
                f"header length fields store {program_length & MAX_PROGRAM_LENGTH}"
            )
        return cls(
            program_length=program_length,
            autostart_line=normalize_autostart(autostart),
        )

    def to_bytes(self) -> bytes:
        """Serialize to 128 bytes, with a freshly computed checksum."""
        header = bytearray(HEADER_SIZE)
        header[0:8] = self.signature[:8].ljust(8, b"\x00")
        header[8] = SOFT_EOF
        header[9] = self.issue
        header[10] = self.version
        struct.pack_into(
            "<IBHHH",
            header,
            11,
            self.file_size & 0xFFFFFFFF,
            self.file_type,
            self.program_length & 0xFFFF,
            self.autostart_line & 0xFFFF,
            self.variables_offset & 0xFFFF,
        )
        self.checksum = calculate_checksum(header)
        header[CHECKSUM_OFFSET] = self.checksum
        return bytes(header)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Plus3DosHeader":
        """
        Deserialize a header.

        Raises:
            ValueError: If fewer than 128 bytes are given
        """
        if len(data) < HEADER_SIZE:
            raise ValueError(f"Header too short: need {HEADER_SIZE} bytes, got {len(data)}")

        file_size, file_type, program_length, autostart_line, variables_offset = (
            struct.unpack_from("<IBHHH", data, 11)
        )
        return cls(
            program_length=program_length,
            autostart_line=autostart_line,
            file_type=file_type,
            variables_offset=variables_offset,
            file_size=file_size,
            signature=bytes(data[0:8]),
            issue=data[9],
            version=data[10],
            checksum=data[CHECKSUM_OFFSET],
        )

    def verify_checksum(self, data: bytes) -> bool:
        """Check the stored checksum against the raw header bytes it came from."""
        return calculate_checksum(data) == self.checksum


# =============================================================================
# Public Helpers
# =============================================================================

def has_header(data: bytes) -> bool:
    """Check whether a buffer starts with a recognizable +3DOS header."""
    if len(data) < HEADER_SIZE:
        return False
    return data[:8] == SIGNATURE or data[:7] == ALT_SIGNATURE


def build_header(program_length: int, autostart: Optional[int] = None) -> bytes:
    """
    Build the 128-byte +3DOS header for a BASIC program.

    Args:
        program_length: Length of the tokenized program in bytes
        autostart: Line to run after loading; None (or any value outside
            0-32767) writes the "no autostart" sentinel 32768

    Returns:
        128 header bytes

    Raises:
        HeaderError: If program_length is negative

    Example:
        >>> header = build_header(100, 10)
        >>> header[:8]
        b'PLUS3DOS'
        >>> header[127] == sum(header[:127]) % 256
        True
    """
    header = Plus3DosHeader.for_program(program_length, autostart)
    logger.debug(
        f"Building header: length={program_length}, autostart={header.autostart_line}"
    )
    return header.to_bytes()


def read_header(data: bytes) -> Optional[Plus3DosHeader]:
    """
    Read the +3DOS header at the start of a buffer, if there is one.

    Args:
        data: File contents

    Returns:
        The parsed header, or None if the buffer is headerless
    """
    if not has_header(data):
        logger.debug("No +3DOS header found, treating input as raw program")
        return None

    header = Plus3DosHeader.from_bytes(data)
    if not header.verify_checksum(data):
        logger.warning(
            f"+3DOS header checksum mismatch: stored 0x{header.checksum:02X}, "
            f"calculated 0x{calculate_checksum(data):02X}"
        )
    logger.debug(
        f"+3DOS header: type={FileType.get_name(header.file_type)}, "
        f"length={header.program_length}, autostart={header.autostart_line}"
    )
    return header
