"""
BASIC Program Records
=====================

Data structures for a tokenized BASIC program as it sits in memory (and
on disk after the +3DOS header).

Line Record Format
------------------
    Byte 0-1:  Line number (big-endian)
    Byte 2-3:  Length of the rest of the line (little-endian), counting
               the $0D terminator
    Byte 4+:   Tokenized text, then $0D

The line number is the only big-endian value in the whole file; it lets
the ROM compare line numbers a byte at a time.

Truncated Files
---------------
Reading stops at the first record that does not fit in the buffer. The
lines read so far are kept and ProgramImage.truncated is set; no
exception escapes. A record whose terminator alone is missing is still
read, since the terminator carries no information.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import logging
import struct

from plus3basic.errors import TruncatedLineError
from plus3basic.header import (
    HEADER_SIZE,
    Plus3DosHeader,
    build_header,
    read_header,
)

# Logger for this module
logger = logging.getLogger(__name__)


# End-of-line byte terminating every line record
LINE_TERMINATOR = 0x0D

# Line number + length fields
LINE_PREFIX_SIZE = 4


# =============================================================================
# Program Line
# =============================================================================

@dataclass
class ProgramLine:
    """
    One line of a tokenized program.

    Attributes:
        number: BASIC line number (0-65535)
        content: Tokenized text without the $0D terminator
    """
    number: int
    content: bytes = b""

    @property
    def body(self) -> bytes:
        """Line body as stored: content followed by the terminator."""
        return self.content + bytes([LINE_TERMINATOR])

    def get_size(self) -> int:
        """Size of the serialized record in bytes."""
        return LINE_PREFIX_SIZE + len(self.body)

    def to_bytes(self) -> bytes:
        """
        Serialize the line record.

        Line number and length are masked to 16 bits; range checks belong
        to whoever chose the values.
        """
        body = self.body
        return (
            struct.pack(">H", self.number & 0xFFFF)
            + struct.pack("<H", len(body) & 0xFFFF)
            + body
        )

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> tuple["ProgramLine", int]:
        """
        Deserialize a line record.

        Args:
            data: Buffer holding the program
            offset: Start of the record

        Returns:
            Tuple of (line, offset of the next record)

        Raises:
            TruncatedLineError: If the record does not fit in the buffer
        """
        if offset + LINE_PREFIX_SIZE > len(data):
            raise TruncatedLineError(
                offset, f"need {LINE_PREFIX_SIZE} bytes for line header, "
                f"{len(data) - offset} left"
            )

        number = struct.unpack_from(">H", data, offset)[0]
        length = struct.unpack_from("<H", data, offset + 2)[0]
        start = offset + LINE_PREFIX_SIZE

        # The declared length counts the terminator, which is not kept
        content_length = max(length - 1, 0)
        if start + content_length > len(data):
            raise TruncatedLineError(
                offset, f"line {number} declares {length} bytes, "
                f"{len(data) - start} left"
            )

        content = bytes(data[start:start + content_length])
        return cls(number=number, content=content), start + length


# =============================================================================
# Program Image
# =============================================================================

@dataclass
class ProgramImage:
    """
    A complete tokenized program.

    Attributes:
        lines: Program lines in file order
        autostart: Line to run after loading, or None
        header: The +3DOS header the program was read with, if any
        truncated: True if reading stopped at an incomplete line record
    """
    lines: list[ProgramLine] = field(default_factory=list)
    autostart: Optional[int] = None
    header: Optional[Plus3DosHeader] = field(default=None, repr=False)
    truncated: bool = False

    def __iter__(self) -> Iterator[ProgramLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def add_line(self, number: int, content: bytes) -> "ProgramImage":
        """
        Append a line.

        Returns:
            Self for method chaining
        """
        self.lines.append(ProgramLine(number=number, content=content))
        return self

    def program_bytes(self) -> bytes:
        """All line records concatenated, without a header."""
        return b"".join(line.to_bytes() for line in self.lines)

    def to_bytes(self, with_header: bool = True) -> bytes:
        """
        Serialize the program.

        A program longer than 65535 bytes gets masked header length fields
        and a logged warning.

        Args:
            with_header: Prepend a +3DOS header carrying the length and
                autostart line
        """
        program = self.program_bytes()
        if not with_header:
            return program
        return build_header(len(program), self.autostart) + program

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProgramImage":
        """
        Parse a program, with or without a +3DOS header.

        Never raises for malformed input: reading stops at the first
        incomplete line record and the image is marked truncated.
        """
        header = read_header(data)
        offset = HEADER_SIZE if header is not None else 0
        image = cls(
            autostart=header.autostart if header is not None else None,
            header=header,
        )

        while offset < len(data):
            try:
                line, offset = ProgramLine.from_bytes(data, offset)
            except TruncatedLineError as e:
                logger.warning(f"Truncated program, stopping: {e}")
                image.truncated = True
                break
            image.lines.append(line)
            logger.debug(f"Read line {line.number} ({len(line.content)} bytes)")

        return image
