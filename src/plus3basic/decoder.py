"""
BASIC Detokenizer
=================

Turns a tokenized program (with or without its +3DOS header) into a
plain-text listing:

    #autostart 10
    10 PRINT "HELLO"
    20 FOR I=1 TO 10
    30 NEXT I

Listing Rules
-------------
Within a line body, each byte is handled as follows:

- $0E: hidden number marker; it and the 5 packed bytes after it are
  skipped, since the literal's digits were already listed
- Token: the keyword is listed. If the next byte is a letter, digit,
  double quote or period, one space is added so the keyword does not run
  into its operand ("PRINT A", "GO TO 10", "PRINT "HI"")
- $20-$7E: listed as the ASCII character
- $7F: listed as the copyright glyph
- Anything else (colour control codes, unassigned tokens): dropped

The "#autostart" directive is listed first when the header names an
autostart line, so txt2bas can restore it.

Best Effort
-----------
Decoding never fails. A truncated file lists every complete line before
the truncation point.
"""

from typing import Optional
import logging

from plus3basic.config import CodecConfig, DEFAULT_CONFIG
from plus3basic.numbers import HIDDEN_NUMBER_MARKER, HIDDEN_NUMBER_SIZE, unpack_number
from plus3basic.program import ProgramImage
from plus3basic.tokens import TOKEN_TABLE, TokenTable

# Logger for this module
logger = logging.getLogger(__name__)


# Directive naming the autostart line in a text listing
AUTOSTART_DIRECTIVE = "#autostart"

# Byte listed as the copyright glyph
COPYRIGHT_BYTE = 0x7F


def _needs_space_after_token(next_byte: int) -> bool:
    """Check whether a keyword must be followed by a space before next_byte."""
    if next_byte >= 0x80 or next_byte == HIDDEN_NUMBER_MARKER:
        return False
    char = chr(next_byte)
    return char.isalnum() or char in "\"."


class BasicDecoder:
    """
    Lists tokenized BASIC programs as text.

    Example:
        >>> decoder = BasicDecoder()
        >>> decoder.decode_line(bytes([0xF5, 0x22, 0x48, 0x49, 0x22]))
        'PRINT "HI"'
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        table: TokenTable = TOKEN_TABLE,
    ):
        self.config = config or DEFAULT_CONFIG
        self.table = table

    def decode(self, data: bytes) -> str:
        """
        List a program file.

        Args:
            data: File contents, with or without a +3DOS header

        Returns:
            The listing, one "<number> <text>" line per program line,
            each ending in a newline
        """
        return self.render(ProgramImage.from_bytes(data))

    def render(self, image: ProgramImage) -> str:
        """List an already parsed program."""
        output_lines = []

        if image.autostart is not None:
            output_lines.append(f"{AUTOSTART_DIRECTIVE} {image.autostart}")

        for line in image:
            output_lines.append(f"{line.number} {self.decode_line(line.content, line.number)}")

        return "".join(f"{text}\n" for text in output_lines)

    def decode_line(self, content: bytes, line_number: Optional[int] = None) -> str:
        """
        List the body of one line.

        Args:
            content: Line body without the $0D terminator
            line_number: BASIC line number, used for debug logging only

        Returns:
            The line text
        """
        parts: list[str] = []
        end = len(content)
        i = 0

        while i < end:
            byte = content[i]

            # Hidden number: skip marker and packed value
            if byte == HIDDEN_NUMBER_MARKER:
                if logger.isEnabledFor(logging.DEBUG):
                    packed = content[i + 1:i + 1 + HIDDEN_NUMBER_SIZE]
                    logger.debug(
                        f"Line {line_number}: hidden number {packed.hex(' ')} "
                        f"(value {unpack_number(packed)})"
                    )
                i += 1 + HIDDEN_NUMBER_SIZE
                continue

            if self.table.is_token(byte):
                parts.append(self.table.lookup_by_code(byte))
                if i + 1 < end and _needs_space_after_token(content[i + 1]):
                    parts.append(" ")
            elif 0x20 <= byte <= 0x7E:
                parts.append(chr(byte))
            elif byte == COPYRIGHT_BYTE:
                parts.append(self.config.copyright_glyph)
            # Everything else is dropped

            i += 1

        return "".join(parts)


def decode(data: bytes, config: Optional[CodecConfig] = None) -> str:
    """
    List a tokenized BASIC program as text.

    Args:
        data: File contents, with or without a +3DOS header
        config: Optional codec configuration

    Returns:
        The text listing

    Example:
        >>> decode(bytes([0x00, 0x0A, 0x02, 0x00, 0xFB, 0x0D]))
        '10 CLS\\n'
    """
    return BasicDecoder(config).decode(data)
