"""
BASIC Tokenizer
===============

Turns a plain-text listing into a tokenized program, ready to be written
after a +3DOS header.

Source Format
-------------
    #autostart 10           Directive: run from line 10 after loading
    # any other comment     Skipped
    10 PRINT "HELLO"        Numbered line
    GO TO 10                Unnumbered line: previous number + 10

Lines end at LF, CRLF or CR; other control characters stay part of the
line. Blank lines are skipped. Lines are trimmed before processing. A line
without a number gets the previous line's number plus the configured
step (10 by default); the first unnumbered line gets 10.

Tokenizing a Line
-----------------
The line is scanned left to right. At each position the first rule that
applies wins:

1. String literal: from '"' to the next '"' (or the end of the line),
   copied as is, so keywords inside strings stay text
2. Number: digits and periods (or a period followed by a digit). The
   text is copied, then the $0E marker and the 5-byte packed value
3. Comment: ';' with only spaces between it and the start of the line
   or a ':'. The rest of the line is copied as is
4. Keyword: the longest keyword matching here, in any case. Alphabetic
   keywords must not be preceded by a letter or followed by a letter or
   digit, so FOR is not found in FORMAT or BEFORE. REM copies the rest of
   the line as is; any other keyword swallows the spaces after it
5. Anything else is copied as a single byte

A number that does not parse (for example "1.2.3") is not an error: its
characters go through the rules again one at a time.

Characters outside Latin-1 have no byte value in the Spectrum character
set and are written as "?" with a warning.
"""

from typing import NamedTuple, Optional
import logging
import re

from plus3basic.config import CodecConfig, DEFAULT_CONFIG
from plus3basic.decoder import AUTOSTART_DIRECTIVE, COPYRIGHT_BYTE
from plus3basic.errors import LineNumberError
from plus3basic.header import build_header
from plus3basic.numbers import HIDDEN_NUMBER_MARKER, pack_number
from plus3basic.program import ProgramImage
from plus3basic.tokens import REM_TOKEN, TOKEN_TABLE, TokenTable

# Logger for this module
logger = logging.getLogger(__name__)


# Explicit line number: digits, whitespace, then the statement text
LINE_NUMBER_PATTERN = re.compile(r"^([0-9]+)\s+(.*)$")

# Source line breaks; other control characters stay inside the line
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

DIGITS = "0123456789"

# Largest BASIC line number / line length the record fields can hold
MAX_LINE_NUMBER = 0xFFFF
MAX_LINE_LENGTH = 0xFFFF


class EncodedProgram(NamedTuple):
    """
    Result of tokenizing a listing.

    Attributes:
        data: Concatenated line records, without a header
        autostart: Line named by "#autostart", or None
    """
    data: bytes
    autostart: Optional[int]

    def with_header(self) -> bytes:
        """The program preceded by its +3DOS header."""
        return build_header(len(self.data), self.autostart) + self.data


def _is_digit(char: str) -> bool:
    return char in DIGITS


def _parse_number(literal: str) -> Optional[float]:
    try:
        return float(literal)
    except ValueError:
        return None


def _starts_comment(text: str, index: int) -> bool:
    """Check whether the ';' at index opens a trailing comment."""
    back = index - 1
    while back >= 0 and text[back] == " ":
        back -= 1
    return back < 0 or text[back] == ":"


class BasicEncoder:
    """
    Tokenizes text listings into BASIC programs.

    Example:
        >>> encoder = BasicEncoder()
        >>> encoder.tokenize("CLS").hex(" ")
        'fb'
        >>> program = encoder.encode("10 PRINT 1")
        >>> program.data.hex(" ")
        '00 0a 09 00 f5 31 0e 00 00 01 00 00 0d'
    """

    def __init__(
        self,
        config: Optional[CodecConfig] = None,
        table: TokenTable = TOKEN_TABLE,
    ):
        self.config = config or DEFAULT_CONFIG
        self.table = table

    # =========================================================================
    # Program Level
    # =========================================================================

    def encode(self, text: str) -> EncodedProgram:
        """
        Tokenize a complete listing.

        Args:
            text: The listing, directives included

        Returns:
            EncodedProgram with the line records and the autostart line
        """
        image = self.encode_program(text)
        return EncodedProgram(data=image.program_bytes(), autostart=image.autostart)

    def encode_program(self, text: str) -> ProgramImage:
        """
        Tokenize a complete listing into a ProgramImage.

        Raises:
            LineNumberError: If strict line numbers are configured and a
                line number exceeds 65535
        """
        image = ProgramImage()
        next_number = self.config.first_line_number

        for source_line, raw in enumerate(LINE_BREAK_PATTERN.split(text), start=1):
            line = raw.strip()
            if not line:
                continue

            if line.startswith("#"):
                self._handle_directive(line, image, source_line)
                continue

            number, rest, next_number = self.split_line_number(line, next_number)
            number = self._check_line_number(number, source_line)
            content = self.tokenize(rest)

            if len(content) + 1 > MAX_LINE_LENGTH:
                logger.warning(
                    f"Line {number} is {len(content) + 1} bytes long; "
                    f"length field will be truncated"
                )

            image.add_line(number, content)
            logger.debug(f"Encoded line {number} ({len(content)} bytes)")

        return image

    def split_line_number(self, line: str, default_number: int) -> tuple[int, str, int]:
        """
        Separate an optional leading line number from the statement text.

        Args:
            line: Trimmed source line
            default_number: Number to use if the line has none

        Returns:
            Tuple of (line number, statement text, next default number)
        """
        match = LINE_NUMBER_PATTERN.match(line)
        if match:
            number = int(match.group(1))
            return number, match.group(2), number + self.config.line_number_step
        return default_number, line, default_number + self.config.line_number_step

    def _check_line_number(self, number: int, source_line: int) -> int:
        if number <= MAX_LINE_NUMBER:
            return number
        if self.config.strict_line_numbers:
            raise LineNumberError(number, line_number=source_line)
        masked = number & MAX_LINE_NUMBER
        logger.warning(
            f"Source line {source_line}: line number {number} exceeds "
            f"{MAX_LINE_NUMBER}, stored as {masked}"
        )
        return masked

    def _handle_directive(self, line: str, image: ProgramImage, source_line: int) -> None:
        if not line.lower().startswith(AUTOSTART_DIRECTIVE):
            logger.debug(f"Source line {source_line}: skipping comment")
            return

        parts = line.split()
        if len(parts) < 2:
            logger.warning(f"Source line {source_line}: {AUTOSTART_DIRECTIVE} without a line number")
            return
        try:
            image.autostart = int(parts[1])
        except ValueError:
            logger.warning(
                f"Source line {source_line}: invalid autostart line {parts[1]!r}, ignored"
            )
            return
        logger.debug(f"Autostart line set to {image.autostart}")

    # =========================================================================
    # Line Level
    # =========================================================================

    def tokenize(self, text: str) -> bytes:
        """
        Tokenize the statement text of one line.

        Args:
            text: Statement text, without the line number

        Returns:
            Line content without the $0D terminator
        """
        out = bytearray()
        length = len(text)
        i = 0

        while i < length:
            char = text[i]

            # String literal, closing quote included when present
            if char == '"':
                close = text.find('"', i + 1)
                stop = length if close == -1 else close + 1
                out += self._literal_bytes(text[i:stop])
                i = stop
                continue

            # Number: visible digits, then the hidden packed value
            if _is_digit(char) or (char == "." and i + 1 < length and _is_digit(text[i + 1])):
                j = i
                while j < length and (_is_digit(text[j]) or text[j] == "."):
                    j += 1
                literal = text[i:j]
                value = _parse_number(literal)
                if value is not None:
                    out += literal.encode("ascii")
                    out.append(HIDDEN_NUMBER_MARKER)
                    out += pack_number(value)
                    i = j
                    continue

            # Trailing comment
            if char == ";" and _starts_comment(text, i):
                out += self._literal_bytes(text[i:])
                break

            match = self.match_keyword(text, i)
            if match is not None:
                spelling, code = match
                out.append(code)
                i += len(spelling)

                if code == REM_TOKEN:
                    out += self._literal_bytes(text[i:])
                    break

                while i < length and text[i] == " ":
                    i += 1
                continue

            glyph = self.config.copyright_glyph
            if text.startswith(glyph, i):
                out.append(COPYRIGHT_BYTE)
                i += len(glyph)
                continue

            out += self._literal_bytes(char)
            i += 1

        return bytes(out)

    def match_keyword(self, text: str, index: int) -> Optional[tuple[str, int]]:
        """
        Find the longest keyword starting at index.

        Returns:
            Tuple of (matched spelling, token code), or None
        """
        length = len(text)
        for spelling in self.table.keywords_by_length():
            end = index + len(spelling)
            if end > length:
                continue
            if text[index:end].upper() != spelling:
                continue

            if spelling[0].isalpha():
                if index > 0 and text[index - 1].isalpha():
                    continue
                if end < length and text[end].isalnum():
                    continue

            return spelling, self.table.lookup_by_name(spelling)
        return None

    def _literal_bytes(self, text: str) -> bytes:
        """Convert literal text to bytes, one byte per character."""
        text = text.replace(self.config.copyright_glyph, chr(COPYRIGHT_BYTE))
        try:
            return text.encode("latin-1")
        except UnicodeEncodeError:
            logger.warning(f"Characters outside Latin-1 replaced with '?' in {text!r}")
            return text.encode("latin-1", errors="replace")


def encode(text: str, config: Optional[CodecConfig] = None) -> EncodedProgram:
    """
    Tokenize a text listing.

    Args:
        text: The listing
        config: Optional codec configuration

    Returns:
        EncodedProgram; unpacks as (data, autostart). Pass both to
        build_header() to produce the +3DOS header.

    Example:
        >>> data, autostart = encode("#autostart 10\\n10 CLS")
        >>> autostart
        10
    """
    return BasicEncoder(config).encode(text)
