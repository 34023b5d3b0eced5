"""
plus3basic Error Hierarchy
==========================

This module defines the exception hierarchy for the plus3basic package.
All exceptions inherit from Plus3BasicError, allowing callers to catch all
package errors with a single except clause if desired.

Exception Hierarchy
-------------------
Plus3BasicError (base)
├── HeaderError - +3DOS header cannot be built from the given values
└── ConversionError (codec misuse)
    ├── LineNumberError - line number outside 0-65535 in strict mode
    └── TruncatedLineError - line record runs past the end of the buffer

Design Philosophy
-----------------
The codec is best-effort: malformed input never aborts a conversion.
Unknown bytes are dropped, unparseable numbers are copied as text and a
truncated file decodes up to the last complete line. Exceptions are
reserved for values the caller passes in that cannot be represented in
the binary format at all.

TruncatedLineError is raised by the low-level line reader and caught by
the program reader, which stops at that point and keeps what it has.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Plus3BasicError(Exception):
    """
    Base exception for all plus3basic errors.

        try:
            data = build_header(len(body), autostart)
        except Plus3BasicError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Header Exceptions
# =============================================================================

class HeaderError(Plus3BasicError):
    """
    A +3DOS header cannot be built.

    Raised when the program length is negative or too large for the
    32-bit total size field. Lengths that only overflow the 16-bit
    program length fields are masked with a warning instead.
    """
    pass


# =============================================================================
# Conversion Exceptions
# =============================================================================

class ConversionError(Plus3BasicError):
    """
    Base exception for codec errors.

    Attributes:
        message: The error description
        line_number: Source line (1-indexed) where the error occurred, if known
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.message = message
        self.line_number = line_number
        if line_number is not None:
            super().__init__(f"line {line_number}: {message}")
        else:
            super().__init__(message)


class LineNumberError(ConversionError):
    """
    BASIC line number outside the 16-bit range.

    Only raised when strict line numbers are enabled in CodecConfig;
    otherwise the number is masked to 16 bits and a warning is logged.
    """

    def __init__(self, number: int, line_number: Optional[int] = None):
        self.number = number
        super().__init__(
            f"BASIC line number {number} does not fit in 16 bits (0-65535)",
            line_number=line_number,
        )


class TruncatedLineError(ConversionError):
    """
    A binary line record extends past the end of the buffer.

    Attributes:
        offset: Buffer offset of the truncated record
    """

    def __init__(self, offset: int, message: str):
        self.offset = offset
        super().__init__(f"offset {offset}: {message}")
